from cardlens.models.card import (
    CardFace,
    CardRecord,
    ImageUris,
    Prices,
    ScryfallErrorBody,
    SearchPage,
)
from cardlens.models.detection import DetectionGuess, clamp_confidence
from cardlens.models.failure import (
    ApiResponse,
    CardLookupError,
    CardNotFoundError,
    DecodingError,
    DetectionParseError,
    FailureDetail,
    FailureKind,
    KnownError,
    NetworkError,
    OutcomeType,
    RateLimitedError,
    ScryfallApiError,
    VisionError,
)

__all__ = [
    "ApiResponse",
    "CardFace",
    "CardLookupError",
    "CardNotFoundError",
    "CardRecord",
    "DecodingError",
    "DetectionGuess",
    "DetectionParseError",
    "FailureDetail",
    "FailureKind",
    "ImageUris",
    "KnownError",
    "NetworkError",
    "OutcomeType",
    "Prices",
    "RateLimitedError",
    "ScryfallApiError",
    "ScryfallErrorBody",
    "SearchPage",
    "VisionError",
    "clamp_confidence",
]
