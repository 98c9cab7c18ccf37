"""
Failure classification and response envelope.

Every failure a caller can see is one of the KnownError subclasses below,
each carrying a FailureKind, a human-readable message, and an HTTP status.
The API layer turns them into ApiResponse envelopes.

Response types:
- Success: Operation completed successfully
- KnownFailure: System knows why it failed
- UnknownFailure: System does not know why it failed

INVARIANT: No raw 500 errors may reach an API client.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Detection response parsing
    INVALID_STRUCTURE = "invalid_structure"
    MISSING_FIELD = "missing_field"

    # Card lookup
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    EXTERNAL_API_ERROR = "external_api_error"
    DECODING_ERROR = "decoding_error"

    # Vision model
    IMAGE_INVALID = "image_invalid"
    EMPTY_RESPONSE = "empty_response"
    TRANSPORT_ERROR = "transport_error"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel, Generic[T]):
    """
    Universal response envelope for all API endpoints.

    Every response is classified into one of three outcome types,
    ensuring no failure reaches the user unexplained.
    """

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Response data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
    )

    @classmethod
    def success(cls, data: T) -> "ApiResponse[T]":
        """Create a success response."""
        return cls(outcome=OutcomeType.SUCCESS, data=data)

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse[Any]":
        """
        Create a known failure response.

        Use when the system knows exactly why the operation failed.
        Example: Card not found, unparseable AI response.
        """
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )

    @classmethod
    def unknown_failure(
        cls,
        exception: Exception,
    ) -> "ApiResponse[Any]":
        """
        Create an unknown failure response.

        This is the catch-all for unexpected exceptions. The message is fixed;
        only the exception type is reported.
        """
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="I failed and I don't know why. Try again with another photo.",
                detail=type(exception).__name__,
                suggestion="If this persists, please report the issue.",
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


# =============================================================================
# DETECTION RESPONSE PARSING
# =============================================================================


class DetectionParseError(KnownError):
    """
    The AI response could not be turned into a DetectionGuess.

    Terminal for that parse attempt. Callers decide whether to re-prompt.
    """

    def __init__(self, kind: FailureKind, detail: str, field: str | None = None):
        self.field = field
        super().__init__(
            kind=kind,
            message=f"Could not parse AI response: {detail}",
            detail=detail,
            suggestion="Retake the photo with the whole card in frame.",
            status_code=422,
        )

    @classmethod
    def invalid_structure(cls, detail: str = "Invalid JSON structure") -> "DetectionParseError":
        return cls(FailureKind.INVALID_STRUCTURE, detail)

    @classmethod
    def missing_field(cls, field: str) -> "DetectionParseError":
        return cls(FailureKind.MISSING_FIELD, f"Missing required field: {field}", field=field)


# =============================================================================
# CARD LOOKUP
# =============================================================================


class CardLookupError(KnownError):
    """Base class for every failure surfaced by a card lookup client."""


class CardNotFoundError(CardLookupError):
    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message="Card not found on Scryfall.",
            suggestion="Check the card name, or enter the set and number manually.",
            status_code=404,
        )


class RateLimitedError(CardLookupError):
    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.RATE_LIMITED,
            message="Too many requests. Please wait a moment.",
            status_code=429,
        )


class NetworkError(CardLookupError):
    def __init__(self, detail: str):
        super().__init__(
            kind=FailureKind.NETWORK_ERROR,
            message=f"Network error: {detail}",
            detail=detail,
            suggestion="Check your connection and try again.",
            status_code=503,
        )


class ScryfallApiError(CardLookupError):
    def __init__(self, detail: str):
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=f"Scryfall API error: {detail}",
            detail=detail,
            status_code=502,
        )


class DecodingError(CardLookupError):
    def __init__(self, detail: str):
        super().__init__(
            kind=FailureKind.DECODING_ERROR,
            message=f"Failed to parse Scryfall response: {detail}",
            detail=detail,
            status_code=502,
        )


# =============================================================================
# VISION MODEL
# =============================================================================

_VISION_MESSAGES: dict[FailureKind, tuple[str, int]] = {
    FailureKind.IMAGE_INVALID: ("Failed to process the captured image.", 400),
    FailureKind.EMPTY_RESPONSE: ("No response received from AI.", 502),
    FailureKind.TRANSPORT_ERROR: ("Could not reach the AI service.", 503),
}


class VisionError(KnownError):
    """Raised by the vision client when no usable text comes back."""

    def __init__(self, kind: FailureKind, detail: str | None = None):
        if kind not in _VISION_MESSAGES:
            raise ValueError(f"Not a vision failure kind: {kind}")
        message, status_code = _VISION_MESSAGES[kind]
        super().__init__(
            kind=kind,
            message=message,
            detail=detail,
            status_code=status_code,
        )
