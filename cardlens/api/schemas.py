"""Request and response bodies shared by the identification endpoints."""

from pydantic import BaseModel, Field

from cardlens.models.card import CardRecord
from cardlens.models.detection import DetectionGuess
from cardlens.models.failure import FailureDetail


class DetectionGuessPayload(BaseModel):
    """A detection guess as sent by or returned to an API client."""

    name: str = Field(min_length=1, description="Card name as read from the image")
    set_code: str | None = None
    set_name: str | None = None
    collector_number: str | None = None
    confidence: float = Field(default=0.0, description="Clamped to [0.0, 1.0]")
    features: list[str] = Field(default_factory=list)

    def to_guess(self) -> DetectionGuess:
        return DetectionGuess(
            name=self.name,
            set_code=self.set_code,
            set_name=self.set_name,
            collector_number=self.collector_number,
            confidence=self.confidence,
            features=tuple(self.features),
        )


class GuessView(DetectionGuessPayload):
    """Guess plus its derived display fields."""

    is_low_confidence: bool
    confidence_percentage: str

    @classmethod
    def from_guess(cls, guess: DetectionGuess) -> "GuessView":
        return cls(
            name=guess.name,
            set_code=guess.set_code,
            set_name=guess.set_name,
            collector_number=guess.collector_number,
            confidence=guess.confidence,
            features=list(guess.features),
            is_low_confidence=guess.is_low_confidence,
            confidence_percentage=guess.confidence_percentage,
        )


class ScanRequest(BaseModel):
    """Photo to identify."""

    image_base64: str = Field(description="Base64-encoded image bytes")
    media_type: str = Field(default="image/jpeg", description="MIME type of the image")


class ScanPayload(BaseModel):
    """
    Scan outcome.

    `card` is null when resolution failed; `resolution_failure` then says why,
    and `guess` is still usable on its own.
    """

    guess: GuessView
    card: CardRecord | None = None
    resolution_failure: FailureDetail | None = None
