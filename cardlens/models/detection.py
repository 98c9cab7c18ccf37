"""
Detection models.

A DetectionGuess is the vision model's unverified identification of a card.
It is created once per AI response and consumed by the card resolver.

INVARIANTS:
- name is never empty (enforced by the parser)
- confidence is always within [0.0, 1.0] (saturated on construction)
- instances are frozen
"""

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from cardlens.config import LOW_CONFIDENCE_THRESHOLD


def clamp_confidence(value: float) -> float:
    """Saturate a confidence score into [0.0, 1.0]. NaN becomes 0.0."""
    if math.isnan(value):
        return 0.0
    return min(max(float(value), 0.0), 1.0)


@dataclass(frozen=True, slots=True)
class DetectionGuess:
    """
    The AI's best guess at which card is in the photo.

    Attributes:
        name: Card name as read from the image
        set_code: Set code (e.g., "dmu"), if the model reported one
        set_name: Set name (e.g., "Dominaria United"), if reported
        collector_number: Collector number printed on the card, if reported
        confidence: Model confidence, clamped to [0.0, 1.0]
        features: Distinguishing features such as "foil" or "showcase"
    """

    name: str
    set_code: str | None = None
    set_name: str | None = None
    collector_number: str | None = None
    confidence: float = 0.0
    features: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))
        object.__setattr__(self, "features", tuple(self.features))

    @property
    def is_low_confidence(self) -> bool:
        return self.confidence < LOW_CONFIDENCE_THRESHOLD

    @property
    def confidence_percentage(self) -> str:
        """Confidence as a whole percentage, rounded half up (0.876 -> "88%")."""
        # 0.045 * 100 is 4.4999... in binary floats; go through Decimal(str())
        percent = (Decimal(str(self.confidence)) * 100).quantize(Decimal("1"), ROUND_HALF_UP)
        return f"{int(percent)}%"
