"""
Card scanning pipeline.

Sequences photo -> vision model -> parser -> resolver, keeping a partial
result (guess without card) distinguishable from total failure.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from cardlens.models.card import CardRecord
from cardlens.models.detection import DetectionGuess
from cardlens.models.failure import CardLookupError
from cardlens.parsers.detection_response import parse_detection_response

logger = logging.getLogger(__name__)


class CardDescriber(Protocol):
    async def describe_card(self, image: bytes, media_type: str = "image/jpeg") -> str: ...


class GuessResolver(Protocol):
    async def resolve(self, guess: DetectionGuess) -> CardRecord: ...


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one scan."""

    guess: DetectionGuess
    """What the vision model thinks the card is."""

    card: CardRecord | None = None
    """Canonical card, absent when resolution failed."""

    resolution_error: CardLookupError | None = None
    """Why resolution failed, when it did."""

    @property
    def resolved(self) -> bool:
        return self.card is not None


class CardScanner:
    """
    Identifies a card from a photo.

    Vision and parse failures are raised, since there is nothing to show.
    Resolution failures are returned inside the ScanResult alongside the guess.
    """

    def __init__(self, vision: CardDescriber, resolver: GuessResolver) -> None:
        self._vision = vision
        self._resolver = resolver

    async def scan(self, image: bytes, media_type: str = "image/jpeg") -> ScanResult:
        """
        Run the full pipeline for one photo.

        Raises:
            VisionError: The vision model produced no usable text
            DetectionParseError: The text could not be parsed into a guess
        """
        text = await self._vision.describe_card(image, media_type)
        guess = parse_detection_response(text)
        logger.info("Vision guess: %s (%s)", guess.name, guess.confidence_percentage)

        try:
            card = await self._resolver.resolve(guess)
        except CardLookupError as e:
            logger.info("Could not resolve %r: %s", guess.name, e.message)
            return ScanResult(guess=guess, resolution_error=e)

        return ScanResult(guess=guess, card=card)
