"""
Vision model client.

Sends a card photo and a fixed identification prompt to Claude and returns
the raw text answer. Parsing that text is the job of
cardlens.parsers.detection_response.
"""

import base64
import logging

import anthropic
from anthropic.types import TextBlock

from cardlens.config import settings
from cardlens.models.failure import FailureKind, VisionError

logger = logging.getLogger(__name__)

SUPPORTED_MEDIA_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})

IDENTIFICATION_PROMPT = """\
You are a Magic: The Gathering card identifier. Identify the card in this photo.

Report:
1. The card name, spelled exactly as printed
2. The set name and set code (for example "Dominaria United" / "dmu")
3. The collector number printed at the bottom of the card
4. Distinguishing features such as foil, promo, extended art, or showcase

Use the art, frame style, and set symbol to pin down the exact printing.

Answer with ONLY a JSON object of this shape, without markdown or code fences:
{"name": "Card Name", "set_code": "abc", "set_name": "Set Name", \
"collector_number": "123", "confidence": 0.95, "features": ["foil"]}

confidence is a number between 0.0 and 1.0. If you are unsure, still give
your best guess with a lower confidence."""


class VisionClient:
    """
    Client for card identification through the Anthropic Messages API.

    Returns unstructured text; raises VisionError on every failure.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        """
        Initialize the vision client.

        Args:
            api_key: Anthropic API key. Defaults to settings.anthropic_api_key.
            model: Model name. Defaults to settings.vision_model.
            max_tokens: Response token cap. Defaults to settings.vision_max_tokens.
            client: Preconfigured SDK client, mainly for tests.
        """
        self.model = model or settings.vision_model
        self.max_tokens = max_tokens or settings.vision_max_tokens
        self._client = client or anthropic.AsyncAnthropic(
            api_key=api_key or settings.anthropic_api_key or None
        )

    async def describe_card(self, image: bytes, media_type: str = "image/jpeg") -> str:
        """
        Ask the model to identify the card in `image`.

        Args:
            image: Encoded image bytes
            media_type: MIME type of `image`

        Returns:
            The model's text answer, untouched

        Raises:
            VisionError: image_invalid, empty_response, or transport_error
        """
        if not image:
            raise VisionError(FailureKind.IMAGE_INVALID, "Image payload is empty")
        if media_type not in SUPPORTED_MEDIA_TYPES:
            raise VisionError(FailureKind.IMAGE_INVALID, f"Unsupported media type: {media_type}")

        encoded = base64.standard_b64encode(image).decode("ascii")

        try:
            response = await self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": media_type,
                                    "data": encoded,
                                },
                            },
                            {"type": "text", "text": IDENTIFICATION_PROMPT},
                        ],
                    }
                ],
            )
        except anthropic.APIError as e:
            logger.warning("Vision request failed: %s", e)
            raise VisionError(FailureKind.TRANSPORT_ERROR, str(e)) from e

        text = "".join(block.text for block in response.content if isinstance(block, TextBlock))
        if not text.strip():
            raise VisionError(FailureKind.EMPTY_RESPONSE)

        logger.debug("Vision response: %s", text)
        return text
