"""
Identify a card photo from the command line.

Usage:
    python -m cardlens.jobs.identify_image photo.jpg
    python -m cardlens.jobs.identify_image --resolve-only "Lightning Bolt" --set lea --number 161
"""

import argparse
import asyncio
import json
import logging
import mimetypes
from pathlib import Path
from typing import Any

import anthropic

from cardlens.models.detection import DetectionGuess
from cardlens.models.failure import KnownError
from cardlens.services.card_resolver import CardResolver
from cardlens.services.card_scanner import CardScanner, ScanResult
from cardlens.services.scryfall_client import ScryfallClient
from cardlens.services.vision import VisionClient

logger = logging.getLogger(__name__)


def scan_result_to_dict(result: ScanResult) -> dict[str, Any]:
    """JSON-ready view of a scan result."""
    guess = result.guess
    output: dict[str, Any] = {
        "guess": {
            "name": guess.name,
            "set_code": guess.set_code,
            "set_name": guess.set_name,
            "collector_number": guess.collector_number,
            "confidence": guess.confidence_percentage,
            "low_confidence": guess.is_low_confidence,
            "features": list(guess.features),
        },
        "card": result.card.model_dump(mode="json", by_alias=True) if result.card else None,
    }
    if result.resolution_error is not None:
        output["resolution_error"] = result.resolution_error.message
    return output


async def run_scan(image_path: Path) -> ScanResult:
    """Scan one image file."""
    media_type = mimetypes.guess_type(image_path.name)[0] or "image/jpeg"
    logger.info("Scanning %s (%s)", image_path, media_type)

    image = image_path.read_bytes()
    scanner = CardScanner(VisionClient(), CardResolver(ScryfallClient()))
    return await scanner.scan(image, media_type)


async def run_resolve(guess: DetectionGuess) -> dict[str, Any]:
    """Resolve a hand-entered guess, skipping the vision model."""
    card = await CardResolver(ScryfallClient()).resolve(guess)
    return card.model_dump(mode="json", by_alias=True)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Identify a Magic card from a photo")
    parser.add_argument("image", nargs="?", type=Path, help="Path to a card photo")
    parser.add_argument("--resolve-only", metavar="NAME", help="Resolve a card name directly")
    parser.add_argument("--set", dest="set_code", help="Set code for --resolve-only")
    parser.add_argument("--number", dest="collector_number", help="Collector number")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.resolve_only is None and args.image is None:
        parser.error("an image path or --resolve-only is required")

    try:
        if args.resolve_only is not None:
            guess = DetectionGuess(
                name=args.resolve_only,
                set_code=args.set_code,
                collector_number=args.collector_number,
                confidence=1.0,
            )
            output = asyncio.run(run_resolve(guess))
        else:
            output = scan_result_to_dict(asyncio.run(run_scan(args.image)))
    except KnownError as e:
        logger.error("%s", e.message)
        return 1
    except OSError as e:
        logger.error("Could not read image: %s", e)
        return 1
    except anthropic.AnthropicError as e:
        # e.g. no API key configured
        logger.error("Vision client unavailable: %s", e)
        return 1

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
