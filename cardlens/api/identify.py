"""
Card identification endpoints.

POST /resolve: resolve a detection guess to a canonical Scryfall card.
POST /scan: identify a card photo end to end.

Known failures are rendered by the KnownError handler in cardlens.main.
"""

import base64
import binascii
from typing import Annotated

from fastapi import APIRouter, Depends

from cardlens.api.dependencies import get_resolver, get_scanner
from cardlens.api.schemas import DetectionGuessPayload, GuessView, ScanPayload, ScanRequest
from cardlens.models.card import CardRecord
from cardlens.models.failure import ApiResponse, FailureDetail, FailureKind, VisionError
from cardlens.services.card_resolver import CardResolver
from cardlens.services.card_scanner import CardScanner

router = APIRouter(tags=["identify"])


@router.post("/resolve", response_model=ApiResponse[CardRecord])
async def resolve_guess(
    payload: DetectionGuessPayload,
    resolver: Annotated[CardResolver, Depends(get_resolver)],
) -> ApiResponse[CardRecord]:
    """Resolve a guess (e.g. corrected by the user) to a canonical card."""
    card = await resolver.resolve(payload.to_guess())
    return ApiResponse.success(card)


@router.post("/scan", response_model=ApiResponse[ScanPayload])
async def scan_image(
    request: ScanRequest,
    scanner: Annotated[CardScanner, Depends(get_scanner)],
) -> ApiResponse[ScanPayload]:
    """
    Identify the card in a photo.

    Succeeds with a guess-only payload when the AI answered but Scryfall
    could not resolve the card.
    """
    try:
        image = base64.b64decode(request.image_base64, validate=True)
    except binascii.Error as e:
        raise VisionError(FailureKind.IMAGE_INVALID, "Image is not valid base64") from e

    result = await scanner.scan(image, request.media_type)

    failure = None
    if result.resolution_error is not None:
        error = result.resolution_error
        failure = FailureDetail(
            kind=error.kind,
            message=error.message,
            detail=error.detail,
            suggestion=error.suggestion,
        )

    return ApiResponse.success(
        ScanPayload(
            guess=GuessView.from_guess(result.guess),
            card=result.card,
            resolution_failure=failure,
        )
    )
