"""
Request-scoped service wiring.

Routes receive their collaborators through these providers so tests can
swap them with app.dependency_overrides.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status

from cardlens.config import settings
from cardlens.services.card_resolver import CardResolver
from cardlens.services.card_scanner import CardScanner
from cardlens.services.scryfall_client import ScryfallClient, ScryfallConfig
from cardlens.services.vision import VisionClient


def get_scryfall_client() -> ScryfallClient:
    return ScryfallClient(ScryfallConfig.from_settings())


def get_resolver(
    client: Annotated[ScryfallClient, Depends(get_scryfall_client)],
) -> CardResolver:
    return CardResolver(client)


def get_vision_client() -> VisionClient:
    if not settings.anthropic_api_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Anthropic API key not configured",
        )
    return VisionClient(api_key=settings.anthropic_api_key)


def get_scanner(
    vision: Annotated[VisionClient, Depends(get_vision_client)],
    resolver: Annotated[CardResolver, Depends(get_resolver)],
) -> CardScanner:
    return CardScanner(vision, resolver)
