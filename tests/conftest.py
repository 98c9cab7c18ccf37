from collections.abc import Callable
from typing import Any

import pytest

from cardlens.models.card import CardRecord

CardJsonFactory = Callable[..., dict[str, Any]]
CardFactory = Callable[..., CardRecord]


def _card_json(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "object": "card",
        "id": "e3285e6b-3e79-4d7c-bf96-d920f973b122",
        "name": "Lightning Bolt",
        "lang": "en",
        "uri": "https://api.scryfall.com/cards/e3285e6b-3e79-4d7c-bf96-d920f973b122",
        "scryfall_uri": "https://scryfall.com/card/lea/161/lightning-bolt",
        "layout": "normal",
        "set_id": "288bd996-960e-448b-a187-9504c1c8b96e",
        "set": "lea",
        "set_name": "Limited Edition Alpha",
        "set_type": "core",
        "collector_number": "161",
        "rarity": "common",
    }
    data.update(overrides)
    return data


@pytest.fixture
def card_json() -> CardJsonFactory:
    """Build a minimal Scryfall card object, as returned by /cards endpoints."""
    return _card_json


@pytest.fixture
def make_card() -> CardFactory:
    """Build a CardRecord from a Scryfall card object with overrides."""

    def factory(**overrides: Any) -> CardRecord:
        return CardRecord.model_validate(_card_json(**overrides))

    return factory


@pytest.fixture
def bolt(make_card: CardFactory) -> CardRecord:
    return make_card()
