"""Tests for Scryfall card model decoding and derived values."""

import json

import pytest
from pydantic import ValidationError

from cardlens.models.card import CardRecord, Prices, ScryfallErrorBody, SearchPage


def double_faced(card_json, **face_overrides) -> dict:
    front = {
        "name": "Delver of Secrets",
        "mana_cost": "{U}",
        "type_line": "Creature — Human Wizard",
        "oracle_text": "At the beginning of your upkeep, look at the top card of your library.",
        "image_uris": {
            "small": "https://cards.scryfall.io/small/front/delver.jpg",
            "normal": "https://cards.scryfall.io/normal/front/delver.jpg",
        },
    }
    back = {
        "name": "Insectile Aberration",
        "type_line": "Creature — Human Insect",
        "oracle_text": "Flying",
        "image_uris": {"normal": "https://cards.scryfall.io/normal/back/delver.jpg"},
    }
    front.update(face_overrides)
    return card_json(
        name="Delver of Secrets // Insectile Aberration",
        layout="transform",
        set="isd",
        set_name="Innistrad",
        collector_number="51",
        card_faces=[front, back],
    )


class TestCardRecordDecoding:
    def test_decodes_minimal_card(self, card_json) -> None:
        card = CardRecord.model_validate(card_json())

        assert card.id == "e3285e6b-3e79-4d7c-bf96-d920f973b122"
        assert card.name == "Lightning Bolt"
        assert card.set_code == "lea"
        assert card.set_name == "Limited Edition Alpha"
        assert card.collector_number == "161"
        assert card.rarity == "common"
        assert card.mana_cost is None
        assert card.card_faces is None

    def test_decodes_enrichment_fields(self, card_json) -> None:
        card = CardRecord.model_validate(
            card_json(
                oracle_id="def456",
                mana_cost="{R}",
                cmc=1.0,
                type_line="Instant",
                oracle_text="Lightning Bolt deals 3 damage to any target.",
                colors=["R"],
                keywords=[],
                artist="Christopher Rush",
                border_color="black",
                frame="1993",
                full_art=False,
                reserved=False,
                prices={"usd": "450.00", "usd_foil": None, "eur": "380.00", "tix": "0.50"},
                legalities={"vintage": "legal", "standard": "not_legal"},
            )
        )

        assert card.oracle_id == "def456"
        assert card.cmc == 1.0
        assert card.colors == ("R",)
        assert card.artist == "Christopher Rush"
        assert card.prices is not None
        assert card.prices.eur == "380.00"
        assert card.legalities == {"vintage": "legal", "standard": "not_legal"}

    def test_ignores_unknown_keys(self, card_json) -> None:
        card = CardRecord.model_validate(card_json(edhrec_rank=12, games=["paper"]))

        assert card.name == "Lightning Bolt"

    def test_missing_required_field_fails(self, card_json) -> None:
        data = card_json()
        del data["collector_number"]

        with pytest.raises(ValidationError):
            CardRecord.model_validate(data)

    def test_is_frozen(self, bolt: CardRecord) -> None:
        with pytest.raises(ValidationError):
            bolt.name = "Shock"  # type: ignore[misc]

    def test_dumps_set_code_under_wire_key(self, bolt: CardRecord) -> None:
        dumped = bolt.model_dump(by_alias=True)

        assert dumped["set"] == "lea"


class TestBestImageUrl:
    def test_prefers_normal(self, make_card) -> None:
        card = make_card(
            image_uris={
                "small": "https://img/small.jpg",
                "normal": "https://img/normal.jpg",
                "large": "https://img/large.jpg",
            }
        )

        assert card.best_image_url == "https://img/normal.jpg"

    def test_falls_back_to_large_then_small(self, make_card) -> None:
        assert make_card(image_uris={"large": "L", "small": "S"}).best_image_url == "L"
        assert make_card(image_uris={"small": "S"}).best_image_url == "S"

    def test_double_faced_uses_front_face(self, card_json) -> None:
        card = CardRecord.model_validate(double_faced(card_json))

        assert card.best_image_url == "https://cards.scryfall.io/normal/front/delver.jpg"

    def test_no_images(self, bolt: CardRecord) -> None:
        assert bolt.best_image_url is None


class TestFullOracleText:
    def test_single_faced(self, make_card) -> None:
        card = make_card(oracle_text="Lightning Bolt deals 3 damage to any target.")

        assert card.full_oracle_text == "Lightning Bolt deals 3 damage to any target."

    def test_double_faced_joins_faces(self, card_json) -> None:
        card = CardRecord.model_validate(double_faced(card_json))

        assert card.full_oracle_text == (
            "At the beginning of your upkeep, look at the top card of your library."
            "\n\n// \n\nFlying"
        )

    def test_faces_without_text(self, card_json) -> None:
        data = double_faced(card_json, oracle_text=None)
        data["card_faces"][1]["oracle_text"] = None

        assert CardRecord.model_validate(data).full_oracle_text is None

    def test_no_text(self, bolt: CardRecord) -> None:
        assert bolt.full_oracle_text is None


class TestPrices:
    def test_formatted_prices(self, make_card) -> None:
        card = make_card(prices={"usd": "1.25", "usd_foil": "3.50"})

        assert card.formatted_price == "$1.25"
        assert card.formatted_foil_price == "$3.50"

    def test_missing_prices(self, make_card) -> None:
        card = make_card(prices={"usd": None, "usd_foil": None})

        assert card.formatted_price is None
        assert card.formatted_foil_price is None
        assert make_card().formatted_price is None

    def test_to_json(self) -> None:
        prices = Prices(usd="1.25", eur="1.10")

        decoded = json.loads(prices.to_json())

        assert decoded["usd"] == "1.25"
        assert decoded["eur"] == "1.10"
        assert decoded["tix"] is None


class TestSearchPage:
    def test_decodes_list_response(self, card_json) -> None:
        page = SearchPage.model_validate(
            {
                "object": "list",
                "total_cards": 2,
                "has_more": False,
                "data": [card_json(), card_json(id="other", collector_number="162")],
            }
        )

        assert page.total_cards == 2
        assert page.has_more is False
        assert [c.collector_number for c in page.data] == ["161", "162"]

    def test_rejects_bad_entries(self) -> None:
        with pytest.raises(ValidationError):
            SearchPage.model_validate({"object": "list", "data": [{"name": "x"}]})


class TestScryfallErrorBody:
    def test_decodes_error_object(self) -> None:
        body = ScryfallErrorBody.model_validate(
            {"object": "error", "code": "not_found", "status": 404, "details": "No card found"}
        )

        assert body.code == "not_found"
        assert body.status == 404
        assert body.details == "No card found"
