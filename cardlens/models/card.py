"""
Scryfall card models.

A CardRecord is an immutable snapshot of one Scryfall card object at lookup
time. Construction implies the response decoded into the expected shape.

Card objects: https://scryfall.com/docs/api/cards
"""

from pydantic import BaseModel, ConfigDict, Field

# Scryfall separates the faces of a double-faced card this way in its own UI
FACE_TEXT_SEPARATOR = "\n\n// \n\n"


class ScryfallModel(BaseModel):
    """Base for wire models: frozen, unknown keys ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class ImageUris(ScryfallModel):
    small: str | None = None
    normal: str | None = None
    large: str | None = None
    png: str | None = None
    art_crop: str | None = None
    border_crop: str | None = None

    @property
    def preferred(self) -> str | None:
        """Normal size, falling back to large then small."""
        return self.normal or self.large or self.small


class CardFace(ScryfallModel):
    """One face of a double-faced, split, or flip card."""

    name: str
    mana_cost: str | None = None
    type_line: str | None = None
    oracle_text: str | None = None
    power: str | None = None
    toughness: str | None = None
    image_uris: ImageUris | None = None
    artist: str | None = None


class Prices(ScryfallModel):
    """Price snapshot. Scryfall reports prices as decimal strings."""

    usd: str | None = None
    usd_foil: str | None = None
    usd_etched: str | None = None
    eur: str | None = None
    eur_foil: str | None = None
    tix: str | None = None

    def to_json(self) -> str:
        """Serialize for storage alongside a collection entry."""
        return self.model_dump_json()


class CardRecord(ScryfallModel):
    """
    Canonical card printing from Scryfall.

    Attributes:
        id: Scryfall ID of this printing (stable)
        name: Canonical card name
        set_code: Lowercase set code (wire key "set")
        set_name: Full set name
        collector_number: Collector number within the set
        rarity: common, uncommon, rare, mythic, special, or bonus
    """

    id: str
    name: str
    set_code: str = Field(alias="set")
    set_name: str
    collector_number: str
    rarity: str

    oracle_id: str | None = None
    lang: str | None = None
    released_at: str | None = None
    uri: str | None = None
    scryfall_uri: str | None = None
    layout: str | None = None
    set_id: str | None = None
    set_type: str | None = None

    mana_cost: str | None = None
    cmc: float | None = None
    type_line: str | None = None
    oracle_text: str | None = None
    power: str | None = None
    toughness: str | None = None
    colors: tuple[str, ...] | None = None
    color_identity: tuple[str, ...] | None = None
    keywords: tuple[str, ...] | None = None

    image_uris: ImageUris | None = None
    card_faces: tuple[CardFace, ...] | None = None
    prices: Prices | None = None
    legalities: dict[str, str] | None = None

    foil: bool | None = None
    nonfoil: bool | None = None
    promo: bool | None = None
    reprint: bool | None = None
    digital: bool | None = None
    artist: str | None = None
    border_color: str | None = None
    frame: str | None = None
    full_art: bool | None = None
    textless: bool | None = None
    reserved: bool | None = None

    @property
    def best_image_url(self) -> str | None:
        """Best display image, using the front face for double-faced cards."""
        if self.image_uris is not None:
            return self.image_uris.preferred
        if self.card_faces:
            front = self.card_faces[0]
            if front.image_uris is not None:
                return front.image_uris.preferred
        return None

    @property
    def full_oracle_text(self) -> str | None:
        """Rules text, combining both faces when the card has no top-level text."""
        if self.oracle_text is not None:
            return self.oracle_text
        if self.card_faces:
            texts = [face.oracle_text for face in self.card_faces if face.oracle_text is not None]
            return FACE_TEXT_SEPARATOR.join(texts) if texts else None
        return None

    @property
    def formatted_price(self) -> str | None:
        if self.prices is None or self.prices.usd is None:
            return None
        return f"${self.prices.usd}"

    @property
    def formatted_foil_price(self) -> str | None:
        if self.prices is None or self.prices.usd_foil is None:
            return None
        return f"${self.prices.usd_foil}"


class SearchPage(ScryfallModel):
    """One page of a Scryfall list response from /cards/search."""

    object: str = "list"
    total_cards: int = 0
    has_more: bool = False
    data: tuple[CardRecord, ...] = ()


class ScryfallErrorBody(ScryfallModel):
    """Error object Scryfall returns alongside non-2xx statuses."""

    object: str = "error"
    code: str | None = None
    status: int | None = None
    details: str | None = None
