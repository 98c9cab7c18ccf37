from cardlens.services.card_resolver import (
    SET_SEARCH_FALLS_THROUGH_ON_ANY_ERROR,
    CardLookupClient,
    CardResolver,
    LookupStrategy,
    run_strategies,
)
from cardlens.services.card_scanner import CardScanner, ScanResult
from cardlens.services.scryfall_client import (
    ScryfallClient,
    ScryfallConfig,
    exact_name_in_set_query,
)
from cardlens.services.vision import IDENTIFICATION_PROMPT, VisionClient

__all__ = [
    "IDENTIFICATION_PROMPT",
    "SET_SEARCH_FALLS_THROUGH_ON_ANY_ERROR",
    "CardLookupClient",
    "CardResolver",
    "CardScanner",
    "LookupStrategy",
    "ScanResult",
    "ScryfallClient",
    "ScryfallConfig",
    "VisionClient",
    "exact_name_in_set_query",
    "run_strategies",
]
