"""
Card Resolution Service.

Maps a DetectionGuess onto one canonical Scryfall CardRecord by walking an
ordered chain of lookup strategies, most precise first:

1. Exact printing by set code + collector number
2. Exact name search restricted to the guessed set
3. Exact name lookup
4. Fuzzy name lookup (last resort)

INVARIANTS:
1. Strategies run strictly in order, one at a time, at most once each
2. An ineligible strategy is skipped without issuing a call
3. Only "not found" moves the chain forward; any other lookup error aborts
   it and is raised verbatim (strategy 2 is the exception, see
   SET_SEARCH_FALLS_THROUGH_ON_ANY_ERROR)
4. Exhausting the chain raises CardNotFoundError
5. Cancellation propagates as asyncio.CancelledError and is never
   reported as a lookup failure
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from cardlens.models.card import CardRecord, SearchPage
from cardlens.models.detection import DetectionGuess
from cardlens.models.failure import CardNotFoundError
from cardlens.services.scryfall_client import exact_name_in_set_query

logger = logging.getLogger(__name__)

# Strategy 2 is a best-effort refinement: when True, any error it raises
# (network and rate limiting included) falls through to strategy 3 instead
# of aborting the chain. Set to False to treat it like the other strategies.
SET_SEARCH_FALLS_THROUGH_ON_ANY_ERROR = True


class CardLookupClient(Protocol):
    """Read-only lookups the resolver depends on. ScryfallClient implements this."""

    async def lookup_by_code(self, set_code: str, collector_number: str) -> CardRecord: ...

    async def search(self, query: str, page: int = 1) -> SearchPage: ...

    async def search_by_name_exact(self, name: str) -> CardRecord: ...

    async def search_by_name_fuzzy(self, name: str) -> CardRecord: ...


@dataclass(frozen=True)
class LookupStrategy:
    """
    One step of the resolution chain.

    Attributes:
        name: Label used in logs
        is_eligible: Whether the guess carries the inputs this step needs
        lookup: Performs the remote call for a guess
        falls_through_on: Exceptions that move the chain to the next step
    """

    name: str
    is_eligible: Callable[[DetectionGuess], bool]
    lookup: Callable[[DetectionGuess], Awaitable[CardRecord]]
    falls_through_on: tuple[type[Exception], ...] = (CardNotFoundError,)


def _has_text(value: str | None) -> bool:
    return bool(value)


async def run_strategies(
    strategies: Sequence[LookupStrategy],
    guess: DetectionGuess,
) -> CardRecord:
    """
    Return the first strategy result, walking the chain in order.

    Raises:
        CardNotFoundError: Every eligible strategy fell through
        CardLookupError: A strategy failed with an error it does not fall through on
    """
    for strategy in strategies:
        if not strategy.is_eligible(guess):
            logger.debug("Skipping %s: guess lacks required fields", strategy.name)
            continue

        logger.debug("Trying %s for %r", strategy.name, guess.name)
        try:
            card = await strategy.lookup(guess)
        except strategy.falls_through_on as e:
            logger.debug("%s fell through: %s", strategy.name, e)
            continue

        logger.info("Resolved %r to %s (%s) via %s", guess.name, card.name, card.id, strategy.name)
        return card

    logger.info("No strategy resolved %r", guess.name)
    raise CardNotFoundError()


class CardResolver:
    """
    Resolves DetectionGuess -> CardRecord against a card lookup client.

    The client is the only shared resource and is stateless from the
    resolver's point of view; concurrent resolve() calls need no locking.
    """

    def __init__(self, client: CardLookupClient) -> None:
        self._client = client
        self._strategies = self._build_strategies()

    @property
    def strategies(self) -> tuple[LookupStrategy, ...]:
        return self._strategies

    def _build_strategies(self) -> tuple[LookupStrategy, ...]:
        set_search_falls_through_on: tuple[type[Exception], ...] = (
            (Exception,) if SET_SEARCH_FALLS_THROUGH_ON_ANY_ERROR else (CardNotFoundError,)
        )
        return (
            LookupStrategy(
                name="set code + collector number",
                is_eligible=lambda g: _has_text(g.set_code) and _has_text(g.collector_number),
                lookup=self._lookup_by_code,
            ),
            LookupStrategy(
                name="name + set search",
                is_eligible=lambda g: _has_text(g.set_code),
                lookup=self._search_name_in_set,
                falls_through_on=set_search_falls_through_on,
            ),
            LookupStrategy(
                name="exact name",
                is_eligible=lambda g: True,
                lookup=self._lookup_exact_name,
            ),
            LookupStrategy(
                name="fuzzy name",
                is_eligible=lambda g: True,
                lookup=self._lookup_fuzzy_name,
            ),
        )

    async def resolve(self, guess: DetectionGuess) -> CardRecord:
        """
        Resolve a guess to a single canonical card.

        Args:
            guess: Parsed vision model output

        Returns:
            The first CardRecord any strategy produced

        Raises:
            CardNotFoundError: No strategy found the card
            RateLimitedError, NetworkError, ScryfallApiError, DecodingError:
                Raised verbatim by the strategy that hit it
        """
        return await run_strategies(self._strategies, guess)

    async def _lookup_by_code(self, guess: DetectionGuess) -> CardRecord:
        return await self._client.lookup_by_code(
            guess.set_code or "",
            guess.collector_number or "",
        )

    async def _search_name_in_set(self, guess: DetectionGuess) -> CardRecord:
        page = await self._client.search(exact_name_in_set_query(guess.name, guess.set_code or ""))
        if not page.data:
            raise CardNotFoundError()
        return page.data[0]

    async def _lookup_exact_name(self, guess: DetectionGuess) -> CardRecord:
        return await self._client.search_by_name_exact(guess.name)

    async def _lookup_fuzzy_name(self, guess: DetectionGuess) -> CardRecord:
        return await self._client.search_by_name_fuzzy(guess.name)
