"""
Scryfall API client.

Async client for the four card lookups the resolver needs:
exact printing by set code + collector number, query search, exact name,
and fuzzy name.

Wire contract:
- set codes are lowercased before transmission
- collector numbers are percent-encoded as path segments (e.g. "38★")
- names and queries are percent-encoded as query parameters
- 404 -> CardNotFoundError, 429 -> RateLimitedError,
  other non-2xx -> ScryfallApiError, transport failure -> NetworkError,
  undecodable body -> DecodingError

API docs: https://scryfall.com/docs/api
"""

import logging
from dataclasses import dataclass
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from cardlens.config import Settings, settings
from cardlens.models.card import CardRecord, ScryfallErrorBody, ScryfallModel, SearchPage
from cardlens.models.failure import (
    CardNotFoundError,
    DecodingError,
    NetworkError,
    RateLimitedError,
    ScryfallApiError,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=ScryfallModel)


@dataclass(frozen=True)
class ScryfallConfig:
    """Connection settings injected into ScryfallClient."""

    base_url: str = "https://api.scryfall.com"
    user_agent: str = "cardlens/1.0"
    accept: str = "application/json"
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "ScryfallConfig":
        source = source or settings
        return cls(
            base_url=source.scryfall_base_url.rstrip("/"),
            user_agent=source.scryfall_user_agent,
            timeout=source.scryfall_timeout,
        )

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": self.accept}


def exact_name_in_set_query(name: str, set_code: str) -> str:
    """Search query matching one exact card name within one set."""
    return f'!"{name}" set:{set_code.lower()}'


class ScryfallClient:
    """
    Read-only Scryfall lookup client.

    Holds no mutable state, so one instance can serve concurrent lookups.
    Pass an httpx.AsyncClient to reuse connections; otherwise a short-lived
    client is opened per request.
    """

    def __init__(
        self,
        config: ScryfallConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or ScryfallConfig.from_settings()
        self._http_client = http_client

    async def lookup_by_code(self, set_code: str, collector_number: str) -> CardRecord:
        """
        Fetch one exact printing.

        Args:
            set_code: Set code in any case (e.g., "DMU")
            collector_number: Collector number, may contain letters or symbols

        Raises:
            CardLookupError: See module docstring for the mapping
        """
        path = f"/cards/{quote(set_code.lower(), safe='')}/{quote(collector_number, safe='')}"
        return await self._get(path, None, CardRecord)

    async def search(self, query: str, page: int = 1) -> SearchPage:
        """
        Run a full-text Scryfall search and return one page of results.

        An empty page is a valid result; Scryfall itself answers 404 when
        nothing matches, which surfaces as CardNotFoundError.
        """
        return await self._get("/cards/search", {"q": query, "page": page}, SearchPage)

    async def search_by_name_exact(self, name: str) -> CardRecord:
        """Fetch the card whose name matches exactly (case-insensitive)."""
        return await self._get("/cards/named", {"exact": name}, CardRecord)

    async def search_by_name_fuzzy(self, name: str) -> CardRecord:
        """Fetch the card Scryfall's fuzzy matcher considers closest to `name`."""
        return await self._get("/cards/named", {"fuzzy": name}, CardRecord)

    async def _get(
        self,
        path: str,
        params: dict[str, Any] | None,
        model: type[ModelT],
    ) -> ModelT:
        url = f"{self.config.base_url}{path}"
        logger.debug("Scryfall GET %s params=%s", url, params)

        try:
            if self._http_client is not None:
                response = await self._http_client.get(
                    url, params=params, headers=self.config.headers
                )
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                    response = await client.get(url, params=params, headers=self.config.headers)
        except httpx.RequestError as e:
            logger.warning("Scryfall request failed: %s", e)
            raise NetworkError(str(e) or type(e).__name__) from e

        return _decode(response, model)


def _decode(response: httpx.Response, model: type[ModelT]) -> ModelT:
    """Map a Scryfall response onto `model` or the matching lookup error."""
    status = response.status_code

    if status == 404:
        raise CardNotFoundError()
    if status == 429:
        raise RateLimitedError()
    if not response.is_success:
        raise ScryfallApiError(_error_details(response) or f"HTTP {status}")

    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        logger.warning("Undecodable Scryfall response from %s: %s", response.url, e)
        raise DecodingError(str(e)) from e


def _error_details(response: httpx.Response) -> str | None:
    try:
        body = ScryfallErrorBody.model_validate(response.json())
    except (ValueError, ValidationError):
        return None
    return body.details
