"""
Scryfall search API client.

Fetches every page of a /cards/search query sequentially. There is no
retry: any malformed page aborts the whole search.
"""
from typing import Any
from urllib.parse import quote

import httpx

from config import SCRYFALL_SEARCH_URL, MAX_RESULTS
from lib.common import log
from lib.errors import UpstreamError
from lib.types import Card


def build_query_string(params: dict[str, Any]) -> str:
    """
    Build "k1=v1&k2=v2" from a flat mapping.
    Values are percent-encoded; keys are used as given.
    """
    return "&".join(f"{key}={quote(str(val), safe='')}" for key, val in params.items())


class ScryfallClient:
    """Synchronous client for the Scryfall card search endpoint."""

    def __init__(
        self,
        http: httpx.Client | None = None,
        base_url: str = SCRYFALL_SEARCH_URL,
        user_agent: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        """
        Args:
            http: Preconfigured httpx client (tests pass one with a MockTransport)
            base_url: Search endpoint URL
            user_agent: User-Agent header value
            timeout: Per-request timeout in seconds
        """
        if user_agent is None:
            from env_loader import get_user_agent
            user_agent = get_user_agent()
        self.http = http or httpx.Client(timeout=timeout)
        self.base_url = base_url
        self.headers = {"User-Agent": user_agent, "Accept": "application/json"}

    def search(self, params: dict[str, Any], num_results: int = MAX_RESULTS) -> list[Card]:
        """
        Fetch pages 1, 2, ... and concatenate their `data` arrays.

        Stops when a page reports has_more=false or once more than
        `num_results` cards have been collected. The result may be longer
        than `num_results`; callers truncate.

        Raises:
            UpstreamError: On transport failure, non-JSON body or a page
                without a `data` array
        """
        url = f"{self.base_url}?{build_query_string(params)}"
        cards: list[Card] = []
        page = 1
        while True:
            body = self._fetch_page(f"{url}&page={page}")
            cards.extend(body["data"])
            log(f"scryfall page={page} got={len(body['data'])} total={len(cards)}")
            page += 1
            if len(cards) > num_results:
                break
            if not body.get("has_more"):
                break
        return cards

    def _fetch_page(self, url: str) -> dict[str, Any]:
        try:
            response = self.http.get(url, headers=self.headers)
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(f"Unable to retrieve results from Scryfall: {e}") from e

        if not isinstance(body, dict) or not isinstance(body.get("data"), list):
            detail = body.get("details") if isinstance(body, dict) else None
            message = "No results from Scryfall"
            if detail:
                message = f"{message} ({detail})"
            raise UpstreamError(f"Unable to retrieve results from Scryfall: {message}")
        return body

    def close(self) -> None:
        self.http.close()


# Singleton instance for the application
_scryfall_client: ScryfallClient | None = None


def get_scryfall_client() -> ScryfallClient:
    """Get the global ScryfallClient instance."""
    global _scryfall_client
    if _scryfall_client is None:
        _scryfall_client = ScryfallClient()
    return _scryfall_client


def reset_scryfall_client() -> None:
    """Reset the global client (useful for testing)."""
    global _scryfall_client
    _scryfall_client = None
