"""HTTP utilities for fetching JSON with retry logic and connection pooling."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Final

import httpx

from lazytree.config import (
    LAZYTREE_FETCH_BACKOFF_S,
    LAZYTREE_FETCH_MAX_RETRIES,
    LAZYTREE_FETCH_TIMEOUT_S,
    LAZYTREE_USER_AGENT,
)
from lazytree.exceptions import FetchError, RateLimitError

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

_MAX_REDIRECTS: Final[int] = 5


def build_client(base_url: str = "") -> httpx.AsyncClient:
    """Create an AsyncClient with the default timeout and headers."""
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(LAZYTREE_FETCH_TIMEOUT_S),
        headers={"User-Agent": LAZYTREE_USER_AGENT, "Accept": "application/json"},
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    )


async def fetch_json_with_retries(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    max_retries: int = LAZYTREE_FETCH_MAX_RETRIES,
    backoff_s: float = LAZYTREE_FETCH_BACKOFF_S,
) -> Any:
    """Fetch and decode a JSON document, retrying transient failures.

    Args:
        url: The URL to fetch, absolute or relative to the client's base URL.
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.
        max_retries: Number of retries after the first attempt.
        backoff_s: Base delay, doubled after every failed attempt.

    Returns:
        The decoded JSON payload.

    Raises:
        RateLimitError: If every attempt was answered with HTTP 429.
        FetchError: If the fetch fails after all retries, returns a
            non-retryable error status, or the body is not valid JSON.
    """
    last_exc: Exception | None = None

    async def do_fetch(http_client: httpx.AsyncClient) -> Any:
        nonlocal last_exc

        for attempt in range(max_retries + 1):
            try:
                response = await http_client.get(url)

                if response.status_code in RETRY_STATUS_CODES:
                    exc_class = RateLimitError if response.status_code == 429 else FetchError
                    last_exc = exc_class(f"HTTP {response.status_code} from {url}")
                else:
                    response.raise_for_status()
                    try:
                        return response.json()
                    except ValueError as exc:
                        raise FetchError(f"Invalid JSON from {url}: {exc}") from exc
            except httpx.HTTPStatusError as exc:
                raise FetchError(f"HTTP {exc.response.status_code} from {url}") from exc
            except httpx.RequestError as exc:
                last_exc = exc

            if attempt < max_retries:
                backoff = backoff_s * (2**attempt)
                logger.debug("Retrying %s in %.2fs after: %s", url, backoff, last_exc)
                await asyncio.sleep(backoff)

        if isinstance(last_exc, FetchError):
            raise last_exc
        raise FetchError(f"Failed to fetch {url}: {last_exc}")

    if client is not None:
        return await do_fetch(client)

    async with build_client() as new_client:
        return await do_fetch(new_client)
