"""Record sources the tree store reads from."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol, Sequence
from urllib.parse import quote

import httpx

from lazytree.config import LAZYTREE_API_BASE_URL
from lazytree.exceptions import FetchError
from lazytree.http_utils import build_client, fetch_json_with_retries

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]


class RecordFetcher(Protocol):
    """Remote record operations consumed by ``TreeStore``."""

    async def list_roots(self) -> Sequence[Record]:
        """Return the top-level records."""
        ...

    async def list_children(self, parent_id: str) -> Sequence[Record]:
        """Return the children of ``parent_id``; empty when it has none."""
        ...

    async def has_children(self, node_id: str) -> bool:
        """Return whether ``node_id`` has at least one child."""
        ...


def _as_records(payload: Any, url: str) -> list[Record]:
    if isinstance(payload, Mapping) and isinstance(payload.get("records"), list):
        payload = payload["records"]
    if not isinstance(payload, list) or not all(isinstance(item, Mapping) for item in payload):
        raise FetchError(f"Expected a list of records from {url}")
    return list(payload)


class HttpRecordFetcher:
    """Fetch records from a JSON HTTP API.

    Endpoints, relative to ``base_url``:

    - ``GET /records`` returns the top-level records.
    - ``GET /records/{id}/children`` returns the children (``[]`` when none).
    - ``GET /records/{id}/has-children`` returns a JSON boolean or
      ``{"hasChildren": bool}``.

    Either a bare JSON list or ``{"records": [...]}`` is accepted for lists.
    """

    def __init__(
        self,
        base_url: str = LAZYTREE_API_BASE_URL,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> HttpRecordFetcher:
        if self._client is None:
            self._client = build_client(self._base_url)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _url(self, path: str) -> str:
        if self._client is not None and str(self._client.base_url):
            return path
        return f"{self._base_url}{path}"

    async def _get(self, path: str) -> Any:
        return await fetch_json_with_retries(self._url(path), client=self._client)

    async def list_roots(self) -> list[Record]:
        path = "/records"
        return _as_records(await self._get(path), path)

    async def list_children(self, parent_id: str) -> list[Record]:
        path = f"/records/{quote(parent_id, safe='')}/children"
        return _as_records(await self._get(path), path)

    async def has_children(self, node_id: str) -> bool:
        path = f"/records/{quote(node_id, safe='')}/has-children"
        payload = await self._get(path)
        if isinstance(payload, Mapping):
            payload = payload.get("hasChildren")
        if not isinstance(payload, bool):
            raise FetchError(f"Expected a boolean from {path}")
        return payload


class InMemoryRecordFetcher:
    """Serve records from memory.

    Args:
        roots: Top-level records, in display order.
        children: Mapping of parent id to its child records.
    """

    def __init__(
        self,
        roots: Sequence[Record],
        children: Mapping[str, Sequence[Record]] | None = None,
    ) -> None:
        self._roots = list(roots)
        self._children = {key: list(value) for key, value in (children or {}).items()}

    async def list_roots(self) -> list[Record]:
        return [dict(record) for record in self._roots]

    async def list_children(self, parent_id: str) -> list[Record]:
        return [dict(record) for record in self._children.get(parent_id, [])]

    async def has_children(self, node_id: str) -> bool:
        return bool(self._children.get(node_id))
