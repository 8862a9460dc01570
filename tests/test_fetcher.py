"""Tests for record fetchers."""

from __future__ import annotations

import httpx
import pytest

from lazytree.exceptions import FetchError
from lazytree.fetcher import HttpRecordFetcher, InMemoryRecordFetcher

ROUTES = {
    "/api/records": [{"id": "C1"}, {"id": "C2"}],
    "/api/records/C1/children": {"records": [{"id": "C3", "parentId": "C1"}]},
    "/api/records/C2/children": [],
    "/api/records/C1/has-children": {"hasChildren": True},
    "/api/records/C2/has-children": False,
    "/api/records/a%2Fb/children": [],
    "/api/records/bad/children": {"unexpected": 1},
    "/api/records/bad/has-children": "yes",
}


def _handler(request: httpx.Request) -> httpx.Response:
    path = request.url.raw_path.decode()
    if path not in ROUTES:
        return httpx.Response(404)
    return httpx.Response(200, json=ROUTES[path])


@pytest.fixture
def fetcher() -> HttpRecordFetcher:
    client = httpx.AsyncClient(
        base_url="https://crm.example.com/api",
        transport=httpx.MockTransport(_handler),
    )
    return HttpRecordFetcher("https://crm.example.com/api", client=client)


class TestHttpRecordFetcher:
    """Tests for HttpRecordFetcher."""

    @pytest.mark.asyncio
    async def test_list_roots(self, fetcher: HttpRecordFetcher) -> None:
        """Roots come from the records endpoint."""
        assert await fetcher.list_roots() == [{"id": "C1"}, {"id": "C2"}]

    @pytest.mark.asyncio
    async def test_list_children_accepts_wrapped_records(self, fetcher: HttpRecordFetcher) -> None:
        """A {"records": [...]} payload is unwrapped."""
        assert await fetcher.list_children("C1") == [{"id": "C3", "parentId": "C1"}]

    @pytest.mark.asyncio
    async def test_list_children_empty(self, fetcher: HttpRecordFetcher) -> None:
        """No children is an empty list, not an error."""
        assert await fetcher.list_children("C2") == []

    @pytest.mark.asyncio
    async def test_ids_are_quoted(self, fetcher: HttpRecordFetcher) -> None:
        """Ids are escaped as a single path segment."""
        assert await fetcher.list_children("a/b") == []

    @pytest.mark.asyncio
    async def test_has_children(self, fetcher: HttpRecordFetcher) -> None:
        """Both boolean payload shapes are accepted."""
        assert await fetcher.has_children("C1") is True
        assert await fetcher.has_children("C2") is False

    @pytest.mark.asyncio
    async def test_not_found_is_fetch_error(self, fetcher: HttpRecordFetcher) -> None:
        """A 404 on the children endpoint is a FetchError."""
        with pytest.raises(FetchError, match="404"):
            await fetcher.list_children("missing")

    @pytest.mark.asyncio
    async def test_malformed_payloads(self, fetcher: HttpRecordFetcher) -> None:
        """Unexpected payload shapes are FetchErrors."""
        with pytest.raises(FetchError, match="list of records"):
            await fetcher.list_children("bad")
        with pytest.raises(FetchError, match="boolean"):
            await fetcher.has_children("bad")

    @pytest.mark.asyncio
    async def test_context_manager_owns_client(self) -> None:
        """Entering creates a pooled client; exiting closes it."""
        async with HttpRecordFetcher("https://crm.example.com/api") as fetcher:
            assert fetcher._client is not None
        assert fetcher._client is None


class TestInMemoryRecordFetcher:
    """Tests for InMemoryRecordFetcher."""

    @pytest.mark.asyncio
    async def test_serves_copies(self) -> None:
        """Returned records are copies of the seed data."""
        roots = [{"id": "C1"}]
        fetcher = InMemoryRecordFetcher(roots, {"C1": [{"id": "C3"}]})

        listed = await fetcher.list_roots()
        listed[0]["id"] = "changed"

        assert await fetcher.list_roots() == [{"id": "C1"}]
        assert await fetcher.list_children("C1") == [{"id": "C3"}]
        assert await fetcher.list_children("C3") == []
        assert await fetcher.has_children("C1") is True
        assert await fetcher.has_children("C3") is False
