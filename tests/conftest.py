"""Test setup for lazytree."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Mapping, Sequence
from unittest.mock import AsyncMock, MagicMock

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from lazytree.fetcher import InMemoryRecordFetcher  # noqa: E402


def make_fetcher(
    roots: Sequence[Mapping[str, Any]],
    children: Mapping[str, Sequence[Mapping[str, Any]]] | None = None,
) -> MagicMock:
    """Build a fetcher double whose methods are AsyncMocks over in-memory data."""
    backing = InMemoryRecordFetcher(roots, children)
    fetcher = MagicMock()
    fetcher.list_roots = AsyncMock(side_effect=backing.list_roots)
    fetcher.list_children = AsyncMock(side_effect=backing.list_children)
    fetcher.has_children = AsyncMock(side_effect=backing.has_children)
    return fetcher


@pytest.fixture
def campaign_records() -> dict[str, Any]:
    """Two root campaigns with a two-level hierarchy under the first."""
    return {
        "roots": [
            {"id": "C1", "Name": "Spring Launch", "Type": "Advertisement"},
            {"id": "C2", "Name": "Partner Summit", "Type": "Conference"},
        ],
        "children": {
            "C1": [{"id": "C3", "Name": "Spring Email", "parentId": "C1"}],
            "C3": [{"id": "C4", "Name": "Spring Email Wave 1", "parentId": "C3"}],
        },
    }
