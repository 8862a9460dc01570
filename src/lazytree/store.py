"""Lazy-loaded tree store.

``TreeStore`` owns an immutable forest snapshot and replaces it wholesale on
every mutation. Operations interleave only while awaiting the fetcher, so
each read-locate-replace step runs atomically under asyncio. A store driven
from several threads must serialize those steps with a lock.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Mapping

from lazytree.config import (
    LAZYTREE_EAGER_PROBE,
    LAZYTREE_ID_FIELD,
    LAZYTREE_PARENT_FIELD,
    LAZYTREE_PROBE_GRANDCHILDREN,
)
from lazytree.exceptions import (
    DuplicateIdError,
    FetchError,
    InvalidRecordError,
    LazyTreeError,
    NotFoundError,
)
from lazytree.fetcher import RecordFetcher
from lazytree.forest import (
    collect_ids,
    find_node,
    replace_child_state,
    replace_node,
    set_loading,
)
from lazytree.normalize import node_from_record
from lazytree.schemas import (
    ChildState,
    ExpandResult,
    Forest,
    KnownEmpty,
    KnownNonEmpty,
    Loaded,
    TreeNode,
    UnknownChildren,
    loaded_or_empty,
)

logger = logging.getLogger(__name__)


class TreeStore:
    """Forest of lazily expanded nodes backed by a ``RecordFetcher``.

    Args:
        fetcher: Source of root and child records.
        eager_probe: Probe every root with ``has_children`` during
            ``load_roots``.
        probe_grandchildren: After merging children, probe each new child
            with ``has_children``.
        id_field: Record key holding the node id.
        parent_field: Record key (or dotted path) holding the parent id.
    """

    def __init__(
        self,
        fetcher: RecordFetcher,
        *,
        eager_probe: bool = LAZYTREE_EAGER_PROBE,
        probe_grandchildren: bool = LAZYTREE_PROBE_GRANDCHILDREN,
        id_field: str = LAZYTREE_ID_FIELD,
        parent_field: str = LAZYTREE_PARENT_FIELD,
    ) -> None:
        self._fetcher = fetcher
        self._eager_probe = eager_probe
        self._probe_grandchildren = probe_grandchildren
        self._id_field = id_field
        self._parent_field = parent_field
        self._forest: Forest = ()
        self._pending: set[str] = set()

    @property
    def current_forest(self) -> Forest:
        """The latest forest snapshot."""
        return self._forest

    @property
    def fetcher(self) -> RecordFetcher:
        """The record source this store reads from."""
        return self._fetcher

    @property
    def pending(self) -> frozenset[str]:
        """Ids with a child fetch in flight."""
        return frozenset(self._pending)

    def get_node(self, node_id: str) -> TreeNode:
        """Return the node with ``node_id``.

        Raises:
            NotFoundError: If no such node is in the forest.
        """
        node = find_node(self._forest, node_id)
        if node is None:
            raise NotFoundError(f"Node {node_id!r} is not in the forest")
        return node

    async def load_roots(self) -> Forest:
        """Fetch the top-level records and replace the forest with them.

        Returns:
            The new forest.

        Raises:
            FetchError: If listing the roots fails. The forest is left empty.
        """
        self._forest = ()
        records = await self._fetcher.list_roots()
        roots, errors = self._normalize_page(records, set())
        for error in errors:
            logger.warning("Dropped root record: %s", error)

        if self._eager_probe and roots:
            states = await self._probe_many([root.id for root in roots])
            roots = [
                root if state is None else root.model_copy(update={"child_state": state})
                for root, state in zip(roots, states)
            ]

        self._forest = tuple(roots)
        logger.info("Loaded %d root nodes", len(self._forest))
        return self._forest

    async def expand_node(self, node_id: str) -> ExpandResult:
        """Determine, and if present fetch, the children of ``node_id``.

        A call for a node whose fetch is already in flight, or whose state is
        ``Loaded`` or ``KnownEmpty``, does not fetch and returns the current
        forest with ``skipped=True``. The same is returned when the node is
        removed from the forest (an ancestor collapsed or refreshed, or the
        roots reloaded) while its fetch is in flight.

        Returns:
            The forest after the merge and whether children were found.

        Raises:
            NotFoundError: If ``node_id`` is not in the forest.
            FetchError: If fetching the children fails. The forest keeps its
                previous value and the node can be expanded again.
        """
        node = self.get_node(node_id)
        if node_id in self._pending or isinstance(node.child_state, (Loaded, KnownEmpty)):
            logger.debug("Skipping expand of %s (%s)", node_id, node.child_state.kind)
            return ExpandResult(
                forest=self._forest,
                found_children=node.children_loaded,
                skipped=True,
            )

        self._pending.add(node_id)
        self._forest = set_loading(self._forest, node_id, True)
        try:
            records = await self._fetcher.list_children(node_id)
            children, errors = self._normalize_page(records, collect_ids(self._forest))
            for error in errors:
                logger.warning("Dropped child record of %s: %s", node_id, error)
            self._forest = replace_child_state(self._forest, node_id, loaded_or_empty(children))
        except FetchError as exc:
            logger.error(
                "Failed to load children of %s: %s", node_id, exc, extra={"node_id": node_id}
            )
            raise
        finally:
            self._pending.discard(node_id)
            self._forest = set_loading(self._forest, node_id, False)

        if find_node(self._forest, node_id) is None:
            logger.debug("Node %s left the forest before its children arrived", node_id)
            return ExpandResult(forest=self._forest, skipped=True)

        if children and self._probe_grandchildren:
            await self._refine_children([child.id for child in children])

        logger.debug("Expanded %s with %d children", node_id, len(children))
        return ExpandResult(
            forest=self._forest,
            found_children=bool(children),
            errors=[str(error) for error in errors],
        )

    def collapse_node(self, node_id: str) -> Forest:
        """Drop the loaded subtree of ``node_id``, keeping it expandable.

        Fetches in flight for removed descendants complete without effect.

        Raises:
            NotFoundError: If ``node_id`` is not in the forest.
        """
        node = self.get_node(node_id)
        if isinstance(node.child_state, Loaded):
            self._forest = replace_child_state(self._forest, node_id, KnownNonEmpty())
        return self._forest

    def refresh_node(self, node_id: str) -> Forest:
        """Forget what is known about the children of ``node_id``.

        The node returns to ``UnknownChildren`` and the next expand fetches
        again. Ignored while a fetch for the node is in flight.

        Raises:
            NotFoundError: If ``node_id`` is not in the forest.
        """
        node = self.get_node(node_id)
        if node_id in self._pending:
            logger.debug("Not refreshing %s while its children are loading", node_id)
        elif not isinstance(node.child_state, UnknownChildren):
            self._forest = replace_child_state(self._forest, node_id, UnknownChildren())
        return self._forest

    def _normalize_page(
        self,
        records: Iterable[Mapping[str, Any]],
        existing_ids: set[str],
    ) -> tuple[list[TreeNode], list[LazyTreeError]]:
        """Normalize records, dropping invalid ones and ids already in use."""
        seen = set(existing_ids)
        nodes: list[TreeNode] = []
        errors: list[LazyTreeError] = []
        for record in records:
            try:
                node = node_from_record(
                    record, id_field=self._id_field, parent_field=self._parent_field
                )
            except InvalidRecordError as exc:
                errors.append(exc)
                continue
            if node.id in seen:
                errors.append(DuplicateIdError(f"Node id {node.id!r} already exists in the forest"))
                continue
            seen.add(node.id)
            nodes.append(node)
        return nodes, errors

    async def _probe(self, node_id: str) -> ChildState | None:
        try:
            found = await self._fetcher.has_children(node_id)
        except FetchError as exc:
            logger.warning(
                "Child probe failed for %s: %s", node_id, exc, extra={"node_id": node_id}
            )
            return None
        return KnownNonEmpty() if found else KnownEmpty()

    async def _probe_many(self, node_ids: list[str]) -> list[ChildState | None]:
        return list(await asyncio.gather(*(self._probe(node_id) for node_id in node_ids)))

    async def _refine_children(self, node_ids: list[str]) -> None:
        """Probe freshly merged children and record the result in place."""
        states = await self._probe_many(node_ids)
        for node_id, state in zip(node_ids, states):
            if state is None:
                continue
            current = find_node(self._forest, node_id)
            # Only refine nodes nothing else has touched since the merge; an
            # in-flight fetch of the node itself decides its state.
            if (
                current is None
                or node_id in self._pending
                or not isinstance(current.child_state, UnknownChildren)
            ):
                continue
            self._forest = replace_node(
                self._forest,
                node_id,
                lambda node, state=state: node.model_copy(update={"child_state": state}),
            )
