"""lazytree: a lazily loaded tree of remote records."""

from lazytree.exceptions import (
    DuplicateIdError,
    FetchError,
    InvalidRecordError,
    LazyTreeError,
    NotFoundError,
    RateLimitError,
)
from lazytree.fetcher import HttpRecordFetcher, InMemoryRecordFetcher, RecordFetcher
from lazytree.forest import find_node, iter_nodes, replace_child_state, replace_node
from lazytree.normalize import node_from_record
from lazytree.schemas import (
    ExpandResult,
    Forest,
    KnownEmpty,
    KnownNonEmpty,
    Loaded,
    TreeNode,
    UnknownChildren,
)
from lazytree.store import TreeStore

__all__ = [
    "DuplicateIdError",
    "ExpandResult",
    "FetchError",
    "Forest",
    "HttpRecordFetcher",
    "InMemoryRecordFetcher",
    "InvalidRecordError",
    "KnownEmpty",
    "KnownNonEmpty",
    "LazyTreeError",
    "Loaded",
    "NotFoundError",
    "RateLimitError",
    "RecordFetcher",
    "TreeNode",
    "TreeStore",
    "UnknownChildren",
    "find_node",
    "iter_nodes",
    "node_from_record",
    "replace_child_state",
    "replace_node",
]
