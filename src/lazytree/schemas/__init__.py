"""Shared schemas for lazytree."""

from lazytree.schemas.nodes import (
    ChildState,
    Forest,
    KnownEmpty,
    KnownNonEmpty,
    Loaded,
    TreeNode,
    UnknownChildren,
    loaded_or_empty,
)
from lazytree.schemas.results import ExpandResult

__all__ = [
    "ChildState",
    "ExpandResult",
    "Forest",
    "KnownEmpty",
    "KnownNonEmpty",
    "Loaded",
    "TreeNode",
    "UnknownChildren",
    "loaded_or_empty",
]
