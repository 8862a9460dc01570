"""Store operation result models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from lazytree.schemas.nodes import TreeNode


class ExpandResult(BaseModel):
    """Outcome of expanding a node.

    Attributes:
        forest: The forest snapshot after the expansion.
        found_children: True when the node has children merged under it.
        skipped: True when the node was not expanded: no fetch was issued
            (already loaded, known empty, or a fetch for the node is in
            flight), or the node left the forest before its fetch completed.
        errors: Data-integrity problems reported (not raised) during the merge.
    """

    model_config = ConfigDict(frozen=True)

    forest: tuple[TreeNode, ...]
    found_children: bool = False
    skipped: bool = False
    errors: list[str] = Field(default_factory=list)
