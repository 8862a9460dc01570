"""Pydantic models for the tree API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from lazytree.schemas import TreeNode


class ForestResponse(BaseModel):
    """Current forest snapshot.

    Attributes
    ----------
    forest : list[TreeNode]
        Root nodes with everything loaded beneath them.
    pending : list[str]
        Node ids whose children are being fetched.

    """

    forest: list[TreeNode] = Field(default_factory=list, description="Root nodes")
    pending: list[str] = Field(default_factory=list, description="Node ids with a fetch in flight")


class ExpandResponse(ForestResponse):
    """Response model for the expand endpoint.

    Attributes
    ----------
    node_id : str
        The node that was expanded.
    found_children : bool
        Whether the node has children merged under it.
    skipped : bool
        Whether the request was served without fetching.
    errors : list[str]
        Records dropped from the merge.
    message : str | None
        Notice to show the user; set only when a fetch found no children.

    """

    node_id: str = Field(..., description="Expanded node id")
    found_children: bool = Field(default=False, description="Children were found")
    skipped: bool = Field(default=False, description="No fetch was issued")
    errors: list[str] = Field(default_factory=list, description="Dropped records")
    message: str | None = Field(default=None, description="User notice")


class ErrorResponse(BaseModel):
    """Error payload returned with 4xx/5xx responses."""

    detail: str = Field(..., description="Error message")
