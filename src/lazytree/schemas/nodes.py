"""Tree node models and the per-node child load state."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class UnknownChildren(BaseModel):
    """Existence of children has not been determined yet."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unknown"] = "unknown"


class KnownEmpty(BaseModel):
    """The node has no children; no expand affordance."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["known_empty"] = "known_empty"


class KnownNonEmpty(BaseModel):
    """Children exist but have not been fetched."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["known_non_empty"] = "known_non_empty"


class Loaded(BaseModel):
    """Children fetched and merged, in source order."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["loaded"] = "loaded"
    children: tuple[TreeNode, ...]

    @field_validator("children")
    @classmethod
    def validate_children(cls, v: tuple[TreeNode, ...]) -> tuple[TreeNode, ...]:
        """Reject an empty child sequence; empty results are ``KnownEmpty``."""
        if not v:
            err = "Loaded requires at least one child; use KnownEmpty instead"
            raise ValueError(err)
        return v


ChildState = Annotated[
    Union[UnknownChildren, KnownEmpty, KnownNonEmpty, Loaded],
    Field(discriminator="kind"),
]


class TreeNode(BaseModel):
    """One record in the forest together with its load state.

    Attributes:
        id: Unique identifier across the whole forest.
        parent_id: Parent reference copied from the record, for display only.
        record: The domain payload, passed through unmodified.
        child_state: What is known about this node's children.
        is_loading_children: True while a child fetch is outstanding.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    parent_id: str | None = None
    record: dict[str, Any] = Field(default_factory=dict)
    child_state: ChildState = Field(default_factory=UnknownChildren)
    is_loading_children: bool = False

    @property
    def children(self) -> tuple[TreeNode, ...]:
        """Materialized children, empty unless the state is ``Loaded``."""
        if isinstance(self.child_state, Loaded):
            return self.child_state.children
        return ()

    @property
    def children_loaded(self) -> bool:
        return isinstance(self.child_state, Loaded)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def expandable(self) -> bool:
        """Whether the UI should render an expand affordance.

        Only ``KnownEmpty`` hides it; an unprobed node stays expandable so
        the user can find out by expanding it.
        """
        return not isinstance(self.child_state, KnownEmpty)


Loaded.model_rebuild()

Forest = tuple[TreeNode, ...]


def loaded_or_empty(children: Sequence[TreeNode]) -> Loaded | KnownEmpty:
    """Return ``Loaded(children)``, or ``KnownEmpty`` for an empty sequence."""
    if not children:
        return KnownEmpty()
    return Loaded(children=tuple(children))
