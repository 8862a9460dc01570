"""Turn raw domain records into tree nodes."""

from __future__ import annotations

from typing import Any, Mapping

from lazytree.config import LAZYTREE_ID_FIELD, LAZYTREE_PARENT_FIELD
from lazytree.exceptions import InvalidRecordError
from lazytree.schemas import TreeNode


def _lookup(record: Mapping[str, Any], field: str) -> Any:
    """Resolve a plain or dotted (``"Parent.Id"``) field name."""
    if field in record:
        return record[field]
    value: Any = record
    for part in field.split("."):
        if not isinstance(value, Mapping) or part not in value:
            return None
        value = value[part]
    return value


def node_from_record(
    record: Mapping[str, Any],
    *,
    id_field: str = LAZYTREE_ID_FIELD,
    parent_field: str = LAZYTREE_PARENT_FIELD,
) -> TreeNode:
    """Build a fresh node from a record.

    The record is copied verbatim into ``TreeNode.record``. The result does
    not depend on where in the forest the node will be placed.

    Args:
        record: Domain record; must carry an id under ``id_field``.
        id_field: Key holding the record id.
        parent_field: Key (or dotted path) holding the parent id, if any.

    Returns:
        A node with ``UnknownChildren`` state and no fetch in flight.

    Raises:
        InvalidRecordError: If the record is not a mapping or has no id.
    """
    if not isinstance(record, Mapping):
        raise InvalidRecordError(f"Record must be a mapping, got {type(record).__name__}")
    raw_id = _lookup(record, id_field)
    if raw_id is None or raw_id == "":
        raise InvalidRecordError(f"Record is missing {id_field!r}: {dict(record)!r}")
    raw_parent = _lookup(record, parent_field)
    return TreeNode(
        id=str(raw_id),
        parent_id=None if raw_parent is None else str(raw_parent),
        record=dict(record),
    )

