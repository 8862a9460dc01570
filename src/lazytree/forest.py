"""Locate-and-replace and traversal over an immutable forest."""

from __future__ import annotations

from typing import Callable, Iterator

from lazytree.schemas import ChildState, Forest, Loaded, TreeNode

NodeUpdate = Callable[[TreeNode], TreeNode]


def replace_node(forest: Forest, node_id: str, update: NodeUpdate) -> Forest:
    """Replace the node with ``node_id`` by ``update(node)``.

    The search is depth-first in source order. Every ancestor on the path
    to the target is rebuilt as a new value; all other subtrees are shared
    with the input. If the id is absent, the input forest object itself is
    returned.

    Args:
        forest: The current forest snapshot.
        node_id: Id of the node to replace.
        update: Maps the located node to its replacement.

    Returns:
        The updated forest, or ``forest`` unchanged when the id is absent.
    """
    replaced = _replace_in(forest, node_id, update)
    return forest if replaced is None else replaced


def _replace_in(nodes: Forest, node_id: str, update: NodeUpdate) -> Forest | None:
    for index, node in enumerate(nodes):
        if node.id == node_id:
            new_node = update(node)
        elif isinstance(node.child_state, Loaded):
            children = _replace_in(node.child_state.children, node_id, update)
            if children is None:
                continue
            new_node = node.model_copy(
                update={"child_state": node.child_state.model_copy(update={"children": children})}
            )
        else:
            continue
        return nodes[:index] + (new_node,) + nodes[index + 1 :]
    return None


def replace_child_state(forest: Forest, node_id: str, state: ChildState) -> Forest:
    """Set ``child_state`` on the node with ``node_id``."""
    return replace_node(forest, node_id, lambda node: node.model_copy(update={"child_state": state}))


def set_loading(forest: Forest, node_id: str, loading: bool) -> Forest:
    """Set ``is_loading_children`` on the node with ``node_id``."""
    return replace_node(
        forest, node_id, lambda node: node.model_copy(update={"is_loading_children": loading})
    )


def iter_nodes(forest: Forest) -> Iterator[tuple[int, TreeNode]]:
    """Yield ``(depth, node)`` pairs depth-first in source order."""

    def _walk(nodes: Forest, depth: int) -> Iterator[tuple[int, TreeNode]]:
        for node in nodes:
            yield depth, node
            yield from _walk(node.children, depth + 1)

    return _walk(forest, 0)


def find_node(forest: Forest, node_id: str) -> TreeNode | None:
    for _, node in iter_nodes(forest):
        if node.id == node_id:
            return node
    return None


def collect_ids(forest: Forest) -> set[str]:
    """Return every node id reachable in the forest."""
    return {node.id for _, node in iter_nodes(forest)}
