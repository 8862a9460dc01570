"""Forest and node endpoints for the API."""

from __future__ import annotations

from fastapi import APIRouter, Request

from lazytree.store import TreeStore
from server.models import ErrorResponse, ExpandResponse, ForestResponse
from server.server_config import NO_CHILDREN_MESSAGE

router = APIRouter()

_NODE_RESPONSES = {404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}


def _store(request: Request) -> TreeStore:
    return request.app.state.store


def _forest_response(store: TreeStore) -> ForestResponse:
    return ForestResponse(forest=list(store.current_forest), pending=sorted(store.pending))


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/api/roots/load", responses={502: {"model": ErrorResponse}})
async def api_load_roots(request: Request) -> ForestResponse:
    """Fetch the top-level records and replace the forest."""
    store = _store(request)
    await store.load_roots()
    return _forest_response(store)


@router.get("/api/forest")
async def api_forest(request: Request) -> ForestResponse:
    """Return the current forest snapshot without fetching."""
    return _forest_response(_store(request))


@router.post("/api/nodes/{node_id}/expand", responses=_NODE_RESPONSES)
async def api_expand_node(request: Request, node_id: str) -> ExpandResponse:
    """Expand a node, fetching its children if they are not known yet.

    **Returns**

    - **ExpandResponse**: the new forest plus ``found_children``. ``message``
      is set only when the fetch completed and found nothing.

    **Raises**

    - **404** if the node is not in the forest
    - **502** if the record service failed
    """
    store = _store(request)
    result = await store.expand_node(node_id)
    message = None
    if not result.skipped and not result.found_children:
        message = NO_CHILDREN_MESSAGE
    return ExpandResponse(
        node_id=node_id,
        forest=list(result.forest),
        pending=sorted(store.pending),
        found_children=result.found_children,
        skipped=result.skipped,
        errors=result.errors,
        message=message,
    )


@router.post("/api/nodes/{node_id}/collapse", responses={404: {"model": ErrorResponse}})
async def api_collapse_node(request: Request, node_id: str) -> ForestResponse:
    """Drop the loaded children of a node."""
    store = _store(request)
    store.collapse_node(node_id)
    return _forest_response(store)


@router.post("/api/nodes/{node_id}/refresh", responses={404: {"model": ErrorResponse}})
async def api_refresh_node(request: Request, node_id: str) -> ForestResponse:
    """Forget a node's children so the next expand fetches them again."""
    store = _store(request)
    store.refresh_node(node_id)
    return _forest_response(store)
