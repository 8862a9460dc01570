"""FastAPI application factory."""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from lazytree.exceptions import FetchError, NotFoundError
from lazytree.fetcher import HttpRecordFetcher, InMemoryRecordFetcher, RecordFetcher
from lazytree.store import TreeStore
from lazytree.utils.logging_config import get_logger
from server.routers import router
from server.server_config import LAZYTREE_SEED_FILE

logger = get_logger(__name__)


async def _not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def _fetch_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("Record service error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)})


def create_app(store: TreeStore) -> FastAPI:
    """Create the API application around ``store``.

    The store is kept on ``app.state.store``. An ``HttpRecordFetcher`` is
    opened for the lifetime of the app so requests share one connection pool.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        fetcher = store.fetcher
        if isinstance(fetcher, HttpRecordFetcher):
            async with fetcher:
                yield
        else:
            yield

    app = FastAPI(title="lazytree", lifespan=lifespan)
    app.state.store = store
    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(FetchError, _fetch_error_handler)
    app.include_router(router)
    return app


def default_fetcher(seed_file: str = LAZYTREE_SEED_FILE) -> RecordFetcher:
    """Serve ``seed_file`` from memory when given, else the remote record API."""
    if seed_file:
        data = json.loads(Path(seed_file).read_text(encoding="utf-8"))
        logger.info("Serving records from %s", seed_file)
        return InMemoryRecordFetcher(data.get("roots", []), data.get("children", {}))
    return HttpRecordFetcher()


app = create_app(TreeStore(default_fetcher()))
