"""FastAPI application factory.

Lifespan
--------
On startup the app builds one :class:`RecordStore` and one
:class:`ScrapeOrchestrator` (shared across all requests via
``request.app.state``) unless they were injected into :func:`create_app`.
On shutdown the store is closed.

Routers
-------
    /monitor   — record ingestion and the records view

Error shapes
------------
Malformed bodies answer ``400 {"error": "Bad request"}`` and wrong methods
``405 {"error": "Method not allowed"}``, before any record is touched.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from policywatch.pipeline.orchestrator import ScrapeOrchestrator
from policywatch.store.records import RecordStore

from policywatch.api.routers import monitor as monitor_router


def create_app(
    store: Optional[RecordStore] = None,
    orchestrator: Optional[ScrapeOrchestrator] = None,
) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Args:
        store: Pre-built store to serve.  A fresh one is created otherwise.
        orchestrator: Pre-built orchestrator.  Defaults to one bound to *store*.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Build the store on startup and close it on shutdown."""
        app_store = store if store is not None else RecordStore()
        app.state.store = app_store
        app.state.orchestrator = (
            orchestrator if orchestrator is not None else ScrapeOrchestrator(app_store)
        )
        try:
            yield
        finally:
            app_store.close()

    app = FastAPI(
        title="Policy Watch API",
        description=(
            "Receives pages observed by the browser extension, deduplicates "
            "them by policy-link set, and extracts policy text from new links."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # The extension posts from arbitrary page origins.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": "Bad request"})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 405:
            return JSONResponse(status_code=405, content={"error": "Method not allowed"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    app.include_router(monitor_router.router, prefix="/monitor", tags=["monitor"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn policywatch.api.app:app --reload
app = create_app()
