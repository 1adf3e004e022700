"""FastAPI application factory.

Lifespan
--------
On startup the app creates a single :class:`~bustracker.service.EtaService`
(shared across all requests via ``request.app.state.eta_service``).  Its
cache and robots verdict live as long as the process; nothing needs closing
on shutdown.

Routers
-------
    /eta    — minutes until a route arrives at a stop
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bustracker.config import settings
from bustracker.service import EtaService

from bustracker.api.routers import eta as eta_router


def create_app(service: Optional[EtaService] = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    *service* replaces the default :class:`EtaService`, mainly for tests.
    """
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.eta_service = service if service is not None else EtaService()
        yield

    app = FastAPI(
        title="Bus ETA API",
        description=(
            "Scrapes the bus tracker's arrival pages and reports how many "
            "minutes remain until a route reaches a stop."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root() -> dict[str, str]:
        return {"message": "Bus ETA API", "version": app.version}

    app.include_router(eta_router.router, prefix="/eta", tags=["eta"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn bustracker.api.app:app --reload
app = create_app()
