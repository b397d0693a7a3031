"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi import HTTPException
from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import jellypick.runtime as runtime
from jellypick.api.errors import handle_http_exception
from jellypick.api.routers.catalog import router as catalog_router
from jellypick.api.routers.health import router as health_router
from jellypick.api.routers.lobbies import router as lobbies_router
from jellypick.ws.routers import router as ws_router

logger = logging.getLogger(__name__)


def startup() -> None:
    """Reset in-memory runtime state and apply the configured log level."""
    runtime.startup()
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("jellypick").setLevel(runtime.settings.jellypick_log_level)
    logger.info("jellypick runtime ready (env=%s)", runtime.settings.jellypick_app_env)


@asynccontextmanager
async def lifespan(_: FastAPI):
    startup()
    yield


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=runtime.settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def handle_http_exception_route(request: Request, exc: HTTPException) -> JSONResponse:
    """Adapter used by FastAPI exception handling."""
    return await handle_http_exception(request, exc)


app.include_router(health_router)
app.include_router(lobbies_router)
app.include_router(catalog_router)
app.include_router(ws_router)


def run() -> None:
    """Console entrypoint: serve the app with uvicorn."""
    import uvicorn

    settings = runtime.settings
    uvicorn.run(app, host=settings.jellypick_app_host, port=settings.jellypick_app_port)


__all__ = [
    "app",
    "handle_http_exception",
    "lifespan",
    "run",
    "startup",
]
