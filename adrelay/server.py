"""Main FastAPI server for the ad-analysis relay."""

from __future__ import annotations

import os
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from adrelay.state.settings import AppSettings
from adrelay.config.http import API_PREFIX
from adrelay.config.websocket import WS_ENDPOINT_PATH
from adrelay.runtime.logging import configure_logging
from adrelay.runtime.dependencies import build_runtime_deps
from adrelay.handlers.websocket.manager import handle_websocket_connection
from adrelay.config.server import ENV_HOST, ENV_PORT, DEFAULT_HOST, DEFAULT_PORT
from adrelay.handlers.http import data_router, health_router, notifications_router

logger = logging.getLogger(__name__)

configure_logging()


def create_app(settings: AppSettings | None = None) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        runtime_deps = build_runtime_deps(settings)
        runtime_deps.sweeper.start()
        app.state.runtime_deps = runtime_deps
        logger.info("runtime: ready")
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    # Served at the root and under /api, as dashboards and pipelines use both.
    for prefix in ("", API_PREFIX):
        app.include_router(data_router, prefix=prefix)
        app.include_router(notifications_router, prefix=prefix)
        app.include_router(health_router, prefix=prefix)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.websocket(WS_ENDPOINT_PATH)
    async def websocket_endpoint(websocket: WebSocket) -> None:
        runtime_deps = getattr(app.state, "runtime_deps", None)
        if runtime_deps is None:
            raise RuntimeError("Runtime dependencies are not initialized")
        await handle_websocket_connection(websocket, runtime_deps)

    return app


app = create_app()


def main() -> None:
    host = (os.getenv(ENV_HOST) or "").strip() or DEFAULT_HOST
    try:
        port = int((os.getenv(ENV_PORT) or "").strip() or DEFAULT_PORT)
    except ValueError:
        port = DEFAULT_PORT
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()


__all__ = ["app", "create_app", "main"]
