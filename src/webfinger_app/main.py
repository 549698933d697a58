"""FastAPI application factory and lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from webfinger_app.config import AppConfig
from webfinger_app.directory import DirectoryStore
from webfinger_app.errors import DirectoryUnavailable, WebfingerError
from webfinger_app.logging import setup_logging
from webfinger_app.webfinger import webfinger_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store: DirectoryStore = app.state.directory_store
    if store.path is not None:
        logger.info("Serving directory %s (reload: %s)", store.path, store.auto_reload)
        try:
            store.get()
        except DirectoryUnavailable as e:
            # Requests answer 503 until the file becomes readable
            logger.error("%s", e)

    yield

    logger.info("Shutdown complete")


async def webfinger_error_handler(request: Request, exc: WebfingerError) -> JSONResponse:
    if isinstance(exc, DirectoryUnavailable):
        logger.error("%s", exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(
    config: AppConfig | None = None,
    store: DirectoryStore | None = None,
) -> FastAPI:
    if config is None:
        config = AppConfig()
    if store is None:
        store = DirectoryStore(config.config_path, auto_reload=config.reload)

    app = FastAPI(title="WebFinger", version="0.1.0", lifespan=lifespan)
    app.state.config = config
    app.state.directory_store = store

    app.add_exception_handler(WebfingerError, webfinger_error_handler)

    # Routes
    app.add_api_route("/.well-known/webfinger", webfinger_handler, methods=["GET"])

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


def main() -> None:
    """Entry point for the ``webfinger-app`` CLI command."""
    config = AppConfig()
    setup_logging(config.log_level)
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_config=None,
    )


app = create_app()


if __name__ == "__main__":
    main()
