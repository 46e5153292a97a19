"""HTTP surface and process entry point.

``GET /`` serves the index page, ``GET /{category}`` the category page, or a
freshly filtered render when ``q`` is given. Every response body comes from
the render cache; handlers never wait on enrichment.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import HTMLResponse, Response
from fastapi.staticfiles import StaticFiles

from perf_tooling.cache import INDEX_PAGE
from perf_tooling.config import Settings
from perf_tooling.engine import ContentEngine
from perf_tooling.enrichment import EnrichmentCoordinator
from perf_tooling.errors import ErrorCode, PerfToolingError
from perf_tooling.providers.base import build_http_client

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx

log = structlog.get_logger()

# One year, in seconds
STATIC_MAX_AGE = 365 * 24 * 3600


class CachedStaticFiles(StaticFiles):
    """StaticFiles that marks every served asset as cacheable for a year."""

    def file_response(self, *args: Any, **kwargs: Any) -> Response:
        response = super().file_response(*args, **kwargs)
        response.headers.setdefault("Cache-Control", f"public, max-age={STATIC_MAX_AGE}")
        return response


def configure_logging(settings: Settings) -> None:
    """Configure structlog rendering and stdlib (uvicorn) logging on stderr."""
    level = getattr(logging, settings.logging.level)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.logging.format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def create_app(
    engine: ContentEngine,
    coordinator: EnrichmentCoordinator | None = None,
    static_dir: str | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the app around an already loaded engine.

    When *coordinator* is given, the lifespan starts the engine's update
    consumer and the enrichment schedule, and stops both on shutdown. The
    shared *http_client* is closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        consumer: asyncio.Task[None] | None = None
        if coordinator is not None:
            consumer = asyncio.create_task(engine.run())
            coordinator.start()
        log.info("server_started", categories=sorted(engine.state.lists))

        yield

        if coordinator is not None:
            await coordinator.stop()
        if consumer is not None:
            consumer.cancel()
            await asyncio.gather(consumer, return_exceptions=True)
        if http_client is not None:
            await http_client.aclose()
        log.info("server_stopped")

    app = FastAPI(title="perf-tooling", lifespan=lifespan)
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.state.engine = engine

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return engine.cache.get(INDEX_PAGE)

    @app.get("/{category}", response_class=HTMLResponse)
    async def category_page(category: str, q: str | None = None) -> str:
        try:
            if q:
                return engine.cache.get_filtered(category, q)
            return engine.cache.get(category)
        except PerfToolingError as exc:
            if exc.code == ErrorCode.CATEGORY_NOT_FOUND:
                raise HTTPException(status_code=404, detail=exc.message) from exc
            raise

    if static_dir and Path(static_dir).is_dir():
        app.mount("/static", CachedStaticFiles(directory=static_dir), name="static")

    return app


def build_app(settings: Settings) -> FastAPI:
    """Load the store and wire the engine, providers and app from *settings*."""
    engine = ContentEngine.from_settings(settings)
    client = build_http_client(settings)
    coordinator = EnrichmentCoordinator(engine, settings, client)
    return create_app(
        engine,
        coordinator,
        static_dir=settings.server.static_dir,
        http_client=client,
    )


def main() -> None:
    settings = Settings()
    configure_logging(settings)
    app = build_app(settings)
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
