"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from dealerdesk import __version__
from dealerdesk.config.loader import load_config
from dealerdesk.config.schema import Config
from dealerdesk.render.renderer import DocumentRenderer
from dealerdesk.search.aggregator import SearchAggregator
from dealerdesk.search.store import PostgrestEntityStore
from dealerdesk.server.routes import health, pdf, search


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown hooks; shutdown releases the shared browser."""
    logger.info("dealerdesk API starting up")
    yield
    logger.info("dealerdesk API shutting down")
    await app.state.renderer.close()


def create_app(
    config: Config | None = None,
    *,
    aggregator: SearchAggregator | None = None,
    renderer: DocumentRenderer | None = None,
) -> FastAPI:
    """Factory function to create the FastAPI application."""
    cfg = config or load_config()

    app = FastAPI(
        title="dealerdesk API",
        description="Back-office global search and PDF export",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    app.state.config = cfg
    app.state.aggregator = aggregator or SearchAggregator(
        PostgrestEntityStore(cfg.store), cfg.search
    )
    app.state.renderer = renderer or DocumentRenderer(cfg.renderer)

    app.include_router(health.router)
    app.include_router(search.router)
    app.include_router(pdf.router)

    return app
