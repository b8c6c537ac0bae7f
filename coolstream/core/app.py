"""
FastAPI Application Factory
Creates and configures the FastAPI app instance
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from coolstream.api.endpoints import health, library, movies, tv
from coolstream.core.config import settings
from coolstream.services.storage import get_kv_store
import logging

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info("Starting CoolStream catalog service")
    logger.info(f"Base URL: {settings.BASE_URL}")
    if settings.TMDB_API_KEY == "demo_key":
        logger.warning("TMDB_API_KEY is not set; catalog requests will fail")

    yield

    logger.info("Shutting down CoolStream catalog service")
    await get_kv_store().close()


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title="CoolStream Catalog",
        description="Movie and TV catalog proxy with per-user watchlist, progress and preferences",
        version="1.0.0",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(movies.router)
    app.include_router(tv.router)
    app.include_router(library.router)

    return app
