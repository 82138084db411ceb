"""Duplex Tracker FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from duplex_tracker.api import routers
from duplex_tracker.api.errors import register_error_handlers
from duplex_tracker.config import settings
from duplex_tracker.models import Base
from duplex_tracker.services import async_engine
from duplex_tracker.services.logging import setup_server_logging

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup and shutdown)."""
    # Startup: create any missing tables
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialized")
    yield
    # Shutdown: release pooled connections
    await async_engine.dispose()
    logger.info("Application shutting down")


app = FastAPI(
    title=settings.api_title,
    description="Construction cost tracking for duplex housing units",
    version=settings.api_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.cors_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

for router in routers:
    app.include_router(router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


def main(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Run the API server with stdout + file logging."""
    setup_server_logging()
    logger.info("Starting Duplex Tracker API on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
