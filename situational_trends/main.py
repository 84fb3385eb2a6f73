"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from situational_trends.config import settings
from situational_trends.api import halftime, health, trends

logging.basicConfig(format="%(message)s", level=settings.log_level)

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    logger.info("Starting Situational Trends API", environment=settings.environment)
    if not settings.supabase_url:
        logger.warning("SUPABASE_URL is not set, trend requests will fail")

    yield

    logger.info("Shutting down Situational Trends API")


app = FastAPI(
    title="Situational Trends API",
    description="Situational betting trends with consensus and dominance ranking",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(trends.router, prefix=settings.api_v1_prefix, tags=["Trends"])
app.include_router(halftime.router, prefix=settings.api_v1_prefix, tags=["Halftime"])


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "name": "Situational Trends API",
        "version": "0.1.0",
        "docs": "/docs",
    }
