"""
Tradecraft Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tradecraft.core.config import settings
from tradecraft.api.v1 import router as api_v1_router
from tradecraft.services.market_data import close_candle_source

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Mock data: {settings.use_mock_data}")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_candle_source()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Tradecraft Chart Engine API

    ## Architecture
    - **Command Validator**: Strict schema check of LLM-generated chart commands
    - **Command Engine**: Applies commands to the chart state, reloading candles as needed
    - **Indicator Engine**: EMA, MACD, RSI series (pure Python/NumPy)
    - **Event Detector**: Signal-line, zero-line and level crossovers

    ## Core Principles
    - The LLM never touches the chart directly, only through validated commands
    - Derived series are display-only and deterministic
    - Education, not financial advice
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - allow both frontend ports
cors_origins = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:3001",
]
# Add any additional origins from settings
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])
if settings.frontend_url and settings.frontend_url not in cors_origins:
    cors_origins.append(settings.frontend_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Tradecraft Backend API",
        "docs": "/docs",
        "health": "/health",
    }
