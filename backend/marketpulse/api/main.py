"""
FastAPI application entry point.

Serves the watch-list, triggers refreshes and analyses, and exposes the
inference model settings.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from marketpulse.core.config import settings
from marketpulse.core.logging import setup_logging
from marketpulse.core.database import AsyncSessionLocal, close_db, init_db
from marketpulse.services.sentiment_orchestrator import create_orchestrator

# Setup logging
setup_logging()

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Watch-list prices with local-model news sentiment",
    debug=settings.DEBUG,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup() -> None:
    """Create tables and the process-wide orchestrator."""
    await init_db()
    app.state.orchestrator = create_orchestrator(AsyncSessionLocal())


@app.on_event("shutdown")
async def shutdown() -> None:
    """Run on application shutdown."""
    orchestrator = getattr(app.state, "orchestrator", None)
    if orchestrator is not None:
        await orchestrator.store.close()
    await close_db()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }


from marketpulse.api.tickers import router as tickers_router
from marketpulse.api.refresh import router as refresh_router
from marketpulse.api.inference import router as inference_router

app.include_router(tickers_router, prefix="/api/v1/tickers", tags=["tickers"])
app.include_router(refresh_router, prefix="/api/v1/refresh", tags=["refresh"])
app.include_router(inference_router, prefix="/api/v1/models", tags=["models"])
