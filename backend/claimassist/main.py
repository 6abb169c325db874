"""
ClaimAssist Backend - Main Application Entry Point
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from claimassist.core.config import settings
from claimassist.core.logging import logger
from claimassist.api.routes import claims, assessment, review, summary, vehicles, analytics


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management."""
    logger.info(
        f"Starting {settings.APP_NAME} in {settings.APP_ENV} mode "
        f"(vision provider: {settings.VISION_PROVIDER})"
    )
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.APP_NAME,
    description="AI-assisted vehicle damage assessment for claims agents",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API Routers
app.include_router(claims.router, prefix="/claims", tags=["Claims"])
app.include_router(assessment.router, prefix="/claims", tags=["Assessment"])
app.include_router(review.router, prefix="/claims", tags=["Review"])
app.include_router(summary.router, prefix="/claims", tags=["Summary"])
app.include_router(vehicles.router, prefix="/vehicles", tags=["Vehicles"])
app.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "env": settings.APP_ENV,
        "vision_provider": settings.VISION_PROVIDER,
    }
