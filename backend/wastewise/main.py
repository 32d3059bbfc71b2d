"""
wastewise: FastAPI backend for household food waste reduction.

Run with: uvicorn wastewise.main:app --reload

Architecture:
- Inventory, waste logs, donations, recipes and profiles in Supabase
- Expiration predictions, recipe suggestions and meal plans from OpenAI,
  with deterministic lookup-table and template fallbacks
- Analytics recomputed from raw rows on every request
- A daily background job keeps stored food statuses current
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from wastewise import __version__
from wastewise.config import get_settings
from wastewise.api import health, ai, cron
from wastewise.api import analytics as analytics_api
from wastewise.api import donations as donations_api
from wastewise.api import food_items as food_items_api
from wastewise.api import profile as profile_api
from wastewise.api import recipes as recipes_api
from wastewise.api import waste_logs as waste_logs_api
from wastewise.jobs.scheduler import start_scheduler, shutdown_scheduler

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def scheduler_wanted() -> bool:
    return settings.scheduler_enabled and os.environ.get("TESTING", "").lower() != "true"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("Starting wastewise backend...")

    if not settings.ai_enabled:
        logger.warning("OPENAI_API_KEY not set - using lookup table and template fallbacks")

    if scheduler_wanted():
        start_scheduler()

    yield

    logger.info("Shutting down wastewise backend...")
    if scheduler_wanted():
        shutdown_scheduler()


app = FastAPI(
    title="wastewise",
    description="Food inventory, expiration prediction and waste analytics API",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Error envelope: every failure is {"error": "..."}
# =============================================================================


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", []) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(food_items_api.router)  # /api/food-items
app.include_router(waste_logs_api.router)  # /api/waste-logs
app.include_router(donations_api.router)  # /api/donations
app.include_router(donations_api.locations_router)  # /api/donation-locations
app.include_router(recipes_api.router)  # /api/recipes
app.include_router(analytics_api.router)  # /api/analytics
app.include_router(profile_api.router)  # /api/profile
app.include_router(ai.router)  # /api/ai
app.include_router(cron.router)  # /api/cron


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "wastewise",
        "version": __version__,
        "description": "Food inventory, expiration prediction and waste analytics API",
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "food-items": "/api/food-items",
            "waste-logs": "/api/waste-logs",
            "donations": "/api/donations",
            "donation-locations": "/api/donation-locations",
            "recipes": "/api/recipes",
            "analytics": "/api/analytics",
            "profile": "/api/profile",
            "ai": "/api/ai",
            "cron": "/api/cron",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "wastewise.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=not settings.is_production,
    )
