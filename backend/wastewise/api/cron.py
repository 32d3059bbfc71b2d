"""Cron job endpoints - called by system crontab or an external scheduler."""

from datetime import datetime
import logging

from fastapi import APIRouter, HTTPException, Request, Header

from wastewise.config import get_settings
from wastewise.jobs.status_refresh import refresh_food_statuses

router = APIRouter(prefix="/api/cron", tags=["cron"])
logger = logging.getLogger(__name__)
settings = get_settings()

LOCAL_HOSTS = ["127.0.0.1", "::1"]


def verify_cron_auth(
    request: Request,
    authorization: str | None = Header(None),
    x_cron_secret: str | None = Header(None),
) -> bool:
    """Verify cron request is authorized."""
    # Allow if no secret configured (dev mode)
    if not settings.cron_secret:
        return True

    if authorization and authorization == f"Bearer {settings.cron_secret}":
        return True

    if x_cron_secret and x_cron_secret == settings.cron_secret:
        return True

    # Only trust the socket peer; Host and X-Forwarded-For are client-controlled
    peer = request.client.host if request.client else ""
    forwarded = request.headers.get("x-forwarded-for", "")
    if peer in LOCAL_HOSTS and not forwarded:
        return True

    return False


@router.get("/refresh-statuses")
async def cron_refresh_statuses(
    request: Request,
    authorization: str | None = Header(None),
    x_cron_secret: str | None = Header(None),
):
    """
    Recompute stored food item statuses.

    The scheduler already runs this daily; this endpoint is for manual
    triggering or external cron jobs:
    0 3 * * * curl -s http://localhost:8000/api/cron/refresh-statuses
    """
    if not verify_cron_auth(request, authorization, x_cron_secret):
        raise HTTPException(status_code=401, detail="Unauthorized")

    logger.info("Refreshing food statuses (manual trigger)...")

    try:
        result = await refresh_food_statuses()
    except Exception as e:
        logger.error(f"Error refreshing food statuses: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "success": True,
        **result,
        "timestamp": datetime.utcnow().isoformat(),
    }
