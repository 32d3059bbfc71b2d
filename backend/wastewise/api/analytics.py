"""Analytics endpoint."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from wastewise.api.deps import get_analytics_service, get_current_user_id
from wastewise.services.analytics import AnalyticsService

router = APIRouter(prefix="/api/analytics", tags=["analytics"])
logger = logging.getLogger(__name__)


@router.get("")
async def get_analytics(
    period: Optional[int] = Query(None, ge=1, le=365, description="Days of waste logs to include"),
    user_id: str = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """
    Dashboard metrics for the caller.

    Recomputed from raw rows on every call. The waste trend always covers
    the last 7 days regardless of `period`.
    """
    try:
        metrics = await service.get_metrics(user_id, period)
    except Exception as e:
        logger.error(f"Error fetching analytics: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch analytics data")
    return {"data": metrics.model_dump()}
