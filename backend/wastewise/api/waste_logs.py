"""Waste log endpoints."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from wastewise.api.deps import get_current_user_id, get_waste_log_service
from wastewise.models.waste_logs import WasteLogCreate
from wastewise.services.waste_logs import WasteLogService

router = APIRouter(prefix="/api/waste-logs", tags=["waste-logs"])
logger = logging.getLogger(__name__)


@router.get("")
async def list_waste_logs(
    action: Optional[str] = Query(None, description="consumed, donated, wasted, preserved, composted or all"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    user_id: str = Depends(get_current_user_id),
    service: WasteLogService = Depends(get_waste_log_service),
):
    """List the caller's waste logs, newest first."""
    try:
        logs = await service.list_logs(user_id, action, start_date, end_date)
    except Exception as e:
        logger.error(f"Error fetching waste logs: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch waste logs")
    return {"data": logs}


@router.post("", status_code=201)
async def create_waste_log(
    body: WasteLogCreate,
    user_id: str = Depends(get_current_user_id),
    service: WasteLogService = Depends(get_waste_log_service),
):
    """Record what happened to a food item."""
    try:
        log = await service.create_log(user_id, body)
    except Exception as e:
        logger.error(f"Error creating waste log: {e}")
        raise HTTPException(status_code=500, detail="Failed to create waste log")
    return {"data": log}
