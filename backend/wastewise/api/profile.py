"""User profile endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from wastewise.api.deps import CurrentUser, get_current_user, get_profile_service
from wastewise.models.profile import ProfileUpdate
from wastewise.services.profile import ProfileService

router = APIRouter(prefix="/api/profile", tags=["profile"])
logger = logging.getLogger(__name__)


@router.get("")
async def get_profile(
    user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Get the caller's profile, creating it on first access."""
    try:
        profile = await service.get_or_create(user.id, user.email, user.metadata)
    except Exception as e:
        logger.error(f"Error fetching profile: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch profile")
    return {"data": profile}


@router.put("")
async def update_profile(
    body: ProfileUpdate,
    user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    try:
        profile = await service.update(user.id, user.email, body)
    except Exception as e:
        logger.error(f"Error updating profile: {e}")
        raise HTTPException(status_code=500, detail="Failed to update profile")
    return {"data": profile}
