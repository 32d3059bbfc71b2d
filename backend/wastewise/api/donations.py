"""Donation and donation location endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from wastewise.api.deps import get_current_user_id, get_donation_service
from wastewise.models.donations import DonationCreate, DonationUpdate
from wastewise.services.donations import DEFAULT_RADIUS_KM, DonationService

router = APIRouter(prefix="/api/donations", tags=["donations"])
locations_router = APIRouter(prefix="/api/donation-locations", tags=["donations"])
logger = logging.getLogger(__name__)


@router.get("")
async def list_donations(
    status: Optional[str] = Query(None, description="scheduled, completed, cancelled or all"),
    user_id: str = Depends(get_current_user_id),
    service: DonationService = Depends(get_donation_service),
):
    try:
        donations = await service.list_donations(user_id, status)
    except Exception as e:
        logger.error(f"Error fetching donations: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch donations")
    return {"data": donations}


@router.post("", status_code=201)
async def create_donation(
    body: DonationCreate,
    user_id: str = Depends(get_current_user_id),
    service: DonationService = Depends(get_donation_service),
):
    """Schedule a donation. New donations start as scheduled."""
    try:
        donation = await service.create_donation(user_id, body)
    except Exception as e:
        logger.error(f"Error creating donation: {e}")
        raise HTTPException(status_code=500, detail="Failed to create donation")
    return {"data": donation}


@router.get("/{donation_id}")
async def get_donation(
    donation_id: str,
    user_id: str = Depends(get_current_user_id),
    service: DonationService = Depends(get_donation_service),
):
    try:
        donation = await service.get_donation(donation_id, user_id)
    except Exception as e:
        logger.error(f"Error fetching donation {donation_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch donation")
    if donation is None:
        raise HTTPException(status_code=404, detail="Donation not found")
    return {"data": donation}


@router.put("/{donation_id}")
async def update_donation(
    donation_id: str,
    body: DonationUpdate,
    user_id: str = Depends(get_current_user_id),
    service: DonationService = Depends(get_donation_service),
):
    try:
        donation = await service.update_donation(donation_id, user_id, body)
    except Exception as e:
        logger.error(f"Error updating donation {donation_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update donation")
    if donation is None:
        raise HTTPException(status_code=404, detail="Donation not found")
    return {"data": donation}


@router.delete("/{donation_id}")
async def delete_donation(
    donation_id: str,
    user_id: str = Depends(get_current_user_id),
    service: DonationService = Depends(get_donation_service),
):
    try:
        await service.delete_donation(donation_id, user_id)
    except Exception as e:
        logger.error(f"Error deleting donation {donation_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete donation")
    return {"message": "Donation deleted successfully"}


@locations_router.get("")
async def list_donation_locations(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius: float = Query(DEFAULT_RADIUS_KM, gt=0, description="Search radius in km"),
    service: DonationService = Depends(get_donation_service),
):
    """
    Active donation locations.

    With lat/lng, each location gets a `distance` in km and only those
    within `radius` are returned, nearest first.
    """
    try:
        locations = await service.list_locations(lat, lng, radius)
    except Exception as e:
        logger.error(f"Error fetching donation locations: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch donation locations")
    return {"data": locations}
