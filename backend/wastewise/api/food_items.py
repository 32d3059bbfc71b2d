"""Food inventory endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from wastewise.api.deps import get_current_user_id, get_food_item_service
from wastewise.models.food_items import FoodItemCreate, FoodItemUpdate
from wastewise.services.food_items import FoodItemService

router = APIRouter(prefix="/api/food-items", tags=["food-items"])
logger = logging.getLogger(__name__)


@router.get("")
async def list_food_items(
    status: Optional[str] = Query(None, description="fresh, expiring_soon, expired or all"),
    category: Optional[str] = Query(None),
    storage_location: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
    service: FoodItemService = Depends(get_food_item_service),
):
    """List the caller's food items, newest first."""
    try:
        items = await service.list_items(user_id, status, category, storage_location)
    except Exception as e:
        logger.error(f"Error fetching food items: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch food items")
    return {"data": items}


@router.post("", status_code=201)
async def create_food_item(
    body: FoodItemCreate,
    user_id: str = Depends(get_current_user_id),
    service: FoodItemService = Depends(get_food_item_service),
):
    """Add a food item. Status is derived from the expiration date."""
    try:
        item = await service.create_item(user_id, body)
    except Exception as e:
        logger.error(f"Error creating food item: {e}")
        raise HTTPException(status_code=500, detail="Failed to create food item")
    return {"data": item}


@router.get("/{item_id}")
async def get_food_item(
    item_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FoodItemService = Depends(get_food_item_service),
):
    try:
        item = await service.get_item(item_id, user_id)
    except Exception as e:
        logger.error(f"Error fetching food item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch food item")
    if item is None:
        raise HTTPException(status_code=404, detail="Food item not found")
    return {"data": item}


@router.put("/{item_id}")
async def update_food_item(
    item_id: str,
    body: FoodItemUpdate,
    user_id: str = Depends(get_current_user_id),
    service: FoodItemService = Depends(get_food_item_service),
):
    try:
        item = await service.update_item(item_id, user_id, body)
    except Exception as e:
        logger.error(f"Error updating food item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update food item")
    if item is None:
        raise HTTPException(status_code=404, detail="Food item not found")
    return {"data": item}


@router.delete("/{item_id}")
async def delete_food_item(
    item_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FoodItemService = Depends(get_food_item_service),
):
    try:
        await service.delete_item(item_id, user_id)
    except Exception as e:
        logger.error(f"Error deleting food item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete food item")
    return {"message": "Food item deleted successfully"}
