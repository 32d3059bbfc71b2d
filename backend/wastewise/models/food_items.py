"""Food inventory models."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class FoodStatus(str, Enum):
    """Freshness status derived from the expiration date."""

    FRESH = "fresh"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"


class FoodItemCreate(BaseModel):
    """Request to add a food item."""

    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1)
    purchase_date: date
    expiration_date: Optional[date] = None
    predicted_expiration: Optional[date] = None
    storage_location: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1)
    notes: Optional[str] = Field(None, max_length=500)
    image_url: Optional[str] = None


class FoodItemUpdate(BaseModel):
    """Partial update of a food item. Only fields that are sent are written."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = None
    purchase_date: Optional[date] = None
    expiration_date: Optional[date] = None
    predicted_expiration: Optional[date] = None
    storage_location: Optional[str] = None
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=500)
    image_url: Optional[str] = None
