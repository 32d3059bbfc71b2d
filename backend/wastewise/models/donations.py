"""Donation models."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class DonationStatus(str, Enum):
    """Lifecycle of a scheduled donation."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DonationItem(BaseModel):
    """A single item handed over in a donation."""

    food_item_id: Optional[str] = None
    name: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1)


class DonationCreate(BaseModel):
    """Request to schedule a donation."""

    location_id: str = Field(..., min_length=1)
    scheduled_date: date
    items: list[DonationItem] = Field(..., min_length=1)
    total_weight: Optional[float] = Field(None, ge=0)
    estimated_meals: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=500)


class DonationUpdate(BaseModel):
    """Partial update of a donation, including status changes."""

    location_id: Optional[str] = None
    scheduled_date: Optional[date] = None
    status: Optional[DonationStatus] = None
    items: Optional[list[DonationItem]] = None
    total_weight: Optional[float] = Field(None, ge=0)
    estimated_meals: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=500)
