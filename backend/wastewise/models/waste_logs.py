"""Waste log models."""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class WasteAction(str, Enum):
    """What happened to a food item."""

    CONSUMED = "consumed"
    DONATED = "donated"
    WASTED = "wasted"
    PRESERVED = "preserved"
    COMPOSTED = "composted"


# Actions that count as waste prevented
SAVED_ACTIONS = frozenset({WasteAction.CONSUMED, WasteAction.DONATED, WasteAction.PRESERVED})


class WasteLogCreate(BaseModel):
    """Request to record a waste log."""

    food_item_id: Optional[str] = None
    action: WasteAction
    date: datetime.date
    quantity: Optional[float] = Field(None, ge=0)
    estimated_value: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=500)
