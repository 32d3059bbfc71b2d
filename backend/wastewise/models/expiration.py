"""Expiration prediction models."""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field


StorageType = Literal["refrigerator", "pantry", "freezer"]
MatchType = Literal["exact", "partial", "default"]


class ShelfLifeEntry(BaseModel):
    """One row of the shelf-life lookup table."""

    min: int
    max: int
    storage: dict[str, int] = Field(default_factory=dict)


class ExpirationEstimate(BaseModel):
    """Deterministic lookup-table estimate for a food in a storage location."""

    food_key: str
    match_type: MatchType
    days_until_expiration: int
    min_days: int
    max_days: int
    confidence: float
    recommended_storage: str


class ExpirationPredictionRequest(BaseModel):
    """Request to predict when a food item will expire."""

    food_name: str = Field(..., min_length=1)
    category: Optional[str] = None
    storage_location: str = Field(..., min_length=1)
    purchase_date: date
    current_condition: Optional[str] = None


class ExpirationPrediction(BaseModel):
    """Expiration prediction returned to clients."""

    predicted_expiration: date
    prediction_confidence: float
    days_until_expiration: int
    storage_recommendation: str
    tips: list[str] = Field(default_factory=list)
    factors_considered: list[str] = Field(default_factory=list)
    signs_of_spoilage: list[str] = Field(default_factory=list)
    ai_enhanced: bool = False


class AIExpirationResult(BaseModel):
    """Structured answer expected from the model for expiration prediction."""

    predicted_expiration_date: date
    confidence: float = Field(0.8, ge=0, le=1)
    factors_considered: list[str] = Field(default_factory=list)
    storage_tips: list[str] = Field(default_factory=list)
    signs_of_spoilage: list[str] = Field(default_factory=list)
