"""Analytics models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class WasteTrendPoint(BaseModel):
    """Action counts for one calendar day."""

    date: str
    wasted: int = 0
    saved: int = 0
    donated: int = 0


class CategoryBreakdown(BaseModel):
    """Item count for a food category."""

    category: str
    count: int
    percentage: int


class ActionDistribution(BaseModel):
    """Waste log count for an action."""

    action: str
    count: int
    percentage: int


class AnalyticsMetrics(BaseModel):
    """Dashboard metrics recomputed from raw rows on every request."""

    total_items: int = 0
    expiring_soon: int = 0
    expired: int = 0
    money_saved: float = 0
    waste_prevented: int = 0
    co2_saved: float = 0
    meals_preserved: int = 0
    donation_count: int = 0
    waste_trend: list[WasteTrendPoint] = Field(default_factory=list)
    category_breakdown: list[CategoryBreakdown] = Field(default_factory=list)
    action_distribution: list[ActionDistribution] = Field(default_factory=list)
