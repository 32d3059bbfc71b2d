"""Meal planning models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PlanSlot(str, Enum):
    """Meal slots in a day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class PlannedMeal(BaseModel):
    """A single meal in the plan. AI plans may carry extra detail such as prep_time."""

    model_config = ConfigDict(extra="allow")

    slot: PlanSlot
    name: str
    ingredients_used: list[str] = Field(default_factory=list)


class MealPlanDay(BaseModel):
    """All meals for one day of the plan."""

    day: int
    meals: list[PlannedMeal] = Field(default_factory=list)


class MealPlan(BaseModel):
    """A multi-day meal plan, from the AI planner or the template fallback."""

    meal_plan: list[MealPlanDay] = Field(default_factory=list)
    shopping_list: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)


class MealPlanRequest(BaseModel):
    """Request to generate a multi-day meal plan."""

    available_ingredients: list[str] = Field(default_factory=list)
    dietary_restrictions: list[str] = Field(default_factory=list)
    days: int = Field(3, ge=1, le=14)
    meals_per_day: int = Field(3, ge=1, le=6)
    include_expiring_items: bool = True
    budget_conscious: bool = False
    cooking_skill: str = "medium"
    time_constraints: str = "moderate"
    health_goals: list[str] = Field(default_factory=list)
    family_size: int = Field(2, ge=1)
    leftover_preference: bool = True
