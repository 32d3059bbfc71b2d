"""
Meal planning service.

Builds multi-day meal plans from the user's ingredients. The AI planner is
preferred; the round-robin template plan below is used when it is missing or
fails.
"""

import logging
from typing import Optional, TYPE_CHECKING

from supabase import Client

from wastewise.models.food_items import FoodStatus
from wastewise.models.planning import (
    MealPlan,
    MealPlanDay,
    MealPlanRequest,
    PlannedMeal,
    PlanSlot,
)
from wastewise.services.ai_responses import DEFAULT_PLAN_TIPS
from wastewise.services.supabase import TABLES

if TYPE_CHECKING:
    from wastewise.services.ai import AIService

logger = logging.getLogger(__name__)

SLOT_ORDER = [PlanSlot.BREAKFAST, PlanSlot.LUNCH, PlanSlot.DINNER, PlanSlot.SNACK]
INGREDIENTS_PER_MEAL = 3
FALLBACK_SHOPPING_LIST = ["Check your pantry for additional seasonings and basics"]


def slot_for(index: int) -> PlanSlot:
    """Slot name for the n-th meal of a day; anything past dinner is a snack."""
    return SLOT_ORDER[index] if index < len(SLOT_ORDER) else PlanSlot.SNACK


def generate_fallback_meal_plan(ingredients: list[str], days: int, meals_per_day: int) -> MealPlan:
    """Template meal plan that rotates through the ingredient list.

    Meals are numbered across the whole plan; meal k starts at ingredient
    (k * 3) mod n and takes up to three ingredients, wrapping around.
    """
    n = len(ingredients)
    take = min(INGREDIENTS_PER_MEAL, n)
    plan = []
    meal_number = 0

    for day in range(1, days + 1):
        meals = []
        for index in range(meals_per_day):
            slot = slot_for(index)
            start = (meal_number * INGREDIENTS_PER_MEAL) % n if n else 0
            used = [ingredients[(start + offset) % n] for offset in range(take)]
            meals.append(PlannedMeal(
                slot=slot,
                name=f"{slot.value.capitalize()} with {', '.join(used)}",
                ingredients_used=used,
            ))
            meal_number += 1
        plan.append(MealPlanDay(day=day, meals=meals))

    return MealPlan(
        meal_plan=plan,
        shopping_list=list(FALLBACK_SHOPPING_LIST),
        tips=list(DEFAULT_PLAN_TIPS),
    )


def prioritize_ingredients(available: list[str], food_items: list[dict]) -> list[str]:
    """Put tracked items with an expiration date first, soonest first.

    The rest of the available list follows, skipping names already listed.
    """
    dated = [item for item in food_items if item.get("expiration_date") and item.get("name")]
    dated.sort(key=lambda item: str(item["expiration_date"]))

    prioritized: list[str] = []
    for name in [item["name"] for item in dated] + list(available):
        if name not in prioritized:
            prioritized.append(name)
    return prioritized


class MealPlanService:
    """Meal plans: AI first, the rotating template plan as fallback."""

    def __init__(self, ai: Optional["AIService"], client: Optional[Client] = None):
        self.ai = ai
        self.client = client

    def _fallback(self, request: MealPlanRequest, message: str) -> dict:
        plan = generate_fallback_meal_plan(
            request.available_ingredients,
            request.days,
            request.meals_per_day,
        )
        return {"data": plan.model_dump(mode="json"), "message": message, "fallback": True}

    async def _expiring_items(self, user_id: str) -> list[dict]:
        result = (
            self.client.table(TABLES["food_items"])
            .select("name, expiration_date, status")
            .eq("user_id", user_id)
            .in_("status", [FoodStatus.EXPIRING_SOON.value, FoodStatus.FRESH.value])
            .order("expiration_date")
            .execute()
        )
        return result.data or []

    async def generate(self, user_id: str, request: MealPlanRequest) -> dict:
        """Generate a plan for the user. Never raises for AI or lookup errors."""
        if self.ai is None:
            logger.warning("AI service not configured, using template meal plan")
            return self._fallback(request, "AI service not configured. Here's a basic meal plan.")

        ingredients = list(request.available_ingredients)
        if request.include_expiring_items and self.client is not None:
            try:
                ingredients = prioritize_ingredients(ingredients, await self._expiring_items(user_id))
            except Exception as e:
                logger.error(f"Error fetching expiring items: {e}")

        try:
            plan = await self.ai.generate_meal_plan(
                ingredients=ingredients,
                dietary_restrictions=request.dietary_restrictions,
                days=request.days,
                meals_per_day=request.meals_per_day,
                budget_conscious=request.budget_conscious,
                cooking_skill=request.cooking_skill,
                time_constraints=request.time_constraints,
                health_goals=request.health_goals,
                family_size=request.family_size,
                leftover_preference=request.leftover_preference,
            )
        except Exception as e:
            logger.error(f"AI meal plan generation failed: {e}")
            return self._fallback(request, "AI temporarily unavailable. Here's a basic meal plan.")

        logger.info(f"Generated {request.days}-day AI meal plan for user {user_id}")
        return {
            "data": plan,
            "message": f"Generated {request.days}-day meal plan with {len(ingredients)} available ingredients",
        }
