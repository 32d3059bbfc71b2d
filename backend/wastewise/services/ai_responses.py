"""
Parsing and normalization of generative model output.

Models answer with raw JSON, JSON inside a markdown fence, or JSON buried in
prose. Recipe answers come in several shapes; they are classified first and
then normalized into one list of recipe dicts.
"""

import json
import logging
import re
import uuid
from enum import Enum
from typing import Any

from pydantic import ValidationError

from wastewise.models.planning import MealPlanDay, PlanSlot

logger = logging.getLogger(__name__)

FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
EMBEDDED_OBJECT = re.compile(r"\{[\s\S]*\}")
EMBEDDED_ARRAY = re.compile(r"\[[\s\S]*\]")
LEADING_NUMBER = re.compile(r"\d+")


class AIResponseError(Exception):
    """The model answered, but not with anything we can use."""


def extract_json(text: str | None) -> Any:
    """Parse JSON from model output, tolerating markdown fences and prose."""
    if not text or not text.strip():
        raise AIResponseError("Empty response from model")

    candidates = []
    match = FENCED_JSON.search(text)
    if match:
        candidates.append(match.group(1).strip())
    candidates.append(text.strip())
    for pattern in (EMBEDDED_OBJECT, EMBEDDED_ARRAY):
        embedded = pattern.search(text)
        if embedded:
            candidates.append(embedded.group(0))

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except ValueError:
            continue

    logger.warning(f"Could not parse model output as JSON: {text[:200]}...")
    raise AIResponseError("Model response was not valid JSON")


# =============================================================================
# Recipe payloads
# =============================================================================


class RecipePayloadKind(str, Enum):
    """Shapes a recipe answer can take."""

    WRAPPED = "wrapped"  # {"recipes": [...]} or {"recipes": {...}}
    ARRAY = "array"  # [...]
    SINGLE = "single"  # {...} describing one recipe
    EMPTY = "empty"


def classify_recipe_payload(parsed: Any) -> RecipePayloadKind:
    """Decide which recipe shape the parsed answer has."""
    if isinstance(parsed, list):
        return RecipePayloadKind.ARRAY if parsed else RecipePayloadKind.EMPTY
    if isinstance(parsed, dict):
        if "recipes" in parsed:
            return RecipePayloadKind.WRAPPED if parsed["recipes"] else RecipePayloadKind.EMPTY
        return RecipePayloadKind.SINGLE if parsed else RecipePayloadKind.EMPTY
    return RecipePayloadKind.EMPTY


def _recipe_items(parsed: Any, kind: RecipePayloadKind) -> list[Any]:
    if kind == RecipePayloadKind.WRAPPED:
        recipes = parsed["recipes"]
        return recipes if isinstance(recipes, list) else [recipes]
    if kind == RecipePayloadKind.ARRAY:
        return parsed
    if kind == RecipePayloadKind.SINGLE:
        return [parsed]
    return []


def _as_int(value: Any, default: int) -> int:
    """Whole number from 25, 25.0 or "25 minutes"; anything else is the default."""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value) if value > 0 else default
    if isinstance(value, str):
        match = LEADING_NUMBER.search(value)
        if match and int(match.group(0)) > 0:
            return int(match.group(0))
    return default


def normalize_recipe(recipe: dict, index: int = 0) -> dict:
    """Fill in the fields clients rely on for an AI-generated recipe."""
    prep_time = _as_int(recipe.get("prep_time"), 15)
    cook_time = _as_int(recipe.get("cook_time"), 30)
    return {
        **recipe,
        "id": recipe.get("id") or f"ai-recipe-{uuid.uuid4().hex[:12]}-{index}",
        "title": recipe.get("title") or "AI Generated Recipe",
        "description": recipe.get("description") or "A delicious recipe created just for you",
        "cuisine_type": recipe.get("cuisine_type") or "International",
        "meal_type": recipe.get("meal_type") or "main",
        "difficulty": recipe.get("difficulty") or "medium",
        "prep_time": prep_time,
        "cook_time": cook_time,
        "total_time": _as_int(recipe.get("total_time"), prep_time + cook_time),
        "servings": _as_int(recipe.get("servings"), 4),
        "ingredients": recipe.get("ingredients") or [],
        "instructions": recipe.get("instructions") or [],
        "dietary_tags": recipe.get("dietary_tags") or [],
        "chef_tips": recipe.get("chef_tips") or [],
        "match_percentage": recipe.get("match_percentage") or 80,
        "missing_ingredients": recipe.get("missing_ingredients") or [],
        "storage_notes": recipe.get("storage_notes") or "Store leftovers in refrigerator for up to 3 days",
        "generated": True,
        "saved": False,
    }


def normalize_recipe_payload(parsed: Any) -> list[dict]:
    """Turn any accepted recipe shape into a list of normalized recipes."""
    kind = classify_recipe_payload(parsed)
    recipes = [
        normalize_recipe(item, index)
        for index, item in enumerate(_recipe_items(parsed, kind))
        if isinstance(item, dict)
    ]
    if not recipes:
        raise AIResponseError(f"No recipes found in model response ({kind.value})")
    return recipes


# =============================================================================
# Meal plan payloads
# =============================================================================

DEFAULT_PLAN_TIPS = [
    "Use ingredients that expire soonest first",
    "Prep ingredients in advance to save time",
    "Store leftovers properly for next day meals",
]


def _planned_meals(meals: Any) -> list[dict]:
    """Meals may arrive keyed by slot or as a list; both become PlannedMeal dicts."""
    if isinstance(meals, dict):
        items = [
            {**meal, "slot": slot} if isinstance(meal, dict) else {"slot": slot, "name": str(meal)}
            for slot, meal in meals.items()
        ]
    elif isinstance(meals, list):
        items = [dict(meal) for meal in meals if isinstance(meal, dict)]
    else:
        raise AIResponseError("Meal plan day has no meals")

    slots = list(PlanSlot)
    known = {slot.value for slot in slots}
    for index, item in enumerate(items):
        slot = str(item.get("slot") or item.get("meal_type") or "").lower()
        if not slot:
            slot = slots[min(index, len(slots) - 1)].value
        elif slot not in known:
            slot = PlanSlot.SNACK.value
        used = item.get("ingredients_used") or []
        if isinstance(used, str):
            used = [used]
        item["slot"] = slot
        item["name"] = item.get("name") or item.get("title") or slot.capitalize()
        item["ingredients_used"] = [str(i) for i in used] if isinstance(used, list) else []
    return items


def normalize_meal_plan_payload(parsed: Any) -> dict:
    """Validate an AI meal plan into the same day/meal shape as the template plan."""
    if not isinstance(parsed, dict) or not isinstance(parsed.get("meal_plan"), list):
        raise AIResponseError("Invalid meal plan structure")

    days = []
    for index, day in enumerate(parsed["meal_plan"], start=1):
        if not isinstance(day, dict):
            raise AIResponseError("Invalid meal plan day")
        try:
            plan_day = MealPlanDay(day=day.get("day") or index, meals=_planned_meals(day.get("meals")))
        except ValidationError as e:
            raise AIResponseError(f"Invalid meal plan day: {e.errors()[0]['msg']}") from e
        days.append(plan_day.model_dump(mode="json"))

    return {
        "meal_plan": days,
        "shopping_list": parsed.get("shopping_list")
        or ["Check your pantry for additional seasonings and basics"],
        "tips": parsed.get("tips") or parsed.get("chef_tips") or list(DEFAULT_PLAN_TIPS),
        "ingredient_utilization": parsed.get("ingredient_utilization") or {},
        "meal_prep_strategy": parsed.get("meal_prep_strategy") or {},
        "nutritional_summary": parsed.get("nutritional_summary") or {},
        "leftover_transformation": parsed.get("leftover_transformation") or [],
    }


def normalize_tips(parsed: Any) -> list[str]:
    """Accept a bare list of tips or {"tips": [...]}."""
    if isinstance(parsed, dict):
        parsed = parsed.get("tips")
    if not isinstance(parsed, list):
        raise AIResponseError("Storage tips were not a list")
    return [str(tip) for tip in parsed if str(tip).strip()][:4]
