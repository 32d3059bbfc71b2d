"""AI service - OpenAI integration for recipes, meal plans and shelf-life predictions."""

import logging
from datetime import date
from functools import lru_cache
from typing import Optional

from openai import AsyncOpenAI
from pydantic import ValidationError

from wastewise.config import get_settings
from wastewise.models.expiration import AIExpirationResult
from wastewise.services.ai_responses import (
    AIResponseError,
    extract_json,
    normalize_meal_plan_payload,
    normalize_recipe_payload,
    normalize_tips,
)

logger = logging.getLogger(__name__)
settings = get_settings()

FALLBACK_STORAGE_TIPS = [
    "Store in a cool, dry place away from direct sunlight",
    "Check regularly for signs of spoilage",
    "Use proper containers to maintain freshness",
    "Follow first-in, first-out principle",
]


class AIService:
    """OpenAI-powered text generation for wastewise.

    Every call is a single attempt. Callers decide what to do on failure.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        recipe_model: str = "gpt-4o",
        timeout: float = 60,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.client = client or AsyncOpenAI(api_key=api_key)
        self.model = model
        self.recipe_model = recipe_model
        self.timeout = timeout

    async def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> str:
        """Run one chat completion and return the raw text."""
        response = await self.client.chat.completions.create(
            model=model or self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            response_format={"type": "json_object"},
            timeout=self.timeout,
        )
        return response.choices[0].message.content or ""

    async def generate_recipe_suggestions(
        self,
        ingredients: list[str],
        dietary_restrictions: Optional[list[str]] = None,
        cuisine_preference: Optional[str] = None,
        max_results: int = 5,
        cooking_time: Optional[str] = None,
        difficulty: Optional[str] = None,
        meal_type: Optional[str] = None,
        health_goals: Optional[list[str]] = None,
        allergies: Optional[list[str]] = None,
    ) -> list[dict]:
        """Generate recipe ideas that use the given ingredients."""
        requirements = [f"- Focus on these ingredients: {', '.join(ingredients)}"]
        if dietary_restrictions:
            requirements.append(f"- Follow these dietary restrictions: {', '.join(dietary_restrictions)}")
        if allergies:
            requirements.append(f"- Never use these allergens: {', '.join(allergies)}")
        if cuisine_preference:
            requirements.append(f"- Prefer {cuisine_preference} cuisine")
        if cooking_time:
            requirements.append(f"- Cooking time should be {cooking_time}")
        if difficulty:
            requirements.append(f"- Difficulty level: {difficulty}")
        if meal_type:
            requirements.append(f"- Meal type: {meal_type}")
        if health_goals:
            requirements.append(f"- Support these health goals: {', '.join(health_goals)}")

        system_prompt = f"""You are a creative chef who helps people cook with what they already have so less food goes to waste.

Return JSON with this structure:
{{
  "recipes": [
    {{
      "title": "Recipe Name",
      "description": "Appealing description",
      "ingredients": [{{"name": "ingredient", "quantity": 2, "unit": "cups", "available": true}}],
      "instructions": ["Step 1", "Step 2"],
      "prep_time": 15,
      "cook_time": 30,
      "servings": 4,
      "difficulty": "easy|medium|hard",
      "cuisine_type": "Italian",
      "dietary_tags": ["vegetarian"],
      "match_percentage": 85,
      "missing_ingredients": [],
      "chef_tips": ["tip"]
    }}
  ]
}}

Generate EXACTLY {max_results} distinct recipes."""

        text = await self._complete(
            system_prompt,
            "Requirements:\n" + "\n".join(requirements),
            model=self.recipe_model,
            temperature=0.9,
            max_tokens=6144,
        )
        recipes = normalize_recipe_payload(extract_json(text))
        logger.info(f"Parsed {len(recipes)} AI recipes")
        return recipes

    async def generate_meal_plan(
        self,
        ingredients: list[str],
        dietary_restrictions: Optional[list[str]] = None,
        days: int = 3,
        meals_per_day: int = 3,
        budget_conscious: bool = False,
        cooking_skill: str = "medium",
        time_constraints: str = "moderate",
        health_goals: Optional[list[str]] = None,
        family_size: int = 2,
        leftover_preference: bool = True,
    ) -> dict:
        """Generate a multi-day meal plan that uses up available ingredients."""
        system_prompt = """You are a meal planner focused on reducing food waste.
Ingredients listed first expire soonest and should be used first.

Return JSON:
{
  "meal_plan": [
    {"day": 1, "meals": [{"slot": "breakfast", "name": "...", "ingredients_used": ["..."], "prep_time": 10}]}
  ],
  "shopping_list": ["item"],
  "ingredient_utilization": {"ingredient": "how it is used"},
  "meal_prep_strategy": {"prep_ahead": ["..."], "storage_tips": ["..."]},
  "nutritional_summary": {"daily_average_calories": 1800, "macronutrient_balance": "..."},
  "tips": ["tip"]
}"""

        user_prompt = f"""Plan {days} day(s) with {meals_per_day} meal(s) per day for {family_size} people.

Available ingredients: {', '.join(ingredients)}
Dietary restrictions: {', '.join(dietary_restrictions or []) or 'none'}
Health goals: {', '.join(health_goals or []) or 'none'}
Cooking skill: {cooking_skill}
Time constraints: {time_constraints}
Budget conscious: {'yes' if budget_conscious else 'no'}
Plan for leftovers: {'yes' if leftover_preference else 'no'}"""

        text = await self._complete(system_prompt, user_prompt, temperature=0.7)
        return normalize_meal_plan_payload(extract_json(text))

    async def improve_expiration_prediction(
        self,
        food_name: str,
        category: str,
        storage_location: str,
        purchase_date: date,
        current_condition: Optional[str] = None,
    ) -> AIExpirationResult:
        """Ask the model for an expiration date. Errors propagate to the caller."""
        system_prompt = """You are a food science expert predicting when food will spoil.

Respond with JSON:
{
  "predicted_expiration_date": "YYYY-MM-DD",
  "confidence": 0.85,
  "factors_considered": ["factor1", "factor2"],
  "storage_tips": ["tip1", "tip2"],
  "signs_of_spoilage": ["sign1", "sign2"]
}"""

        user_prompt = f"""Predict the expiration date for {food_name} (category: {category}).

- Purchase date: {purchase_date.isoformat()}
- Current condition: {current_condition or 'good'}
- Storage location: {storage_location}"""

        text = await self._complete(system_prompt, user_prompt, temperature=0.2)
        try:
            return AIExpirationResult.model_validate(extract_json(text))
        except ValidationError as e:
            raise AIResponseError(f"Invalid expiration prediction: {e}") from e

    async def generate_storage_tips(self, food_name: str, storage_location: str) -> list[str]:
        """Get 3-4 storage tips. Falls back to generic tips on any failure."""
        try:
            text = await self._complete(
                'You are a food storage expert. Return JSON: {"tips": ["tip 1", "tip 2", "tip 3"]}',
                f"Give 3-4 practical tips for storing {food_name} in the {storage_location}: "
                "optimal conditions, extending freshness, and signs of spoilage.",
                temperature=0.4,
                max_tokens=500,
            )
            return normalize_tips(extract_json(text))
        except Exception as e:
            logger.error(f"Error generating storage tips: {e}")
            return list(FALLBACK_STORAGE_TIPS)

    async def generate_detailed_recipe(
        self,
        title: str,
        ingredients: list[dict],
        instructions: list[str],
        cuisine_type: Optional[str] = None,
        difficulty: Optional[str] = None,
        servings: Optional[int] = None,
    ) -> dict:
        """Expand a basic recipe into a detailed, step-by-step version."""
        ingredients_text = "\n".join(
            f"- {ing.get('quantity', '')} {ing.get('unit', '')} {ing.get('name', '')}".strip()
            for ing in ingredients
        ) or "No ingredients provided"
        instructions_text = "\n".join(
            f"{i + 1}. {step}" for i, step in enumerate(instructions)
        ) or "No instructions provided"

        system_prompt = """You are a cookbook author. Expand basic recipes with precise quantities,
preparation notes, timings, visual cues and troubleshooting advice.

Return JSON:
{
  "title": "...",
  "description": "...",
  "detailed_ingredients": [{"name": "...", "quantity": 2, "unit": "cups", "notes": "...", "category": "..."}],
  "detailed_instructions": [{"step": 1, "instruction": "...", "technique": "...", "time_estimate": 5, "tips": "..."}],
  "chef_tips": ["..."],
  "equipment_needed": ["..."],
  "variations": ["..."],
  "storage_instructions": "...",
  "estimated_calories_per_serving": 450
}"""

        user_prompt = f"""Title: {title}
Cuisine: {cuisine_type or 'International'}
Difficulty: {difficulty or 'Medium'}
Servings: {servings or 4}

Ingredients:
{ingredients_text}

Instructions:
{instructions_text}"""

        text = await self._complete(system_prompt, user_prompt, model=self.recipe_model, temperature=0.7)
        parsed = extract_json(text)
        if not isinstance(parsed, dict):
            raise AIResponseError("Detailed recipe was not a JSON object")
        return {"title": title, **parsed}


@lru_cache
def get_ai_service() -> AIService | None:
    """Get cached AI service, or None when no API key is configured."""
    if not settings.ai_enabled:
        logger.warning("OPENAI_API_KEY not set - AI features use fallbacks")
        return None
    return AIService(
        api_key=settings.openai_api_key,
        model=settings.ai_model,
        recipe_model=settings.ai_recipe_model,
        timeout=settings.ai_timeout_seconds,
    )
