"""AI endpoints - expiration prediction, recipe suggestions, meal plans.

Every endpoint answers even when the AI service is missing or failing:
results then come from the lookup table or the templates and carry
`fallback: true` (or `ai_enhanced: false` for predictions).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from wastewise.api.deps import (
    CurrentUser,
    get_current_user_id,
    get_expiration_service,
    get_meal_plan_service,
    get_optional_user,
    get_recipe_suggestion_service,
)
from wastewise.config import get_settings
from wastewise.models.expiration import ExpirationPredictionRequest
from wastewise.models.planning import MealPlanRequest
from wastewise.models.recipes import RecipeSuggestionRequest
from wastewise.services.expiration import ExpirationService
from wastewise.services.planning import MealPlanService
from wastewise.services.recipes import RecipeSuggestionService

router = APIRouter(prefix="/api/ai", tags=["ai"])
logger = logging.getLogger(__name__)
settings = get_settings()


@router.post("/predict-expiration")
async def predict_expiration(
    body: ExpirationPredictionRequest,
    user_id: str = Depends(get_current_user_id),
    service: ExpirationService = Depends(get_expiration_service),
):
    """Predict a food item's expiration date. AI first, lookup table as fallback."""
    try:
        prediction = await service.predict(body)
    except Exception as e:
        logger.error(f"Error predicting expiration: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return {"data": prediction.model_dump(mode="json")}


@router.post("/recipe-suggestions")
async def recipe_suggestions(
    body: RecipeSuggestionRequest,
    user: Optional[CurrentUser] = Depends(get_optional_user),
    service: RecipeSuggestionService = Depends(get_recipe_suggestion_service),
):
    """
    Suggest recipes for a list of ingredients.

    Requests with `test_mode: true` may skip authentication while
    TEST_MODE_ENABLED is on.
    """
    if user is None and not (body.test_mode and settings.test_mode_enabled):
        raise HTTPException(status_code=401, detail="Unauthorized")

    if not body.ingredients:
        raise HTTPException(status_code=400, detail="No ingredients provided")

    logger.info(f"Generating recipe suggestions for ingredients: {body.ingredients}")
    return await service.suggest(body)


@router.post("/meal-plan")
async def meal_plan(
    body: MealPlanRequest,
    user_id: str = Depends(get_current_user_id),
    service: MealPlanService = Depends(get_meal_plan_service),
):
    """Generate a multi-day meal plan, expiring items first when requested."""
    if not body.available_ingredients:
        raise HTTPException(status_code=400, detail="No ingredients provided")

    logger.info(f"Generating meal plan for ingredients: {body.available_ingredients}")
    return await service.generate(user_id, body)
