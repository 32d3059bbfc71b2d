"""
Recipe endpoints.

Stored recipes (public ones plus the caller's own), bookmarking, and
AI-expanded detailed recipes.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from wastewise.api.deps import get_ai, get_current_user_id, get_recipe_service
from wastewise.models.recipes import DetailedRecipeRequest, RecipeCreate, RecipeUpdate
from wastewise.services.ai import AIService
from wastewise.services.recipes import (
    RecipeAlreadySavedError,
    RecipeNotFoundError,
    RecipeService,
)

router = APIRouter(prefix="/api/recipes", tags=["recipes"])
logger = logging.getLogger(__name__)


@router.get("")
async def list_recipes(
    cuisine_type: Optional[str] = Query(None),
    dietary_tags: Optional[str] = Query(None, description="Single dietary tag to match"),
    difficulty: Optional[str] = Query(None),
    saved_only: bool = Query(False),
    user_id: str = Depends(get_current_user_id),
    service: RecipeService = Depends(get_recipe_service),
):
    """List recipes visible to the caller with a per-caller `saved` flag."""
    try:
        recipes = await service.list_recipes(user_id, cuisine_type, dietary_tags, difficulty, saved_only)
    except Exception as e:
        logger.error(f"Error fetching recipes: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch recipes")
    return {"data": recipes}


@router.post("", status_code=201)
async def create_recipe(
    body: RecipeCreate,
    user_id: str = Depends(get_current_user_id),
    service: RecipeService = Depends(get_recipe_service),
):
    try:
        recipe = await service.create_recipe(user_id, body)
    except Exception as e:
        logger.error(f"Error creating recipe: {e}")
        raise HTTPException(status_code=500, detail="Failed to create recipe")
    return {"data": recipe}


@router.get("/{recipe_id}")
async def get_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    service: RecipeService = Depends(get_recipe_service),
):
    try:
        recipe = await service.get_recipe(recipe_id, user_id)
    except Exception as e:
        logger.error(f"Error fetching recipe {recipe_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch recipe")
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return {"data": recipe}


@router.put("/{recipe_id}")
async def update_recipe(
    recipe_id: str,
    body: RecipeUpdate,
    user_id: str = Depends(get_current_user_id),
    service: RecipeService = Depends(get_recipe_service),
):
    """Update a recipe the caller owns."""
    try:
        recipe = await service.update_recipe(recipe_id, user_id, body)
    except Exception as e:
        logger.error(f"Error updating recipe {recipe_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update recipe")
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return {"data": recipe}


@router.delete("/{recipe_id}")
async def delete_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    service: RecipeService = Depends(get_recipe_service),
):
    try:
        await service.delete_recipe(recipe_id, user_id)
    except Exception as e:
        logger.error(f"Error deleting recipe {recipe_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete recipe")
    return {"message": "Recipe deleted successfully"}


@router.post("/{recipe_id}/save", status_code=201)
async def save_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    service: RecipeService = Depends(get_recipe_service),
):
    """Bookmark a recipe. 404 if it is not visible, 409 if already saved."""
    try:
        saved = await service.save_recipe(recipe_id, user_id)
    except RecipeNotFoundError:
        raise HTTPException(status_code=404, detail="Recipe not found")
    except RecipeAlreadySavedError:
        raise HTTPException(status_code=409, detail="Recipe already saved")
    except Exception as e:
        logger.error(f"Error saving recipe {recipe_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save recipe")
    return {"data": saved}


@router.delete("/{recipe_id}/save")
async def unsave_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    service: RecipeService = Depends(get_recipe_service),
):
    try:
        await service.unsave_recipe(recipe_id, user_id)
    except Exception as e:
        logger.error(f"Error unsaving recipe {recipe_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to unsave recipe")
    return {"message": "Recipe unsaved successfully"}


@router.post("/{recipe_id}/detailed")
async def detailed_recipe(
    recipe_id: str,
    body: DetailedRecipeRequest,
    user_id: str = Depends(get_current_user_id),
    ai: Optional[AIService] = Depends(get_ai),
):
    """Expand a basic recipe into detailed, step-by-step instructions."""
    if ai is None:
        raise HTTPException(status_code=503, detail="AI service not available")

    try:
        detailed = await ai.generate_detailed_recipe(
            title=body.recipe_title,
            ingredients=[ing.model_dump() for ing in body.basic_ingredients],
            instructions=body.basic_instructions,
            cuisine_type=body.cuisine_type,
            difficulty=body.difficulty,
            servings=body.servings,
        )
    except Exception as e:
        logger.error(f"Error generating detailed recipe {recipe_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate detailed recipe information")

    logger.info(f"Generated detailed recipe {recipe_id} for user {user_id}")
    return {"data": {"id": recipe_id, **detailed}}
