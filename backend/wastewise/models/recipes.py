"""Recipe and recipe-suggestion models."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


Difficulty = Literal["easy", "medium", "hard"]


class RecipeIngredient(BaseModel):
    """Ingredient line of a recipe."""

    name: str = Field(..., min_length=1)
    quantity: float = Field(1, ge=0)
    unit: str = "portion"


class RecipeCreate(BaseModel):
    """Request to store a recipe."""

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    ingredients: list[RecipeIngredient] = Field(..., min_length=1)
    instructions: list[str] = Field(..., min_length=1)
    cuisine_type: Optional[str] = None
    dietary_tags: list[str] = Field(default_factory=list)
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1)
    difficulty: Optional[Difficulty] = None
    image_url: Optional[str] = None
    is_public: bool = False


class RecipeUpdate(BaseModel):
    """Partial update of a stored recipe."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    ingredients: Optional[list[RecipeIngredient]] = None
    instructions: Optional[list[str]] = None
    cuisine_type: Optional[str] = None
    dietary_tags: Optional[list[str]] = None
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1)
    difficulty: Optional[Difficulty] = None
    image_url: Optional[str] = None
    is_public: Optional[bool] = None


class RecipeSuggestion(BaseModel):
    """A generated recipe idea for a set of ingredients."""

    model_config = {"extra": "allow"}

    id: str
    title: str
    description: str
    ingredients: list[dict[str, Any]] = Field(default_factory=list)
    instructions: list[Any] = Field(default_factory=list)
    prep_time: int = 15
    cook_time: int = 30
    servings: int = 4
    difficulty: str = "medium"
    dietary_tags: list[str] = Field(default_factory=list)
    match_score: Optional[int] = None
    match_percentage: int = 80
    saved: bool = False
    generated: bool = True


class RecipeSuggestionRequest(BaseModel):
    """Request for recipe suggestions from available ingredients."""

    ingredients: list[str] = Field(default_factory=list)
    dietary_restrictions: list[str] = Field(default_factory=list)
    cuisine_preference: Optional[str] = None
    max_results: int = 5
    cooking_time: Optional[str] = None
    difficulty: Optional[str] = None
    meal_type: Optional[str] = None
    health_goals: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    test_mode: bool = False


class DetailedRecipeRequest(BaseModel):
    """Request to expand a basic recipe into a detailed one."""

    recipe_title: str = Field(..., min_length=1)
    basic_ingredients: list[RecipeIngredient] = Field(default_factory=list)
    basic_instructions: list[str] = Field(default_factory=list)
    cuisine_type: Optional[str] = None
    difficulty: Optional[str] = None
    servings: Optional[int] = None
