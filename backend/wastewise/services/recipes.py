"""
Recipe service.

Template-based recipe suggestions used whenever the AI service is missing or
fails, AI suggestion orchestration, and CRUD for stored recipes.
"""

import hashlib
import logging
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from supabase import Client

from wastewise.models.recipes import (
    RecipeCreate,
    RecipeSuggestion,
    RecipeSuggestionRequest,
    RecipeUpdate,
)
from wastewise.services.supabase import TABLES, UNIQUE_VIOLATION, first_row

if TYPE_CHECKING:
    from wastewise.services.ai import AIService

logger = logging.getLogger(__name__)

MIN_SUGGESTIONS = 1
MAX_SUGGESTIONS = 10

PROTEINS = ("chicken", "beef", "pork", "fish", "salmon", "shrimp")
GRAINS = ("rice", "pasta", "noodles", "quinoa", "bread")
DAIRY = ("eggs", "cheese", "milk", "yogurt", "butter")
VEGETABLES = ("lettuce", "spinach", "kale", "tomato", "cucumber", "carrot")
SOUP_TENDER = ("chicken", "beef", "pork", "rice", "pasta", "potato")

GENERIC_DIFFICULTY = {1: "easy", 2: "medium", 3: "hard"}


# =============================================================================
# Template suggestions
# =============================================================================


def _contains_any(ingredient: str, keywords: tuple[str, ...]) -> bool:
    name = ingredient.lower()
    return any(keyword in name for keyword in keywords)


def _first_with(ingredients: list[str], keywords: tuple[str, ...]) -> Optional[str]:
    return next((ing for ing in ingredients if _contains_any(ing, keywords)), None)


def _without(ingredients: list[str], keywords: tuple[str, ...]) -> list[str]:
    return [ing for ing in ingredients if not _contains_any(ing, keywords)]


def _portions(ingredients: list[str], cap: int) -> list[dict]:
    return [{"name": ing, "quantity": 1, "unit": "portion"} for ing in ingredients[:cap]]


def _match_percentage(count: int, cap: int) -> int:
    return min(100, (count * 100) // cap)


def _suggestion_id(prefix: str, ingredients: list[str], dietary_restrictions: list[str]) -> str:
    """Stable id: the same inputs always give the same id."""
    key = "|".join(ingredients) + "#" + "|".join(dietary_restrictions)
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"


def generate_basic_recipe_suggestions(
    ingredients: list[str],
    dietary_restrictions: Optional[list[str]] = None,
    max_results: int = 6,
) -> list[RecipeSuggestion]:
    """Build recipe ideas from fixed templates.

    Pure and deterministic. Each template fires when the ingredient list
    contains one of its keywords; generic variations top the list up to
    max_results (at most three of them).
    """
    if not ingredients:
        return []

    tags = list(dietary_restrictions or [])
    count = len(ingredients)
    joined = ", ".join(ingredients)
    suggestions: list[RecipeSuggestion] = []

    def add(prefix: str, cap: int, listed: Optional[int] = None, **fields) -> None:
        suggestions.append(RecipeSuggestion(
            id=_suggestion_id(prefix, ingredients, tags),
            ingredients=_portions(ingredients, listed or cap),
            dietary_tags=tags,
            match_score=count,
            match_percentage=_match_percentage(count, cap),
            saved=False,
            generated=True,
            **fields,
        ))

    if any(_contains_any(ing, PROTEINS) for ing in ingredients):
        others = _without(ingredients, PROTEINS)[:3]
        add(
            "basic-protein-stir-fry",
            5,
            title=f"{ingredients[0]} Protein Stir-Fry",
            description=f"A quick and easy stir-fry featuring {joined} with your available protein and vegetables",
            instructions=[
                "Heat oil in a large pan or wok over medium-high heat",
                f"Cook {_first_with(ingredients, PROTEINS) or 'protein'} until done",
                f"Add {', '.join(others) or 'your vegetables'} and stir-fry until tender",
                "Season with salt, pepper, and your favorite sauce",
                "Serve hot over rice or noodles",
            ],
            prep_time=10,
            cook_time=15,
            servings=2,
            difficulty="easy",
        )

    if any(_contains_any(ing, GRAINS) for ing in ingredients):
        grain = _first_with(ingredients, GRAINS) or "Grain"
        others = _without(ingredients, GRAINS)[:2]
        add(
            "basic-grain-bowl",
            4,
            title=f"{grain} Power Bowl",
            description=f"A nutritious bowl combining {joined} with complementary flavors",
            instructions=[
                f"Cook your {grain} according to package instructions",
                f"Prepare {' and '.join(others) or 'your toppings'}",
                "Combine everything in a bowl",
                "Add your favorite dressing or sauce",
                "Garnish and enjoy your nutritious meal",
            ],
            prep_time=5,
            cook_time=20,
            servings=1,
            difficulty="easy",
        )

    if any(_contains_any(ing, DAIRY) for ing in ingredients):
        others = _without(ingredients, ("eggs", "milk"))[:2]
        add(
            "basic-scramble",
            4,
            title=f"{ingredients[0]} Scramble Delight",
            description=f"A protein-rich scramble featuring {joined} with fresh flavors",
            instructions=[
                "Beat eggs in a bowl with a splash of milk",
                "Heat pan with a little oil or butter over medium heat",
                f"Add {' and '.join(others) or 'your vegetables'} and cook until soft",
                "Pour in egg mixture and scramble gently",
                "Season with salt, pepper and fresh herbs, then serve hot",
            ],
            prep_time=5,
            cook_time=10,
            servings=1,
            difficulty="easy",
        )

    if any(_contains_any(ing, VEGETABLES) for ing in ingredients):
        greens = [ing for ing in ingredients if _contains_any(ing, VEGETABLES)][:3]
        toppings = _without(ingredients, VEGETABLES)[:2]
        add(
            "basic-salad",
            5,
            title=f"{ingredients[0]} Fresh Salad",
            description=f"A refreshing salad combining {joined} with complementary textures",
            instructions=[
                f"Wash and prepare {', '.join(greens)}",
                f"Add {' and '.join(toppings) or 'nuts or seeds'} as toppings",
                "Toss everything together in a large bowl",
                "Add your favorite dressing and seasonings",
                "Serve immediately for best freshness",
            ],
            prep_time=10,
            cook_time=0,
            servings=2,
            difficulty="easy",
        )

    if count >= 3:
        add(
            "basic-soup",
            6,
            title="Hearty Ingredient Soup",
            description=f"A warming soup made with {', '.join(ingredients[:3])} and other available ingredients",
            instructions=[
                "Add ingredients to a large pot with enough water or broth to cover",
                "Bring to a boil, then reduce heat and simmer",
                f"Cook for 20-30 minutes until {_first_with(ingredients, SOUP_TENDER) or 'main ingredients'} are tender",
                "Season with salt, pepper, and your favorite herbs",
                "Serve hot with bread or on its own",
            ],
            prep_time=10,
            cook_time=30,
            servings=4,
            difficulty="easy",
        )

    if count >= 3 and any("eggs" in ing.lower() for ing in ingredients):
        fillings = ", ".join(_without(ingredients, ("eggs",))[:3])
        add(
            "basic-frittata",
            5,
            title="Custom Ingredient Frittata",
            description=f"A delicious frittata combining eggs with {fillings}",
            instructions=[
                "Preheat oven to 375°F (190°C)",
                "Whisk eggs in a bowl with a splash of milk or cream",
                f"Chop {fillings} into bite-sized pieces",
                "Heat an oven-safe skillet over medium heat and add a little oil or butter",
                "Pour in egg mixture and cook for 2-3 minutes until edges set",
                f"Add {fillings} on top of the eggs",
                "Transfer to oven and bake for 10-12 minutes until fully set",
                "Let cool slightly before slicing and serving",
            ],
            prep_time=15,
            cook_time=15,
            servings=4,
            difficulty="medium",
        )

    variation = 1
    while len(suggestions) < max_results and variation <= 3:
        add(
            f"generic-recipe-{variation}",
            count,
            listed=5,
            title=f"Delicious {ingredients[0]} Dish Variation {variation}",
            description=f"A creative way to use {joined} in a delicious meal",
            instructions=[
                f"Prepare all {count} ingredients by washing and chopping as needed",
                "Combine ingredients in a suitable cooking vessel",
                "Cook according to your preferred method",
                "Season to taste with salt, pepper, and your favorite herbs",
                "Serve hot and enjoy your nutritious meal!",
            ],
            prep_time=10 + variation * 5,
            cook_time=15 + variation * 5,
            servings=2 + (variation % 3),
            difficulty=GENERIC_DIFFICULTY[variation],
        )
        variation += 1

    return suggestions[:max(0, max_results)]


def clamp_max_results(max_results: int) -> int:
    """Keep the requested suggestion count within 1-10."""
    return min(max(MIN_SUGGESTIONS, max_results), MAX_SUGGESTIONS)


class RecipeSuggestionService:
    """Recipe suggestions: AI first, templates when the AI is missing or fails."""

    def __init__(self, ai: Optional["AIService"] = None):
        self.ai = ai

    def _fallback(self, request: RecipeSuggestionRequest, max_results: int, message: str) -> dict:
        suggestions = generate_basic_recipe_suggestions(
            request.ingredients,
            request.dietary_restrictions,
            max_results,
        )
        logger.info(f"Generated {len(suggestions)} template recipe suggestions")
        return {
            "data": [s.model_dump() for s in suggestions],
            "message": message,
            "fallback": True,
        }

    async def suggest(self, request: RecipeSuggestionRequest) -> dict:
        """Suggest recipes for the request's ingredients. Never raises for AI errors."""
        max_results = clamp_max_results(request.max_results)

        if self.ai is None:
            logger.warning("AI service not configured, using template recipe suggestions")
            return self._fallback(
                request,
                max_results,
                "AI service not configured. Using basic recipe suggestions.",
            )

        try:
            recipes = await self.ai.generate_recipe_suggestions(
                ingredients=request.ingredients,
                dietary_restrictions=request.dietary_restrictions,
                cuisine_preference=request.cuisine_preference,
                max_results=max_results,
                cooking_time=request.cooking_time,
                difficulty=request.difficulty,
                meal_type=request.meal_type,
                health_goals=request.health_goals,
                allergies=request.allergies,
            )
        except Exception as e:
            logger.error(f"AI recipe generation failed: {e}")
            response = self._fallback(
                request,
                max_results,
                "AI temporarily unavailable. Here are some basic recipe suggestions.",
            )
            response["error_details"] = str(e) or type(e).__name__
            return response

        recipes = recipes[:max_results]
        return {
            "data": recipes,
            "total_matches": len(recipes),
            "ai_generated": len(recipes),
            "message": f"Generated {len(recipes)} AI-powered recipes",
            "ingredients_used": request.ingredients,
        }


# =============================================================================
# Stored recipes
# =============================================================================


class RecipeNotFoundError(LookupError):
    """Recipe does not exist or is not visible to the user."""


class RecipeAlreadySavedError(Exception):
    """The user already saved this recipe."""


class RecipeService:
    """CRUD for the recipes table and the user's saved recipes."""

    def __init__(self, client: Client):
        self.client = client

    def _saved_ids(self, user_id: str) -> set[str]:
        result = (
            self.client.table(TABLES["saved_recipes"])
            .select("recipe_id")
            .eq("user_id", user_id)
            .execute()
        )
        return {row["recipe_id"] for row in result.data or []}

    def _visible(self, user_id: str):
        """Query for recipes the user may read: public ones and their own."""
        return (
            self.client.table(TABLES["recipes"])
            .select("*")
            .or_(f"is_public.eq.true,user_id.eq.{user_id}")
        )

    async def list_recipes(
        self,
        user_id: str,
        cuisine_type: Optional[str] = None,
        dietary_tag: Optional[str] = None,
        difficulty: Optional[str] = None,
        saved_only: bool = False,
    ) -> list[dict]:
        """List recipes visible to the user, each with its `saved` flag."""
        saved_ids = self._saved_ids(user_id)

        if saved_only:
            if not saved_ids:
                return []
            query = self.client.table(TABLES["recipes"]).select("*").in_("id", sorted(saved_ids))
        else:
            query = self._visible(user_id)

        if cuisine_type:
            query = query.eq("cuisine_type", cuisine_type)
        if dietary_tag:
            query = query.contains("dietary_tags", [dietary_tag])
        if difficulty:
            query = query.eq("difficulty", difficulty)

        result = query.order("created_at", desc=True).execute()
        return [{**row, "saved": row["id"] in saved_ids} for row in result.data or []]

    async def get_recipe(self, recipe_id: str, user_id: str) -> Optional[dict]:
        result = self._visible(user_id).eq("id", recipe_id).limit(1).execute()
        recipe = first_row(result)
        if recipe is None:
            return None
        return {**recipe, "saved": recipe_id in self._saved_ids(user_id)}

    async def create_recipe(self, user_id: str, recipe: RecipeCreate) -> dict:
        data = {"user_id": user_id, **recipe.model_dump(mode="json")}
        result = self.client.table(TABLES["recipes"]).insert(data).execute()
        created = first_row(result)
        if created is None:
            raise ValueError("Failed to create recipe")
        logger.info(f"Created recipe {created.get('id')} for user {user_id}")
        return {**created, "saved": False}

    async def update_recipe(self, recipe_id: str, user_id: str, update: RecipeUpdate) -> Optional[dict]:
        """Update a recipe the user owns. Returns None when there is no such recipe."""
        data = update.model_dump(mode="json", exclude_unset=True)
        data["updated_at"] = datetime.utcnow().isoformat()
        result = (
            self.client.table(TABLES["recipes"])
            .update(data)
            .eq("id", recipe_id)
            .eq("user_id", user_id)
            .execute()
        )
        return first_row(result)

    async def delete_recipe(self, recipe_id: str, user_id: str) -> None:
        (
            self.client.table(TABLES["recipes"])
            .delete()
            .eq("id", recipe_id)
            .eq("user_id", user_id)
            .execute()
        )

    async def save_recipe(self, recipe_id: str, user_id: str) -> dict:
        """Bookmark a recipe for the user."""
        visible = self._visible(user_id).eq("id", recipe_id).limit(1).execute()
        if first_row(visible) is None:
            raise RecipeNotFoundError(recipe_id)

        try:
            result = (
                self.client.table(TABLES["saved_recipes"])
                .insert({"user_id": user_id, "recipe_id": recipe_id})
                .execute()
            )
        except Exception as e:
            if getattr(e, "code", None) == UNIQUE_VIOLATION:
                raise RecipeAlreadySavedError(recipe_id) from e
            raise

        return first_row(result) or {"user_id": user_id, "recipe_id": recipe_id}

    async def unsave_recipe(self, recipe_id: str, user_id: str) -> None:
        (
            self.client.table(TABLES["saved_recipes"])
            .delete()
            .eq("user_id", user_id)
            .eq("recipe_id", recipe_id)
            .execute()
        )
