"""Pydantic models for the wastewise API."""

from .food_items import (
    FoodStatus,
    FoodItemCreate,
    FoodItemUpdate,
)
from .waste_logs import (
    WasteAction,
    WasteLogCreate,
)
from .donations import (
    DonationStatus,
    DonationItem,
    DonationCreate,
    DonationUpdate,
)
from .recipes import (
    RecipeIngredient,
    RecipeCreate,
    RecipeUpdate,
    RecipeSuggestion,
    RecipeSuggestionRequest,
    DetailedRecipeRequest,
)
from .planning import (
    PlanSlot,
    PlannedMeal,
    MealPlanDay,
    MealPlan,
    MealPlanRequest,
)
from .expiration import (
    ExpirationEstimate,
    ExpirationPrediction,
    ExpirationPredictionRequest,
)
from .analytics import (
    AnalyticsMetrics,
    WasteTrendPoint,
    CategoryBreakdown,
    ActionDistribution,
)
from .profile import (
    NotificationSettings,
    ProfileUpdate,
)

__all__ = [
    # Food items
    "FoodStatus",
    "FoodItemCreate",
    "FoodItemUpdate",
    # Waste logs
    "WasteAction",
    "WasteLogCreate",
    # Donations
    "DonationStatus",
    "DonationItem",
    "DonationCreate",
    "DonationUpdate",
    # Recipes
    "RecipeIngredient",
    "RecipeCreate",
    "RecipeUpdate",
    "RecipeSuggestion",
    "RecipeSuggestionRequest",
    "DetailedRecipeRequest",
    # Planning
    "PlanSlot",
    "PlannedMeal",
    "MealPlanDay",
    "MealPlan",
    "MealPlanRequest",
    # Expiration
    "ExpirationEstimate",
    "ExpirationPrediction",
    "ExpirationPredictionRequest",
    # Analytics
    "AnalyticsMetrics",
    "WasteTrendPoint",
    "CategoryBreakdown",
    "ActionDistribution",
    # Profile
    "NotificationSettings",
    "ProfileUpdate",
]
