"""
Common dependencies for API endpoints.

The frontend authenticates against Supabase Auth and sends the access token
as `Authorization: Bearer <token>`; we only verify it. Services are built
per request from the cached clients so tests can swap them through
`app.dependency_overrides`.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Header, HTTPException
from supabase import Client

from wastewise.services.ai import AIService, get_ai_service
from wastewise.services.analytics import AnalyticsService
from wastewise.services.donations import DonationService
from wastewise.services.expiration import ExpirationService
from wastewise.services.food_items import FoodItemService
from wastewise.services.planning import MealPlanService
from wastewise.services.profile import ProfileService
from wastewise.services.recipes import RecipeService, RecipeSuggestionService
from wastewise.services.supabase import get_supabase_anon_client, get_supabase_client
from wastewise.services.waste_logs import WasteLogService

logger = logging.getLogger(__name__)


@dataclass
class CurrentUser:
    """The authenticated caller."""
    id: str
    email: Optional[str] = None
    metadata: dict = field(default_factory=dict)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an Authorization header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_optional_user(authorization: str | None = Header(None)) -> Optional[CurrentUser]:
    """Resolve the caller from their Supabase access token, or None."""
    token = bearer_token(authorization)
    if token is None:
        return None

    try:
        response = get_supabase_anon_client().auth.get_user(token)
    except Exception as e:
        logger.warning(f"Token verification failed: {e}")
        return None

    user = getattr(response, "user", None)
    if user is None:
        return None
    return CurrentUser(id=user.id, email=user.email, metadata=user.user_metadata or {})


async def get_current_user(user: Optional[CurrentUser] = Depends(get_optional_user)) -> CurrentUser:
    """Require an authenticated caller."""
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


async def get_current_user_id(user: CurrentUser = Depends(get_current_user)) -> str:
    return user.id


# =============================================================================
# Service providers
# =============================================================================


def get_db() -> Client:
    return get_supabase_client()


def get_ai() -> Optional[AIService]:
    return get_ai_service()


def get_food_item_service(client: Client = Depends(get_db)) -> FoodItemService:
    return FoodItemService(client)


def get_waste_log_service(client: Client = Depends(get_db)) -> WasteLogService:
    return WasteLogService(client)


def get_donation_service(client: Client = Depends(get_db)) -> DonationService:
    return DonationService(client)


def get_recipe_service(client: Client = Depends(get_db)) -> RecipeService:
    return RecipeService(client)


def get_profile_service(client: Client = Depends(get_db)) -> ProfileService:
    return ProfileService(client)


def get_analytics_service(client: Client = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(client)


def get_expiration_service(ai: Optional[AIService] = Depends(get_ai)) -> ExpirationService:
    return ExpirationService(ai=ai)


def get_recipe_suggestion_service(ai: Optional[AIService] = Depends(get_ai)) -> RecipeSuggestionService:
    return RecipeSuggestionService(ai=ai)


def get_meal_plan_service(
    ai: Optional[AIService] = Depends(get_ai),
    client: Client = Depends(get_db),
) -> MealPlanService:
    return MealPlanService(ai=ai, client=client)
