"""Supabase client service."""

import logging
from functools import lru_cache

from supabase import create_client, Client

from wastewise.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


@lru_cache
def get_supabase_client() -> Client:
    """Get Supabase client with service role key (admin access)."""
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
    )


@lru_cache
def get_supabase_anon_client() -> Client:
    """Get Supabase client with anon key (RLS enforced)."""
    return create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
    )


# Table names (match the web app)
TABLES = {
    "food_items": "food_items",
    "waste_logs": "waste_logs",
    "donations": "donations",
    "donation_locations": "donation_locations",
    "recipes": "recipes",
    "saved_recipes": "user_saved_recipes",
    "profiles": "user_profiles",
}

# Postgres error code for unique constraint violations
UNIQUE_VIOLATION = "23505"


def first_row(result) -> dict | None:
    """First row of a query result, or None."""
    rows = result.data or []
    return rows[0] if rows else None
