"""User profile service."""

import logging
from datetime import datetime
from typing import Optional

from supabase import Client

from wastewise.models.profile import ProfileUpdate
from wastewise.services.supabase import TABLES, first_row

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, client: Client):
        self.client = client

    async def get_or_create(self, user_id: str, email: Optional[str], metadata: Optional[dict] = None) -> dict:
        """Return the user's profile, creating it on first read."""
        result = (
            self.client.table(TABLES["profiles"])
            .select("*")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        profile = first_row(result)
        if profile is not None:
            return profile

        metadata = metadata or {}
        created = first_row(
            self.client.table(TABLES["profiles"])
            .insert({
                "id": user_id,
                "email": email,
                "full_name": metadata.get("full_name", ""),
                "avatar_url": metadata.get("avatar_url", ""),
            })
            .execute()
        )
        if created is None:
            raise ValueError("Failed to create profile")
        logger.info(f"Created profile for user {user_id}")
        return created

    async def update(self, user_id: str, email: Optional[str], update: ProfileUpdate) -> dict:
        """Upsert the profile. Fields left out of the request get their defaults."""
        data = {
            "id": user_id,
            "email": email,
            **update.model_dump(mode="json"),
            "updated_at": datetime.utcnow().isoformat(),
        }
        profile = first_row(self.client.table(TABLES["profiles"]).upsert(data).execute())
        if profile is None:
            raise ValueError("Failed to update profile")
        return profile
