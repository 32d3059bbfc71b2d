"""Food inventory persistence service."""

import logging
from datetime import date, datetime
from typing import Optional

from supabase import Client

from wastewise.models.food_items import FoodItemCreate, FoodItemUpdate, FoodStatus
from wastewise.services.expiration import get_status, with_current_status
from wastewise.services.supabase import TABLES, first_row

logger = logging.getLogger(__name__)


class FoodItemService:
    """CRUD for the user's food items.

    Status is stored for convenience but recomputed from the expiration
    date on every read and write, so stale rows never leak out.
    """

    def __init__(self, client: Client):
        self.client = client

    async def list_items(
        self,
        user_id: str,
        status: Optional[str] = None,
        category: Optional[str] = None,
        storage_location: Optional[str] = None,
        today: Optional[date] = None,
    ) -> list[dict]:
        """List the user's items, newest first."""
        query = self.client.table(TABLES["food_items"]).select("*").eq("user_id", user_id)
        if category and category != "all":
            query = query.eq("category", category)
        if storage_location and storage_location != "all":
            query = query.eq("storage_location", storage_location)

        result = query.order("created_at", desc=True).execute()
        items = [with_current_status(row, today) for row in result.data or []]

        # Filter after recomputing so drifted stored statuses do not matter
        if status and status != "all":
            items = [item for item in items if item["status"] == status]
        return items

    async def get_item(self, item_id: str, user_id: str) -> Optional[dict]:
        result = (
            self.client.table(TABLES["food_items"])
            .select("*")
            .eq("id", item_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        row = first_row(result)
        return with_current_status(row) if row else None

    async def create_item(self, user_id: str, item: FoodItemCreate) -> dict:
        data = item.model_dump(mode="json")
        data["user_id"] = user_id
        data["status"] = get_status(item.expiration_date).value

        result = self.client.table(TABLES["food_items"]).insert(data).execute()
        created = first_row(result)
        if created is None:
            raise ValueError("Failed to create food item")
        logger.info(f"Created food item {created.get('id')} ({item.name}) for user {user_id}")
        return with_current_status(created)

    async def update_item(self, item_id: str, user_id: str, update: FoodItemUpdate) -> Optional[dict]:
        """Apply a partial update. Returns None when the item does not exist."""
        data = update.model_dump(mode="json", exclude_unset=True)
        if "expiration_date" in data:
            data["status"] = (
                get_status(update.expiration_date).value
                if update.expiration_date
                else FoodStatus.FRESH.value
            )
        data["updated_at"] = datetime.utcnow().isoformat()

        result = (
            self.client.table(TABLES["food_items"])
            .update(data)
            .eq("id", item_id)
            .eq("user_id", user_id)
            .execute()
        )
        row = first_row(result)
        return with_current_status(row) if row else None

    async def delete_item(self, item_id: str, user_id: str) -> None:
        (
            self.client.table(TABLES["food_items"])
            .delete()
            .eq("id", item_id)
            .eq("user_id", user_id)
            .execute()
        )
        logger.info(f"Deleted food item {item_id} for user {user_id}")
