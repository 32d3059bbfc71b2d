"""Waste log persistence service. Logs are append-only."""

import logging
from datetime import date
from typing import Optional

from supabase import Client

from wastewise.models.waste_logs import WasteLogCreate
from wastewise.services.supabase import TABLES, first_row

logger = logging.getLogger(__name__)


class WasteLogService:
    def __init__(self, client: Client):
        self.client = client

    async def list_logs(
        self,
        user_id: str,
        action: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[dict]:
        """List the user's logs, newest first, with the linked food item."""
        query = (
            self.client.table(TABLES["waste_logs"])
            .select("*, food_items(id, name, category)")
            .eq("user_id", user_id)
        )
        if action and action != "all":
            query = query.eq("action", action)
        if start_date:
            query = query.gte("date", start_date.isoformat())
        if end_date:
            query = query.lte("date", end_date.isoformat())

        result = query.order("date", desc=True).execute()
        return result.data or []

    async def create_log(self, user_id: str, log: WasteLogCreate) -> dict:
        data = log.model_dump(mode="json")
        data["user_id"] = user_id

        result = self.client.table(TABLES["waste_logs"]).insert(data).execute()
        created = first_row(result)
        if created is None:
            raise ValueError("Failed to create waste log")
        logger.info(f"Logged {log.action.value} for user {user_id}")
        return created
