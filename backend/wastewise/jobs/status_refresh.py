"""
Food status refresh job.

Stored `status` values drift as days pass. This job recomputes status for
every food item with an expiration date and writes back the rows that
changed. Reads never depend on it; they recompute status themselves.
"""

import logging
from datetime import date
from typing import Optional

from supabase import Client

from wastewise.services.expiration import get_status, parse_date
from wastewise.services.supabase import get_supabase_client, TABLES

logger = logging.getLogger(__name__)

PAGE_SIZE = 1000


def stale_statuses(rows: list[dict], today: date) -> dict[str, list[str]]:
    """Group ids of rows whose stored status is out of date by their new status."""
    changes: dict[str, list[str]] = {}
    for row in rows:
        expiration = parse_date(row.get("expiration_date"))
        if expiration is None:
            continue
        current = get_status(expiration, today).value
        if row.get("status") != current:
            changes.setdefault(current, []).append(row["id"])
    return changes


async def refresh_food_statuses(client: Optional[Client] = None, today: Optional[date] = None) -> dict:
    """Bring stored food item statuses up to date."""
    client = client or get_supabase_client()
    today = today or date.today()

    checked = 0
    updated = 0
    offset = 0
    while True:
        result = (
            client.table(TABLES["food_items"])
            .select("id, status, expiration_date")
            .not_.is_("expiration_date", "null")
            .range(offset, offset + PAGE_SIZE - 1)
            .execute()
        )
        rows = result.data or []
        checked += len(rows)

        for status, ids in stale_statuses(rows, today).items():
            client.table(TABLES["food_items"]).update({"status": status}).in_("id", ids).execute()
            updated += len(ids)

        if len(rows) < PAGE_SIZE:
            break
        offset += PAGE_SIZE

    logger.info(f"Status refresh: checked {checked} items, updated {updated}")
    return {"checked": checked, "updated": updated, "date": today.isoformat()}
