"""
Analytics service.

Dashboard metrics are recomputed from raw rows on every request; nothing is
cached or aggregated incrementally.
"""

import logging
from collections import Counter
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from supabase import Client

from wastewise.config import get_settings
from wastewise.models.analytics import (
    ActionDistribution,
    AnalyticsMetrics,
    CategoryBreakdown,
    WasteTrendPoint,
)
from wastewise.models.donations import DonationStatus
from wastewise.models.food_items import FoodStatus
from wastewise.models.waste_logs import SAVED_ACTIONS, WasteAction
from wastewise.services.expiration import parse_date, with_current_status
from wastewise.services.supabase import TABLES

logger = logging.getLogger(__name__)
settings = get_settings()

TREND_DAYS = 7
KG_PER_ITEM = 0.5
CO2_PER_KG = 2.5
MEALS_PER_SAVED_ITEM = 1.2

_SAVED = {action.value for action in SAVED_ACTIONS}


def round_half_up(value: float, places: int = 0) -> float:
    """Round halves away from zero, like a spreadsheet does."""
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def percentage(count: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(round_half_up(count / total * 100))


def _action(log: dict) -> str:
    action = log.get("action")
    return action.value if isinstance(action, WasteAction) else str(action)


def compute_analytics(
    food_items: list[dict],
    waste_logs: list[dict],
    donations: list[dict],
    period: int = 30,
    today: Optional[date] = None,
) -> AnalyticsMetrics:
    """Aggregate inventory, waste logs and donations into dashboard metrics.

    Only waste logs dated within `period` days of today are counted. The
    waste trend always covers the last seven days, whatever the period.
    """
    today = today or date.today()
    period_start = today - timedelta(days=period)

    logs = []
    for log in waste_logs:
        log_date = parse_date(log.get("date"))
        if log_date is not None and log_date >= period_start:
            logs.append({**log, "action": _action(log), "date": log_date})

    saved = [log for log in logs if log["action"] in _SAVED]
    money_saved = sum(float(log.get("estimated_value") or 0) for log in saved)
    quantity_saved = sum(
        float(log["quantity"]) if log.get("quantity") is not None else 1
        for log in saved
    )

    waste_trend = []
    for offset in range(TREND_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_logs = [log for log in logs if log["date"] == day]
        waste_trend.append(WasteTrendPoint(
            date=day.isoformat(),
            wasted=sum(1 for log in day_logs if log["action"] == WasteAction.WASTED.value),
            saved=sum(1 for log in day_logs if log["action"] in _SAVED),
            donated=sum(1 for log in day_logs if log["action"] == WasteAction.DONATED.value),
        ))

    total_items = len(food_items)
    categories = Counter(item.get("category") or "Other" for item in food_items)
    actions = Counter(log["action"] for log in logs)

    return AnalyticsMetrics(
        total_items=total_items,
        expiring_soon=sum(1 for item in food_items if item.get("status") == FoodStatus.EXPIRING_SOON.value),
        expired=sum(1 for item in food_items if item.get("status") == FoodStatus.EXPIRED.value),
        money_saved=round_half_up(money_saved, 2),
        waste_prevented=len(saved),
        co2_saved=round_half_up(quantity_saved * KG_PER_ITEM * CO2_PER_KG, 2),
        meals_preserved=int(round_half_up(len(saved) * MEALS_PER_SAVED_ITEM)),
        donation_count=sum(
            1 for donation in donations
            if donation.get("status") == DonationStatus.COMPLETED.value
        ),
        waste_trend=waste_trend,
        category_breakdown=[
            CategoryBreakdown(category=category, count=count, percentage=percentage(count, total_items))
            for category, count in categories.items()
        ],
        action_distribution=[
            ActionDistribution(action=action, count=count, percentage=percentage(count, len(logs)))
            for action, count in actions.items()
        ],
    )


class AnalyticsService:
    """Fetches a user's rows and aggregates them."""

    def __init__(self, client: Client):
        self.client = client

    async def get_metrics(
        self,
        user_id: str,
        period: Optional[int] = None,
        today: Optional[date] = None,
    ) -> AnalyticsMetrics:
        period = period or settings.analytics_default_period_days
        today = today or date.today()
        start = today - timedelta(days=period)

        food_items = (
            self.client.table(TABLES["food_items"])
            .select("id, status, category, quantity, purchase_date, expiration_date")
            .eq("user_id", user_id)
            .execute()
        ).data or []

        waste_logs = (
            self.client.table(TABLES["waste_logs"])
            .select("action, date, quantity, estimated_value")
            .eq("user_id", user_id)
            .gte("date", start.isoformat())
            .execute()
        ).data or []

        donations = (
            self.client.table(TABLES["donations"])
            .select("id, status, estimated_meals")
            .eq("user_id", user_id)
            .eq("status", DonationStatus.COMPLETED.value)
            .execute()
        ).data or []

        food_items = [with_current_status(item, today) for item in food_items]
        logger.debug(
            f"Analytics for {user_id}: {len(food_items)} items, "
            f"{len(waste_logs)} logs, {len(donations)} donations"
        )
        return compute_analytics(food_items, waste_logs, donations, period, today)
