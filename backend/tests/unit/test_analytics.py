"""
Unit tests for the analytics aggregator.
"""

import pytest
from datetime import timedelta

from wastewise.services.analytics import (
    AnalyticsService,
    compute_analytics,
    percentage,
    round_half_up,
)


class TestRounding:
    @pytest.mark.unit
    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(1.005, 2) == 1.01

    @pytest.mark.unit
    def test_percentage(self):
        assert percentage(1, 8) == 13  # 12.5
        assert percentage(1, 3) == 33
        assert percentage(2, 3) == 67
        assert percentage(5, 0) == 0


class TestComputeAnalytics:
    """Tests for compute_analytics."""

    @pytest.mark.unit
    def test_no_waste_logs(self, sample_food_items, today):
        metrics = compute_analytics(sample_food_items, [], [], 30, today)

        assert metrics.money_saved == 0
        assert metrics.co2_saved == 0
        assert metrics.waste_prevented == 0
        assert metrics.meals_preserved == 0
        assert metrics.action_distribution == []

    @pytest.mark.unit
    def test_inventory_counts(self, sample_food_items, today):
        metrics = compute_analytics(sample_food_items, [], [], 30, today)

        assert metrics.total_items == 10
        assert metrics.expired == 1
        assert metrics.expiring_soon == 2

    @pytest.mark.unit
    def test_category_breakdown_matches_recount(self, sample_food_items, today):
        metrics = compute_analytics(sample_food_items, [], [], 30, today)
        breakdown = {row.category: row for row in metrics.category_breakdown}

        for category in ("Fruits", "Dairy", "Vegetables"):
            expected = sum(1 for item in sample_food_items if item["category"] == category)
            assert breakdown[category].count == expected

        assert breakdown["Fruits"].percentage == 50
        assert breakdown["Dairy"].percentage == 30
        assert breakdown["Vegetables"].percentage == 20
        assert sum(row.percentage for row in metrics.category_breakdown) <= 100

    @pytest.mark.unit
    def test_missing_category_counts_as_other(self, today):
        metrics = compute_analytics([{"category": None}, {"category": "Dairy"}], [], [], 30, today)
        assert {row.category for row in metrics.category_breakdown} == {"Other", "Dairy"}

    @pytest.mark.unit
    def test_saved_totals(self, sample_food_items, sample_waste_logs, today):
        metrics = compute_analytics(sample_food_items, sample_waste_logs, [], 30, today)

        # consumed, donated and preserved count; wasted and composted do not
        assert metrics.waste_prevented == 3
        assert metrics.money_saved == 8.75
        # quantities 2 + 1 (missing) + 1 = 4 -> 4 * 0.5 * 2.5
        assert metrics.co2_saved == 5.0
        assert metrics.meals_preserved == 4  # 3 * 1.2 = 3.6

    @pytest.mark.unit
    def test_action_distribution(self, sample_waste_logs, today):
        metrics = compute_analytics([], sample_waste_logs, [], 30, today)
        distribution = {row.action: row for row in metrics.action_distribution}

        assert set(distribution) == {"consumed", "donated", "wasted", "preserved", "composted"}
        assert all(row.count == 1 for row in distribution.values())
        assert all(row.percentage == 20 for row in distribution.values())

    @pytest.mark.unit
    def test_logs_outside_period_are_ignored(self, sample_waste_logs, today):
        metrics = compute_analytics([], sample_waste_logs, [], 7, today)

        assert "composted" not in {row.action for row in metrics.action_distribution}
        assert sum(row.count for row in metrics.action_distribution) == 4

    @pytest.mark.unit
    @pytest.mark.parametrize("period", [1, 7, 30, 365])
    def test_waste_trend_always_seven_days(self, sample_waste_logs, today, period):
        metrics = compute_analytics([], sample_waste_logs, [], period, today)

        assert len(metrics.waste_trend) == 7
        assert metrics.waste_trend[-1].date == today.isoformat()
        assert metrics.waste_trend[0].date == (today - timedelta(days=6)).isoformat()

    @pytest.mark.unit
    def test_waste_trend_counts(self, sample_waste_logs, today):
        metrics = compute_analytics([], sample_waste_logs, [], 30, today)
        trend = {point.date: point for point in metrics.waste_trend}

        yesterday = trend[(today - timedelta(days=1)).isoformat()]
        assert yesterday.wasted == 1
        assert yesterday.saved == 1
        assert yesterday.donated == 1

        assert trend[today.isoformat()].saved == 1
        assert trend[(today - timedelta(days=3)).isoformat()].saved == 1

    @pytest.mark.unit
    def test_donation_count_only_completed(self, today):
        donations = [{"status": "completed"}, {"status": "scheduled"}, {"status": "completed"}]
        assert compute_analytics([], [], donations, 30, today).donation_count == 2


class TestAnalyticsService:
    """Tests for AnalyticsService with a mocked database."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_get_metrics(self, mock_supabase, supabase_query, test_user_id, today, sample_waste_logs):
        mock_supabase.tables["food_items"] = supabase_query([
            {"id": "1", "category": "Dairy", "status": "fresh", "expiration_date": (today - timedelta(days=1)).isoformat()},
            {"id": "2", "category": "Fruits", "status": "fresh", "expiration_date": None},
        ])
        mock_supabase.tables["waste_logs"] = supabase_query(sample_waste_logs)
        mock_supabase.tables["donations"] = supabase_query([{"id": "d1", "status": "completed"}])

        metrics = await AnalyticsService(mock_supabase).get_metrics(test_user_id, 30, today)

        assert metrics.total_items == 2
        assert metrics.expired == 1  # stored status was stale
        assert metrics.donation_count == 1
        assert metrics.waste_prevented == 3
        mock_supabase.tables["waste_logs"].gte.assert_called_with(
            "date", (today - timedelta(days=30)).isoformat()
        )
