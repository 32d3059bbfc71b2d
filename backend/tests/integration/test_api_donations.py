"""
Integration tests for donation and donation location endpoints.
"""

import pytest


CITY_HALL = (37.7793, -122.4193)
LOCATIONS = [
    {"id": "far", "name": "Oakland Pantry", "latitude": 37.8044, "longitude": -122.2712},
    {"id": "near", "name": "Civic Center Fridge", "latitude": 37.7802, "longitude": -122.4170},
    {"id": "mid", "name": "Mission Food Bank", "latitude": 37.7599, "longitude": -122.4148},
    {"id": "nowhere", "name": "Mobile Van", "latitude": None, "longitude": None},
]


class TestDonationLocations:
    """GET /api/donation-locations is public."""

    @pytest.mark.integration
    def test_list_without_coordinates(self, anon_client, mock_supabase, supabase_query):
        query = supabase_query(LOCATIONS)
        mock_supabase.tables["donation_locations"] = query

        response = anon_client.get("/api/donation-locations")

        assert response.status_code == 200
        assert len(response.json()["data"]) == 4
        query.eq.assert_called_with("is_active", True)

    @pytest.mark.integration
    def test_list_by_distance(self, anon_client, mock_supabase, supabase_query):
        mock_supabase.tables["donation_locations"] = supabase_query(LOCATIONS)

        response = anon_client.get("/api/donation-locations", params={
            "lat": CITY_HALL[0],
            "lng": CITY_HALL[1],
            "radius": 5,
        })

        data = response.json()["data"]
        assert [location["id"] for location in data] == ["near", "mid"]
        assert all("distance" in location for location in data)

    @pytest.mark.integration
    def test_invalid_latitude(self, anon_client):
        response = anon_client.get("/api/donation-locations", params={"lat": 200, "lng": 0})
        assert response.status_code == 400


class TestDonations:
    """Tests for /api/donations."""

    @pytest.mark.integration
    def test_create_starts_scheduled(self, authed_client, mock_supabase, supabase_query, test_user_id):
        query = supabase_query([{"id": "donation-1", "status": "scheduled"}])
        mock_supabase.tables["donations"] = query

        response = authed_client.post("/api/donations", json={
            "location_id": "near",
            "scheduled_date": "2024-06-20",
            "items": [{"name": "Canned beans", "quantity": 4, "unit": "cans"}],
            "estimated_meals": 4,
        })

        assert response.status_code == 201
        inserted = query.insert.call_args.args[0]
        assert inserted["status"] == "scheduled"
        assert inserted["user_id"] == test_user_id

    @pytest.mark.integration
    def test_create_requires_items(self, authed_client):
        response = authed_client.post("/api/donations", json={
            "location_id": "near",
            "scheduled_date": "2024-06-20",
            "items": [],
        })
        assert response.status_code == 400

    @pytest.mark.integration
    def test_complete_donation(self, authed_client, mock_supabase, supabase_query):
        query = supabase_query([{"id": "donation-1", "status": "completed"}])
        mock_supabase.tables["donations"] = query

        response = authed_client.put("/api/donations/donation-1", json={"status": "completed"})

        assert response.status_code == 200
        assert query.update.call_args.args[0]["status"] == "completed"

    @pytest.mark.integration
    def test_list_joins_location(self, authed_client, mock_supabase):
        authed_client.get("/api/donations", params={"status": "scheduled"})

        query = mock_supabase.tables["donations"]
        assert "donation_locations(" in query.select.call_args.args[0]
        query.eq.assert_any_call("status", "scheduled")

    @pytest.mark.integration
    def test_get_missing(self, authed_client):
        assert authed_client.get("/api/donations/nope").status_code == 404
