"""
Donation service.

Scheduling donations to partner locations and finding locations near the
user.
"""

import logging
import math
from datetime import datetime
from typing import Optional

from supabase import Client

from wastewise.models.donations import DonationCreate, DonationStatus, DonationUpdate
from wastewise.services.supabase import TABLES, first_row

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371
DEFAULT_RADIUS_KM = 10

LOCATION_FIELDS = "id, name, address, latitude, longitude, contact_phone, contact_email, hours, website"


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two coordinates in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def nearby_locations(
    locations: list[dict],
    lat: float,
    lng: float,
    radius_km: float = DEFAULT_RADIUS_KM,
) -> list[dict]:
    """Attach `distance` to each location, keep those within the radius, nearest first."""
    with_distance = []
    for location in locations:
        if location.get("latitude") is None or location.get("longitude") is None:
            continue
        distance = haversine_km(lat, lng, float(location["latitude"]), float(location["longitude"]))
        if distance <= radius_km:
            with_distance.append({**location, "distance": distance})
    return sorted(with_distance, key=lambda location: location["distance"])


class DonationService:
    """CRUD for donations plus donation location lookup."""

    def __init__(self, client: Client):
        self.client = client

    async def list_donations(self, user_id: str, status: Optional[str] = None) -> list[dict]:
        query = (
            self.client.table(TABLES["donations"])
            .select(f"*, donation_locations({LOCATION_FIELDS})")
            .eq("user_id", user_id)
        )
        if status and status != "all":
            query = query.eq("status", status)
        result = query.order("scheduled_date", desc=True).execute()
        return result.data or []

    async def get_donation(self, donation_id: str, user_id: str) -> Optional[dict]:
        result = (
            self.client.table(TABLES["donations"])
            .select(f"*, donation_locations({LOCATION_FIELDS})")
            .eq("id", donation_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        return first_row(result)

    async def create_donation(self, user_id: str, donation: DonationCreate) -> dict:
        data = donation.model_dump(mode="json")
        data["user_id"] = user_id
        data["status"] = DonationStatus.SCHEDULED.value

        result = self.client.table(TABLES["donations"]).insert(data).execute()
        created = first_row(result)
        if created is None:
            raise ValueError("Failed to create donation")
        logger.info(f"Scheduled donation {created.get('id')} for user {user_id}")
        return created

    async def update_donation(self, donation_id: str, user_id: str, update: DonationUpdate) -> Optional[dict]:
        data = update.model_dump(mode="json", exclude_unset=True)
        data["updated_at"] = datetime.utcnow().isoformat()
        result = (
            self.client.table(TABLES["donations"])
            .update(data)
            .eq("id", donation_id)
            .eq("user_id", user_id)
            .execute()
        )
        return first_row(result)

    async def delete_donation(self, donation_id: str, user_id: str) -> None:
        (
            self.client.table(TABLES["donations"])
            .delete()
            .eq("id", donation_id)
            .eq("user_id", user_id)
            .execute()
        )

    async def list_locations(
        self,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        radius_km: float = DEFAULT_RADIUS_KM,
    ) -> list[dict]:
        """Active donation locations, by name or by distance when coordinates are given."""
        result = (
            self.client.table(TABLES["donation_locations"])
            .select("*")
            .eq("is_active", True)
            .order("name")
            .execute()
        )
        locations = result.data or []
        if lat is None or lng is None:
            return locations
        return nearby_locations(locations, lat, lng, radius_km)
