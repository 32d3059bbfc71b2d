"""User profile models."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class NotificationSettings(BaseModel):
    """Which notifications the user wants."""

    expiration_alerts: bool = True
    recipe_suggestions: bool = True
    donation_reminders: bool = True
    achievement_notifications: bool = True
    email_notifications: bool = False


class ProfileUpdate(BaseModel):
    """Request to update the caller's profile."""

    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    dietary_restrictions: list[str] = Field(default_factory=list)
    favorite_cuisines: list[str] = Field(default_factory=list)
    measurement_system: Literal["metric", "imperial"] = "metric"
    business_account: bool = False
    theme: Literal["light", "dark", "system"] = "light"
    notification_settings: NotificationSettings = Field(default_factory=NotificationSettings)
