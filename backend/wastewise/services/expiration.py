"""
Expiration prediction service.

Estimates shelf life from a static lookup table, derives freshness status
from expiration dates, and refines predictions with the AI service when it
is configured.
"""

import json
import logging
import random
from dataclasses import dataclass
from datetime import date, timedelta
from functools import lru_cache
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from wastewise.config import get_settings
from wastewise.models.expiration import (
    ExpirationEstimate,
    ExpirationPrediction,
    ExpirationPredictionRequest,
    ShelfLifeEntry,
)
from wastewise.models.food_items import FoodStatus

if TYPE_CHECKING:
    from wastewise.services.ai import AIService

logger = logging.getLogger(__name__)
settings = get_settings()

TABLE_FILE = Path(__file__).parent.parent / "data" / "expiration_table.json"

STORAGE_ORDER = ("refrigerator", "pantry", "freezer")

# Used when the table file cannot be read
DEFAULT_ENTRY = ShelfLifeEntry(
    min=3,
    max=7,
    storage={"refrigerator": 7, "pantry": 3, "freezer": 90},
)


@dataclass(frozen=True)
class ConfidencePolicy:
    """Confidence scores assigned to lookup-table estimates."""

    exact_match: float = 0.95
    partial_match: float = 0.75
    default: float = 0.6
    storage_bonus: float = 0.05
    cap: float = 0.99

    @classmethod
    def from_settings(cls) -> "ConfidencePolicy":
        return cls(
            exact_match=settings.confidence_exact_match,
            partial_match=settings.confidence_partial_match,
            default=settings.confidence_default,
            storage_bonus=settings.confidence_storage_bonus,
            cap=settings.confidence_cap,
        )


def load_expiration_table(path: Path = TABLE_FILE) -> tuple[dict[str, ShelfLifeEntry], ShelfLifeEntry]:
    """Load the shelf-life table from JSON."""
    try:
        with open(path) as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load expiration table: {e}")
        return {}, DEFAULT_ENTRY

    foods = {name: ShelfLifeEntry(**entry) for name, entry in raw.get("foods", {}).items()}
    default = ShelfLifeEntry(**raw["default"]) if "default" in raw else DEFAULT_ENTRY
    return foods, default


# =============================================================================
# Status helpers
# =============================================================================


def days_until(expiration_date: date, today: Optional[date] = None) -> int:
    """Whole days from today until the expiration date (negative once past)."""
    return (expiration_date - (today or date.today())).days


def get_status(
    expiration_date: Optional[date],
    today: Optional[date] = None,
    soon_days: Optional[int] = None,
) -> FoodStatus:
    """Derive freshness status from an expiration date."""
    if expiration_date is None:
        return FoodStatus.FRESH

    if soon_days is None:
        soon_days = settings.expiring_soon_days

    remaining = days_until(expiration_date, today)
    if remaining <= 0:
        return FoodStatus.EXPIRED
    if remaining <= soon_days:
        return FoodStatus.EXPIRING_SOON
    return FoodStatus.FRESH


def parse_date(value) -> Optional[date]:
    """Parse a date column that may arrive as a date, ISO date or ISO timestamp."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def with_current_status(row: dict, today: Optional[date] = None) -> dict:
    """Return a copy of a food_items row with its status recomputed."""
    expiration = parse_date(row.get("expiration_date"))
    return {**row, "status": get_status(expiration, today).value}


# =============================================================================
# Lookup-table estimator
# =============================================================================


class ExpirationEstimator:
    """Deterministic shelf-life estimates from the lookup table."""

    def __init__(
        self,
        foods: Optional[dict[str, ShelfLifeEntry]] = None,
        default: Optional[ShelfLifeEntry] = None,
        policy: Optional[ConfidencePolicy] = None,
    ):
        if foods is None:
            foods, loaded_default = load_expiration_table()
            default = default or loaded_default
        self.foods = foods
        self.default = default or DEFAULT_ENTRY
        self.policy = policy or ConfidencePolicy()

    def match(self, food_name: str) -> tuple[str, str, ShelfLifeEntry]:
        """Find the table entry for a food name.

        Returns (key, match_type, entry). Exact keys win, then the first key
        where either name contains the other, then the default entry.
        """
        normalized = food_name.lower().strip()
        if not normalized:
            return "default", "default", self.default

        if normalized in self.foods:
            return normalized, "exact", self.foods[normalized]

        for key, entry in self.foods.items():
            if key in normalized or normalized in key:
                return key, "partial", entry

        return "default", "default", self.default

    def estimate(self, food_name: str, storage_location: str) -> ExpirationEstimate:
        """Estimate shelf life in days. Pure: same inputs, same output."""
        key, match_type, entry = self.match(food_name)
        storage_key = storage_location.lower().strip()

        # Zero means "not recommended here"; treat it like a missing entry
        location_days = entry.storage.get(storage_key) or 0
        days = location_days if location_days > 0 else entry.max

        if match_type == "exact":
            confidence = self.policy.exact_match
        elif match_type == "partial":
            confidence = self.policy.partial_match
        else:
            confidence = self.policy.default

        if match_type != "default" and location_days > 0:
            confidence += self.policy.storage_bonus

        return ExpirationEstimate(
            food_key=key,
            match_type=match_type,
            days_until_expiration=days,
            min_days=entry.min,
            max_days=entry.max,
            confidence=round(min(self.policy.cap, confidence), 2),
            recommended_storage=self.best_storage(entry),
        )

    def best_storage(self, entry: ShelfLifeEntry) -> str:
        """Storage location with the longest shelf life (first wins on ties)."""
        best_location = STORAGE_ORDER[0]
        best_days = -1
        for location in STORAGE_ORDER:
            days = entry.storage.get(location, 0)
            if days > best_days:
                best_location, best_days = location, days
        return best_location


def apply_jitter(days: int, rng: Optional[random.Random] = None) -> int:
    """Spread a shelf-life estimate by up to ±10% so repeated predictions vary."""
    rng = rng or random.Random()
    variance = int(days * 0.1)
    if variance == 0:
        return max(1, days)
    offset = rng.randrange(-variance, variance)
    return max(1, days + offset)


def best_storage_for_food(food_name: str, current_storage: str) -> str:
    """Keyword-based storage recommendation used alongside AI predictions."""
    name = food_name.lower()
    if any(w in name for w in ["milk", "dairy", "cheese"]):
        return "refrigerator"
    if any(w in name for w in ["bread", "grain"]):
        return "pantry"
    if any(w in name for w in ["meat", "fish"]):
        return "refrigerator"
    return current_storage


def storage_tips(food_name: str, storage_location: str) -> list[str]:
    """Up to three storage tips for a food in a location."""
    name = food_name.lower()
    storage = storage_location.lower()
    tips = []

    if "fruit" in name or any(f in name for f in ["apples", "oranges", "grapes"]):
        tips.append("Store away from ethylene-producing fruits to prevent over-ripening")
        tips.append("Check regularly and remove any spoiled pieces")

    if "vegetable" in name or any(v in name for v in ["lettuce", "carrots", "tomatoes"]):
        tips.append("Keep in crisper drawer for optimal humidity")
        tips.append("Don't wash until ready to use")

    if any(d in name for d in ["milk", "cheese", "yogurt"]):
        tips.append("Keep refrigerated at 40°F (4°C) or below")
        tips.append("Store in original container when possible")

    if any(m in name for m in ["chicken", "beef", "pork", "fish"]):
        tips.append("Use within recommended timeframe or freeze")
        tips.append("Keep at coldest part of refrigerator")
        tips.append("Ensure proper packaging to prevent cross-contamination")

    if storage == "pantry":
        tips.append("Store in cool, dry place away from direct sunlight")
    elif storage == "refrigerator":
        tips.append("Maintain consistent temperature")
    elif storage == "freezer":
        tips.append("Label with date and use within recommended freezer time")

    return tips[:3]


# =============================================================================
# Prediction service
# =============================================================================


class ExpirationService:
    """Expiration prediction: AI first, lookup table as the fallback."""

    def __init__(
        self,
        ai: Optional["AIService"] = None,
        estimator: Optional[ExpirationEstimator] = None,
        jitter: Optional[bool] = None,
        rng: Optional[random.Random] = None,
    ):
        self.ai = ai
        self.estimator = estimator or get_expiration_estimator()
        self.jitter = settings.expiration_jitter if jitter is None else jitter
        self.rng = rng or random.Random()

    async def predict(self, request: ExpirationPredictionRequest) -> ExpirationPrediction:
        """Predict the expiration date of a food item. Never raises for AI errors."""
        if self.ai is not None:
            try:
                return await self._predict_with_ai(request)
            except Exception as e:
                logger.error(f"AI prediction failed, falling back to lookup table: {e}")

        return self.predict_from_table(request)

    async def _predict_with_ai(self, request: ExpirationPredictionRequest) -> ExpirationPrediction:
        result = await self.ai.improve_expiration_prediction(
            food_name=request.food_name,
            category=request.category or "Other",
            storage_location=request.storage_location,
            purchase_date=request.purchase_date,
            current_condition=request.current_condition,
        )
        tips = await self.ai.generate_storage_tips(request.food_name, request.storage_location)

        logger.info(f"AI-enhanced expiration prediction generated for {request.food_name}")
        return ExpirationPrediction(
            predicted_expiration=result.predicted_expiration_date,
            prediction_confidence=result.confidence,
            days_until_expiration=(result.predicted_expiration_date - request.purchase_date).days,
            storage_recommendation=best_storage_for_food(request.food_name, request.storage_location),
            tips=tips,
            factors_considered=result.factors_considered,
            signs_of_spoilage=result.signs_of_spoilage,
            ai_enhanced=True,
        )

    def predict_from_table(self, request: ExpirationPredictionRequest) -> ExpirationPrediction:
        """Lookup-table prediction with optional jitter applied on top."""
        estimate = self.estimator.estimate(request.food_name, request.storage_location)
        days = estimate.days_until_expiration
        if self.jitter:
            days = apply_jitter(days, self.rng)

        return ExpirationPrediction(
            predicted_expiration=request.purchase_date + timedelta(days=days),
            prediction_confidence=estimate.confidence,
            days_until_expiration=days,
            storage_recommendation=estimate.recommended_storage,
            tips=storage_tips(request.food_name.lower().strip(), request.storage_location),
            ai_enhanced=False,
        )


@lru_cache
def get_expiration_estimator() -> ExpirationEstimator:
    """Get cached estimator with the configured confidence policy."""
    return ExpirationEstimator(policy=ConfidencePolicy.from_settings())
