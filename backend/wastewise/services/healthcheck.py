"""
Health check system.

Checks:
- API responsiveness
- Database connectivity (Supabase)
- Generative AI configuration (OpenAI)

Each check is a small probe returning (status, message, details); timing and
crash handling are shared.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Awaitable, Callable, Optional

from wastewise import __version__

logger = logging.getLogger(__name__)

Probe = Callable[[], Awaitable[tuple["HealthStatus", str, dict]]]


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


@dataclass
class CheckResult:
    """Outcome of one probe."""
    name: str
    status: HealthStatus
    message: str = ""
    latency_ms: float = 0
    details: dict = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def as_dict(self) -> dict:
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "latency_ms": round(self.latency_ms, 2),
            "details": self.details,
        }


@dataclass
class HealthReport:
    """All probe results plus the overall verdict."""
    status: HealthStatus
    checks: list[CheckResult]
    timestamp: datetime = field(default_factory=datetime.utcnow)
    version: str = __version__

    @property
    def healthy_count(self) -> int:
        return len([c for c in self.checks if c.status == HealthStatus.HEALTHY])

    @property
    def total_count(self) -> int:
        return len(self.checks)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "version": self.version,
            "timestamp": self.timestamp.isoformat(),
            "summary": f"{self.healthy_count}/{self.total_count} checks passing",
            "checks": [c.as_dict() for c in self.checks],
        }


def overall_status(results: list[CheckResult]) -> HealthStatus:
    """Healthy only when every check is healthy."""
    if all(c.status == HealthStatus.HEALTHY for c in results):
        return HealthStatus.HEALTHY
    return HealthStatus.DEGRADED


async def timed(name: str, probe: Probe) -> CheckResult:
    """Run a probe, measuring latency. A raising probe is unhealthy."""
    start = time.perf_counter()
    try:
        status, message, details = await probe()
    except Exception as e:
        logger.error(f"Health check '{name}' failed: {e}")
        status, message, details = HealthStatus.UNHEALTHY, str(e), {}
    return CheckResult(
        name=name,
        status=status,
        message=message,
        latency_ms=(time.perf_counter() - start) * 1000,
        details=details,
    )


class HealthChecker:
    """Runs health checks against all system components."""

    async def run_all_checks(self) -> HealthReport:
        names = ["api", "supabase", "ai"]
        outcomes = await asyncio.gather(
            self.check_api(),
            self.check_supabase(),
            self.check_ai(),
            return_exceptions=True,
        )

        results = [
            CheckResult(name=name, status=HealthStatus.UNHEALTHY, message=str(outcome))
            if isinstance(outcome, Exception) else outcome
            for name, outcome in zip(names, outcomes)
        ]
        return HealthReport(status=overall_status(results), checks=results)

    async def check_api(self) -> CheckResult:
        async def probe():
            return HealthStatus.HEALTHY, "API is responsive", {}

        return await timed("api", probe)

    async def check_supabase(self) -> CheckResult:
        """One-row read from food_items."""
        async def probe():
            from wastewise.services.supabase import get_supabase_client, TABLES

            get_supabase_client().table(TABLES["food_items"]).select("id").limit(1).execute()
            return HealthStatus.HEALTHY, "Database connected", {"connected": True}

        result = await timed("supabase", probe)
        if result.status == HealthStatus.UNHEALTHY:
            result.message = f"Database error: {result.message}"
        return result

    async def check_ai(self) -> CheckResult:
        """Missing OpenAI credentials only degrade the service; fallbacks take over."""
        async def probe():
            from wastewise.config import get_settings

            settings = get_settings()
            if settings.ai_enabled:
                return HealthStatus.HEALTHY, "Configured and enabled", {
                    "enabled": True,
                    "model": settings.ai_model,
                }
            return HealthStatus.DEGRADED, "Not configured (template fallbacks in use)", {"enabled": False}

        return await timed("ai", probe)


_health_checker: Optional[HealthChecker] = None


def get_health_checker() -> HealthChecker:
    global _health_checker
    if _health_checker is None:
        _health_checker = HealthChecker()
    return _health_checker
