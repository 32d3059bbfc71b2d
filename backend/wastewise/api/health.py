"""Health check endpoints."""

import platform
import psutil
from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from wastewise.jobs.scheduler import get_scheduler
from wastewise.services.healthcheck import get_health_checker, HealthStatus

router = APIRouter()

CRITICAL_SERVICES = ["api", "supabase"]


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/health/detailed")
async def detailed_health():
    """Detailed health check with system info."""
    cpu_percent = psutil.cpu_percent(interval=0.1)
    memory = psutil.virtual_memory()
    disk = psutil.disk_usage("/")
    scheduler = get_scheduler()

    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "system": {
            "platform": platform.system(),
            "machine": platform.machine(),
            "python": platform.python_version(),
        },
        "cpu": {
            "percent": cpu_percent,
            "cores": psutil.cpu_count(),
        },
        "memory": {
            "used_gb": round(memory.used / (1024**3), 2),
            "total_gb": round(memory.total / (1024**3), 2),
            "percent": memory.percent,
        },
        "disk": {
            "used_gb": round(disk.used / (1024**3), 2),
            "total_gb": round(disk.total / (1024**3), 2),
            "percent": disk.percent,
        },
        "scheduler": {
            "running": scheduler.running,
            "jobs": [job.id for job in scheduler.get_jobs()] if scheduler.running else [],
        },
    }


@router.get("/health/services")
async def services_health():
    """
    Health check of all services.

    Checks:
    - API responsiveness
    - Supabase database
    - OpenAI configuration
    """
    report = await get_health_checker().run_all_checks()
    return report.to_dict()


@router.get("/health/ready")
async def readiness_check():
    """
    Readiness check.

    Returns 200 if service is ready to receive traffic.
    Returns 503 if the database is down. Missing AI is not fatal.
    """
    report = await get_health_checker().run_all_checks()

    critical_healthy = all(
        c.status == HealthStatus.HEALTHY
        for c in report.checks
        if c.name in CRITICAL_SERVICES
    )

    if critical_healthy:
        return {"ready": True, "status": report.status.value}
    return JSONResponse(status_code=503, content={"ready": False, "status": report.status.value})


@router.get("/health/live")
async def liveness_check():
    """Liveness check. If we can respond, we're alive."""
    return {"live": True, "timestamp": datetime.utcnow().isoformat()}
