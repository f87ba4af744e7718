"""
Health Check Endpoints.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (database reachable)
- /health/detailed: Application info, database status, and row counts
"""

import asyncio
import time
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from modules.backend.core.config import get_app_config
from modules.backend.core.database import Database
from modules.backend.core.logging import get_logger
from modules.backend.core.utils import utc_now
from modules.backend.repositories.note import NoteRepository
from modules.backend.repositories.user import UserRepository

router = APIRouter()
logger = get_logger(__name__)


async def check_database(database: Database | None) -> dict[str, Any]:
    """
    Check database connectivity.

    Returns:
        Dict with status, latency, and optional error message
    """
    if database is None:
        return {"status": "not_configured"}

    started = time.perf_counter()
    try:
        async with database.session() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}

    return {
        "status": "healthy",
        "latency_ms": int((time.perf_counter() - started) * 1000),
    }


async def collect_counts(database: Database) -> dict[str, int]:
    """Row counts for users and notes."""
    async with database.session() as session:
        return {
            "users": await UserRepository(session).count(),
            "notes": await NoteRepository(session).count(),
        }


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    No dependency checks; this endpoint should always respond quickly.
    """
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check(request: Request) -> dict[str, Any]:
    """
    Readiness check.

    Returns 503 if the database is unreachable or does not answer within
    the configured timeout.
    """
    timeout = get_app_config().observability.health_checks.ready_timeout_seconds
    database = getattr(request.app.state, "database", None)

    try:
        async with asyncio.timeout(timeout):
            db_result = await check_database(database)
    except TimeoutError:
        db_result = {"status": "unhealthy", "error": f"no answer within {timeout}s"}

    checks = {"database": db_result}

    if db_result.get("status") == "unhealthy":
        logger.warning("Readiness check failed", extra={"checks": checks})
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "checks": checks,
                "timestamp": utc_now().isoformat(),
            },
        )

    return {
        "status": "healthy",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }


@router.get("/health/detailed")
async def detailed_health_check(request: Request) -> dict[str, Any]:
    """Detailed health check with application info and row counts."""
    database = getattr(request.app.state, "database", None)
    db_result = await check_database(database)

    app_settings = get_app_config().application
    app_info = {
        "name": app_settings.name,
        "env": app_settings.environment,
        "debug": app_settings.debug,
        "version": app_settings.version,
    }

    counts: dict[str, int] = {}
    if db_result["status"] == "healthy":
        try:
            counts = await collect_counts(database)
        except SQLAlchemyError as e:
            logger.warning("Row count collection failed", extra={"error": str(e)})
            db_result = {"status": "unhealthy", "error": str(e)}

    return {
        "status": "healthy" if db_result["status"] != "unhealthy" else "unhealthy",
        "application": app_info,
        "checks": {"database": db_result},
        "counts": counts,
        "timestamp": utc_now().isoformat(),
    }
