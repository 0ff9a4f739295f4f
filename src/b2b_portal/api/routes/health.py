"""Health endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status

from ...db.supabase import get_supabase_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check that the Supabase store is configured and reachable."""
    supabase = get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set B2B_SUPABASE_URL and B2B_SUPABASE_KEY environment variables.",
        }

    try:
        supabase.table("products").select("id").limit(1).execute()
    except Exception as exc:
        logger.error(f"Database health check failed: {exc}")
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
    return {"configured": True, "connected": True, "message": "Database connected."}
