"""Supabase client for Python backend."""

import logging
from functools import lru_cache
from typing import Any

from supabase import create_client, Client

from ..config import settings
from ..errors import DuplicateRecordError, RemoteOperationFailed

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        return None


def require_supabase_client() -> Client:
    """Like get_supabase_client, but a missing client is an operation failure."""
    client = get_supabase_client()
    if client is None:
        raise RemoteOperationFailed("*", "connect", "Supabase is not configured")
    return client


def run_query(query: Any, *, table: str, operation: str) -> list[dict[str, Any]]:
    """Execute a built PostgREST query and return its rows.

    Client exceptions are logged and re-raised as RemoteOperationFailed;
    unique-key violations become DuplicateRecordError.
    """
    try:
        response = query.execute()
    except Exception as exc:
        code = getattr(exc, "code", None)
        logger.error(f"Supabase {operation} on '{table}' failed: {exc}")
        if code == UNIQUE_VIOLATION:
            raise DuplicateRecordError(table, operation, str(exc)) from exc
        raise RemoteOperationFailed(table, operation, str(exc), remote_code=code) from exc
    return list(response.data or [])
