"""Application table persistence."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..db.supabase import require_supabase_client, run_query
from ..errors import RecordNotFoundError
from ..models.domain import Application, ApplicationStatus
from ..services.pricing.special_pricing import parse_special_pricing

TABLE = "applications"


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None or value == "" else float(value)


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None or value == "" else int(value)


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def row_to_application(row: dict[str, Any]) -> Application:
    return Application(
        id=str(row["id"]),
        company_name=row.get("company_name") or "",
        contact_name=row.get("contact_name") or "",
        email=row.get("email") or "",
        status=ApplicationStatus(row.get("status") or ApplicationStatus.PENDING.value),
        phone=row.get("phone"),
        address=row.get("address"),
        business_type=row.get("business_type"),
        terms_agreed=bool(row.get("terms_agreed")),
        accounting_id=row.get("yayoi_id"),
        discount_rate=_optional_float(row.get("discount_rate")),
        credit_limit=_optional_int(row.get("credit_limit")),
        payment_terms=_optional_int(row.get("payment_terms")),
        special_pricing=parse_special_pricing(row.get("special_pricing")),
        notes=row.get("notes"),
        created_at=parse_timestamp(row.get("created_at")),
    )


def insert_application(record: dict[str, Any]) -> Application:
    supabase = require_supabase_client()
    rows = run_query(supabase.table(TABLE).insert(record), table=TABLE, operation="insert")
    if not rows:
        raise RecordNotFoundError(TABLE, str(record.get("email") or "new"))
    return row_to_application(rows[0])


def get_application(application_id: str) -> Application:
    supabase = require_supabase_client()
    rows = run_query(
        supabase.table(TABLE).select("*").eq("id", application_id).limit(1),
        table=TABLE,
        operation="select",
    )
    if not rows:
        raise RecordNotFoundError(TABLE, application_id)
    return row_to_application(rows[0])


def list_applications(status: Optional[str] = None) -> list[Application]:
    supabase = require_supabase_client()
    query = supabase.table(TABLE).select("*")
    if status:
        query = query.eq("status", status)
    query = query.order("created_at", desc=True)
    return [row_to_application(row) for row in run_query(query, table=TABLE, operation="select")]


def update_application(application_id: str, fields: dict[str, Any]) -> Application:
    supabase = require_supabase_client()
    rows = run_query(
        supabase.table(TABLE).update(fields).eq("id", application_id),
        table=TABLE,
        operation="update",
    )
    if not rows:
        raise RecordNotFoundError(TABLE, application_id)
    return row_to_application(rows[0])
