"""Customer table persistence."""

from __future__ import annotations

from typing import Any, Optional

from ..db.supabase import require_supabase_client, run_query
from ..errors import RecordNotFoundError
from ..models.domain import Customer, CustomerStatus
from ..services.pricing.special_pricing import parse_special_pricing

TABLE = "customers"


def row_to_customer(row: dict[str, Any]) -> Customer:
    return Customer(
        id=str(row["id"]),
        company_name=row.get("company_name") or "",
        contact_name=row.get("contact_name"),
        email=row.get("email"),
        phone=row.get("phone"),
        address=row.get("address"),
        business_type=row.get("business_type"),
        discount_rate=float(row.get("discount_rate") or 0),
        credit_limit=int(row.get("credit_limit") or 0),
        payment_terms=int(row.get("payment_terms") or 0),
        special_pricing=parse_special_pricing(row.get("special_pricing") or row.get("special_prices")),
        # The external accounting system is Yayoi; the column keeps its name.
        accounting_id=row.get("yayoi_id"),
        application_id=row.get("application_id"),
        status=CustomerStatus(row.get("status") or CustomerStatus.ACTIVE.value),
        notes=row.get("notes"),
    )


def get_customer(customer_id: str) -> Customer:
    supabase = require_supabase_client()
    rows = run_query(
        supabase.table(TABLE).select("*").eq("id", customer_id).limit(1),
        table=TABLE,
        operation="select",
    )
    if not rows:
        raise RecordNotFoundError(TABLE, customer_id)
    return row_to_customer(rows[0])


def find_customer_by_application(application_id: str) -> Optional[Customer]:
    supabase = require_supabase_client()
    rows = run_query(
        supabase.table(TABLE).select("*").eq("application_id", application_id).limit(1),
        table=TABLE,
        operation="select",
    )
    return row_to_customer(rows[0]) if rows else None


def list_customers(status: Optional[str] = None) -> list[Customer]:
    supabase = require_supabase_client()
    query = supabase.table(TABLE).select("*")
    if status:
        query = query.eq("status", status)
    query = query.order("company_name")
    return [row_to_customer(row) for row in run_query(query, table=TABLE, operation="select")]


def insert_customer(record: dict[str, Any]) -> Customer:
    supabase = require_supabase_client()
    rows = run_query(supabase.table(TABLE).insert(record), table=TABLE, operation="insert")
    if not rows:
        raise RecordNotFoundError(TABLE, str(record.get("application_id") or "new"))
    return row_to_customer(rows[0])


def update_customer(customer_id: str, fields: dict[str, Any]) -> Customer:
    supabase = require_supabase_client()
    rows = run_query(
        supabase.table(TABLE).update(fields).eq("id", customer_id),
        table=TABLE,
        operation="update",
    )
    if not rows:
        raise RecordNotFoundError(TABLE, customer_id)
    return row_to_customer(rows[0])
