"""Order and order-item persistence."""

from __future__ import annotations

from typing import Any, Optional

from ..db.supabase import require_supabase_client, run_query
from ..errors import RecordNotFoundError
from ..models.domain import DiscountSource, Order, OrderLine, OrderStatus
from .applications import parse_timestamp

TABLE = "orders"
ITEMS_TABLE = "order_items"


def row_to_order_line(row: dict[str, Any]) -> OrderLine:
    discount_type = row.get("discount_type")
    return OrderLine(
        product_id=str(row.get("product_id")),
        quantity=int(row.get("quantity") or 0),
        unit_price=int(row.get("unit_price") or 0),
        subtotal=int(row.get("subtotal") or 0),
        discount_type=DiscountSource(discount_type) if discount_type else None,
        discount_rate=float(row.get("discount_rate") or 0),
        discount_amount=int(row.get("discount_amount") or 0),
    )


def row_to_order(row: dict[str, Any]) -> Order:
    return Order(
        id=str(row["id"]),
        customer_id=str(row.get("customer_id")),
        status=OrderStatus(row.get("status") or OrderStatus.PENDING.value),
        lines=[row_to_order_line(item) for item in row.get(ITEMS_TABLE) or []],
        subtotal=int(row.get("subtotal") or 0),
        discount_amount=int(row.get("discount_amount") or 0),
        tax_amount=int(row.get("tax_amount") or 0),
        total_amount=int(row.get("total_amount") or 0),
        credit_limit_exceeded=bool(row.get("credit_limit_exceeded")),
        notes=row.get("notes"),
        created_at=parse_timestamp(row.get("created_at")),
    )


def insert_order(record: dict[str, Any]) -> Order:
    supabase = require_supabase_client()
    rows = run_query(supabase.table(TABLE).insert(record), table=TABLE, operation="insert")
    if not rows:
        raise RecordNotFoundError(TABLE, str(record.get("customer_id") or "new"))
    return row_to_order(rows[0])


def insert_order_items(items: list[dict[str, Any]]) -> list[OrderLine]:
    if not items:
        return []
    supabase = require_supabase_client()
    rows = run_query(supabase.table(ITEMS_TABLE).insert(items), table=ITEMS_TABLE, operation="insert")
    return [row_to_order_line(row) for row in rows]


def get_order(order_id: str) -> Order:
    supabase = require_supabase_client()
    rows = run_query(
        supabase.table(TABLE).select(f"*, {ITEMS_TABLE}(*)").eq("id", order_id).limit(1),
        table=TABLE,
        operation="select",
    )
    if not rows:
        raise RecordNotFoundError(TABLE, order_id)
    return row_to_order(rows[0])


def list_orders(customer_id: Optional[str] = None, status: Optional[str] = None) -> list[Order]:
    supabase = require_supabase_client()
    query = supabase.table(TABLE).select(f"*, {ITEMS_TABLE}(*)")
    if customer_id:
        query = query.eq("customer_id", customer_id)
    if status:
        query = query.eq("status", status)
    query = query.order("created_at", desc=True)
    return [row_to_order(row) for row in run_query(query, table=TABLE, operation="select")]


def update_order(order_id: str, fields: dict[str, Any]) -> Order:
    supabase = require_supabase_client()
    rows = run_query(
        supabase.table(TABLE).update(fields).eq("id", order_id),
        table=TABLE,
        operation="update",
    )
    if not rows:
        raise RecordNotFoundError(TABLE, order_id)
    return row_to_order(rows[0])
