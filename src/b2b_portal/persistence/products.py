"""Product catalog reads."""

from __future__ import annotations

import math
from typing import Any, Iterable, Optional

from ..db.supabase import require_supabase_client, run_query
from ..models.domain import Product, VolumeTier

TABLE = "products"


def _first_present(row: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def _coerce_price(value: Any) -> int:
    if value is None or value == "":
        return 0
    return math.floor(float(value))


def _parse_tiers(raw: Optional[Iterable[dict[str, Any]]]) -> tuple[VolumeTier, ...]:
    tiers: list[VolumeTier] = []
    for tier in raw or []:
        min_quantity = _first_present(tier, "min_quantity", "minQuantity")
        percent = _first_present(tier, "discount_rate", "percent", "discountRate")
        if min_quantity is None or percent is None:
            continue  # ignore half-filled tiers from the admin form
        tiers.append(VolumeTier(min_quantity=int(min_quantity), percent=float(percent)))
    return tuple(sorted(tiers, key=lambda t: t.min_quantity))


def row_to_product(row: dict[str, Any]) -> Product:
    # Catalog rows were written by several clients using different price columns.
    return Product(
        id=str(row["id"]),
        name=(row.get("name") or "").strip(),
        list_price=_coerce_price(_first_present(row, "base_price", "unit_price", "price")),
        volume_tiers=_parse_tiers(row.get("volume_discounts")),
        min_order_quantity=int(_first_present(row, "min_order_quantity", "minOrderQuantity") or 1),
        category=row.get("category"),
        description=row.get("description"),
        status=row.get("status") or "active",
    )


def list_active_products() -> list[Product]:
    supabase = require_supabase_client()
    query = supabase.table(TABLE).select("*").eq("status", "active").order("name")
    return [row_to_product(row) for row in run_query(query, table=TABLE, operation="select")]


def get_products_by_ids(product_ids: Iterable[str]) -> dict[str, Product]:
    """Active products keyed by id; unknown or inactive ids are simply absent."""
    ids = sorted(set(product_ids))
    if not ids:
        return {}
    supabase = require_supabase_client()
    query = supabase.table(TABLE).select("*").in_("id", ids).eq("status", "active")
    products = (row_to_product(row) for row in run_query(query, table=TABLE, operation="select"))
    return {product.id: product for product in products}
