"""Customer account maintenance by staff."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from ...errors import PermissionDeniedError
from ...models.domain import Customer, CustomerStatus
from ...models.session import Session
from ...persistence import customers as customer_store
from ...schemas.customers import CustomerUpdate
from ...schemas.pricing import SpecialPriceModel
from ..pricing.special_pricing import storable_special_pricing
from ..workflow import check_customer_status_change, require_staff

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_customer(session: Session, customer_id: str) -> Customer:
    """Staff may read any customer; a customer session only its own record."""
    if not session.is_staff and session.customer_id != customer_id:
        raise PermissionDeniedError("customers may only view their own account")
    return customer_store.get_customer(customer_id)


def list_customers(session: Session, status: Optional[CustomerStatus] = None) -> list[Customer]:
    require_staff(session, "list customers")
    return customer_store.list_customers(status.value if status else None)


def update_customer(session: Session, customer_id: str, update: CustomerUpdate) -> Customer:
    require_staff(session, "edit customers")
    changes = update.model_dump(exclude_unset=True)
    if "status" in changes and changes["status"] is not None:
        check_customer_status_change(changes["status"], session)
        changes["status"] = changes["status"].value

    fields: dict[str, Any] = {}
    for key, value in changes.items():
        if key == "accounting_id":
            fields["yayoi_id"] = value
        else:
            fields[key] = value
    if not fields:
        return customer_store.get_customer(customer_id)

    fields["updated_at"] = _now()
    customer = customer_store.update_customer(customer_id, fields)
    logger.info(f"Customer {customer_id} updated by {session.user_id}: {sorted(changes)}")
    return customer


def set_special_price(session: Session, customer_id: str, product_id: str, entry: SpecialPriceModel) -> Customer:
    """Add or replace one product's special price for a customer."""
    require_staff(session, "edit special pricing")
    customer = customer_store.get_customer(customer_id)
    special_pricing = dict(customer.special_pricing)
    special_pricing[product_id] = entry.to_domain()
    return customer_store.update_customer(
        customer_id,
        {"special_pricing": storable_special_pricing(special_pricing), "updated_at": _now()},
    )


def remove_special_price(session: Session, customer_id: str, product_id: str) -> Customer:
    require_staff(session, "edit special pricing")
    customer = customer_store.get_customer(customer_id)
    if product_id not in customer.special_pricing:
        return customer
    special_pricing = {key: value for key, value in customer.special_pricing.items() if key != product_id}
    return customer_store.update_customer(
        customer_id,
        {"special_pricing": storable_special_pricing(special_pricing), "updated_at": _now()},
    )
