"""Order quoting, placement and status handling."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from ...config import settings
from ...errors import InvalidArgumentError, InvalidTransitionError, PermissionDeniedError, RemoteOperationFailed
from ...models.domain import Customer, CustomerStatus, Order, OrderStatus, Product
from ...models.session import Session
from ...persistence import customers as customer_store
from ...persistence import orders as order_store
from ...persistence import products as product_store
from ...schemas.orders import OrderCreateRequest
from ...schemas.pricing import QuoteItem, QuoteRequest
from ..pricing import OrderQuote, quote_for_customer
from ..workflow import check_order_placement, check_order_transition, next_order_status, require_staff

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PlacedOrder:
    order: Order
    quote: OrderQuote
    credit_warning: Optional[str] = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _merge_quantities(items: Iterable[QuoteItem]) -> dict[str, int]:
    """Sum quantities per product, dropping non-positive lines."""
    quantities: dict[str, int] = {}
    for item in items:
        if item.quantity <= 0:
            continue
        quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity
    return quantities


def _resolve_items(items: Iterable[QuoteItem]) -> list[tuple[Product, int]]:
    quantities = _merge_quantities(items)
    if not quantities:
        raise InvalidArgumentError("an order needs at least one line with a positive quantity.")

    products = product_store.get_products_by_ids(quantities)
    missing = sorted(set(quantities) - set(products))
    if missing:
        raise InvalidArgumentError(f"unknown or inactive products: {', '.join(missing)}")

    resolved: list[tuple[Product, int]] = []
    for product_id, quantity in quantities.items():
        product = products[product_id]
        if quantity < product.min_order_quantity:
            raise InvalidArgumentError(
                f"minimum order quantity for '{product.name}' is {product.min_order_quantity} (got {quantity})."
            )
        resolved.append((product, quantity))
    return resolved


def _load_customer(session: Session, customer_id: str) -> Customer:
    check_order_placement(session, customer_id)
    return customer_store.get_customer(customer_id)


def credit_warning(quote: OrderQuote) -> Optional[str]:
    if not quote.exceeds_credit_limit:
        return None
    return f"Order total {quote.total} exceeds credit limit {quote.credit_limit}; staff review required."


def quote_order(session: Session, request: QuoteRequest) -> OrderQuote:
    """Price a prospective order for a customer without writing anything."""
    customer = _load_customer(session, request.customer_id)
    return quote_for_customer(customer, _resolve_items(request.items), tax_rate=settings.tax_rate)


def place_order(session: Session, request: OrderCreateRequest) -> PlacedOrder:
    """Create a pending order and its lines.

    Exceeding the credit limit does not block the order; the order row is
    flagged and a warning is returned. If the line insert fails the order
    row is cancelled and the failure is re-raised.
    """
    customer = _load_customer(session, request.customer_id)
    if customer.status != CustomerStatus.ACTIVE:
        raise PermissionDeniedError(f"customer '{customer.id}' is {customer.status.value} and cannot place orders")

    quote = quote_for_customer(customer, _resolve_items(request.items), tax_rate=settings.tax_rate)
    warning = credit_warning(quote)
    if warning:
        logger.warning(f"Customer {customer.id}: {warning}")

    order = order_store.insert_order(
        {
            "customer_id": customer.id,
            "status": OrderStatus.PENDING.value,
            "subtotal": quote.subtotal,
            "discount_amount": quote.discount_total,
            "tax_amount": quote.tax,
            "total_amount": quote.total,
            "credit_limit_exceeded": quote.exceeds_credit_limit,
            "notes": request.notes,
        }
    )

    items = [
        {
            "order_id": order.id,
            "product_id": line.product_id,
            "quantity": line.quantity,
            "unit_price": line.unit_price,
            "subtotal": line.line_total,
            "discount_type": line.discount_source.value,
            "discount_rate": line.discount_percent,
            "discount_amount": line.discount_amount,
        }
        for line in quote.lines
    ]
    try:
        order.lines = order_store.insert_order_items(items)
    except RemoteOperationFailed:
        logger.error(f"Order {order.id}: line insert failed, cancelling order")
        order_store.update_order(order.id, {"status": OrderStatus.CANCELLED.value, "updated_at": _now()})
        raise

    logger.info(f"Order {order.id} placed for customer {customer.id} by {session.user_id} (total {quote.total})")
    return PlacedOrder(order=order, quote=quote, credit_warning=warning)


def list_orders(
    session: Session,
    customer_id: Optional[str] = None,
    status: Optional[OrderStatus] = None,
) -> list[Order]:
    """Staff see every order; customer sessions only their own."""
    if not session.is_staff:
        if customer_id is not None and customer_id != session.customer_id:
            raise PermissionDeniedError("customers may only view their own orders")
        customer_id = session.customer_id
        if customer_id is None:
            raise PermissionDeniedError("customer session has no customer account")
    return order_store.list_orders(customer_id, status.value if status else None)


def get_order(session: Session, order_id: str) -> Order:
    order = order_store.get_order(order_id)
    if not session.is_staff and order.customer_id != session.customer_id:
        raise PermissionDeniedError("customers may only view their own orders")
    return order


def change_order_status(session: Session, order_id: str, target: OrderStatus) -> Order:
    require_staff(session, "change order status")
    order = order_store.get_order(order_id)
    check_order_transition(order.status, target, session)
    updated = order_store.update_order(order_id, {"status": target.value, "updated_at": _now()})
    updated.lines = updated.lines or order.lines
    logger.info(f"Order {order_id} moved {order.status.value} -> {target.value} by {session.user_id}")
    return updated


def advance_order(session: Session, order_id: str) -> Order:
    """Move an order to the next status of the shipping sequence."""
    require_staff(session, "change order status")
    order = order_store.get_order(order_id)
    following = next_order_status(order.status)
    if following is None:
        raise InvalidTransitionError("order", order.status.value, "next")
    return change_order_status(session, order_id, following)


def cancel_order(session: Session, order_id: str) -> Order:
    return change_order_status(session, order_id, OrderStatus.CANCELLED)
