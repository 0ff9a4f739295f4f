"""Order service exports."""

from .cart import Cart, CartLine
from .service import (
    PlacedOrder,
    advance_order,
    cancel_order,
    change_order_status,
    credit_warning,
    get_order,
    list_orders,
    place_order,
    quote_order,
)

__all__ = [
    "Cart",
    "CartLine",
    "PlacedOrder",
    "advance_order",
    "cancel_order",
    "change_order_status",
    "credit_warning",
    "get_order",
    "list_orders",
    "place_order",
    "quote_order",
]
