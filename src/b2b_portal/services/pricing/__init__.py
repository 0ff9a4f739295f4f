"""Pricing service exports."""

from .calculator import (
    LinePrice,
    OrderQuote,
    price_line,
    price_order,
    quote_for_customer,
    resolve_discount_percent,
    volume_discount_percent,
)
from .special_pricing import parse_special_pricing, serialize_special_pricing, storable_special_pricing

__all__ = [
    "LinePrice",
    "OrderQuote",
    "price_line",
    "price_order",
    "quote_for_customer",
    "resolve_discount_percent",
    "volume_discount_percent",
    "parse_special_pricing",
    "serialize_special_pricing",
    "storable_special_pricing",
]
