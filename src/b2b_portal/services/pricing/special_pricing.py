"""Parsing and serialisation of per-customer special pricing maps.

The ``special_pricing`` column is an open JSON object keyed by product id.
Browser clients have written several shapes over time, so the discriminator
is validated here, once, and everything past this boundary works with
``FixedPrice`` / ``PercentDiscount`` values.
"""

from __future__ import annotations

import math
from typing import Any, Mapping

from ...errors import InvalidArgumentError
from ...models.domain import FixedPrice, PercentDiscount, SpecialPrice

_FIXED_MODES = {"fixed", "fixed_price"}
_PERCENT_MODES = {"discount", "percent", "percent_discount"}


def _number(value: Any, product_id: str, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise InvalidArgumentError(f"special pricing for '{product_id}' has a non-numeric {field}: {value!r}")
    try:
        number = float(value)
    except ValueError as exc:
        raise InvalidArgumentError(f"special pricing for '{product_id}' has a non-numeric {field}: {value!r}") from exc
    if math.isnan(number) or number < 0:
        raise InvalidArgumentError(f"special pricing for '{product_id}' has an invalid {field}: {value!r}")
    return number


def parse_special_price(product_id: str, entry: Any) -> SpecialPrice:
    if isinstance(entry, (FixedPrice, PercentDiscount)):
        return entry
    if isinstance(entry, (int, float)) and not isinstance(entry, bool):
        # Legacy shorthand: a bare number is a fixed unit price.
        return FixedPrice(price=math.floor(_number(entry, product_id, "price")))
    if not isinstance(entry, Mapping):
        raise InvalidArgumentError(f"special pricing for '{product_id}' must be an object, got {type(entry).__name__}")

    mode = entry.get("mode", entry.get("type"))
    if mode in _FIXED_MODES:
        raw_price = entry.get("price", entry.get("value"))
        return FixedPrice(price=math.floor(_number(raw_price, product_id, "price")))
    if mode in _PERCENT_MODES:
        raw_percent = entry.get("percent", entry.get("discount_rate", entry.get("value")))
        percent = _number(raw_percent, product_id, "percent")
        if percent > 100:
            raise InvalidArgumentError(f"special discount for '{product_id}' exceeds 100% ({percent})")
        return PercentDiscount(percent=percent)
    raise InvalidArgumentError(f"unknown special pricing mode {mode!r} for product '{product_id}'")


def parse_special_pricing(raw: Mapping[str, Any] | None) -> dict[str, SpecialPrice]:
    """Convert a stored special-pricing map into typed entries."""
    if not raw:
        return {}
    if not isinstance(raw, Mapping):
        raise InvalidArgumentError(f"special pricing must be an object keyed by product id, got {type(raw).__name__}")
    return {str(product_id): parse_special_price(str(product_id), entry) for product_id, entry in raw.items()}


def serialize_special_price(entry: SpecialPrice) -> dict[str, Any]:
    if isinstance(entry, FixedPrice):
        return {"type": "fixed", "price": entry.price}
    return {"type": "discount", "discount_rate": entry.percent}


def serialize_special_pricing(mapping: Mapping[str, SpecialPrice]) -> dict[str, dict[str, Any]]:
    """Write entries back in the ``type``-keyed shape the browser clients read."""
    return {product_id: serialize_special_price(entry) for product_id, entry in mapping.items()}


def storable_special_pricing(mapping: Mapping[str, SpecialPrice]) -> dict[str, dict[str, Any]]:
    """Serialise ``mapping`` after checking it parses back; nothing unreadable reaches the store."""
    stored = serialize_special_pricing(mapping)
    parse_special_pricing(stored)
    return stored
