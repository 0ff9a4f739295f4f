"""Customer pricing engine.

Discount sources are resolved with a strict precedence:

1. A special fixed price replaces the list price outright; basic and volume
   discounts are ignored.
2. A special percent discount applies unless the volume tier for the
   quantity is strictly greater.
3. Without special pricing, the larger of the customer's basic rate and the
   volume tier applies (basic keeps the label on ties).

Unit prices are floored to whole currency units before being multiplied by
the quantity, so rounding error accumulates in the customer's favour.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ...errors import InvalidArgumentError
from ...models.domain import (
    Customer,
    DiscountSource,
    FixedPrice,
    PercentDiscount,
    Product,
    SpecialPrice,
    VolumeTier,
)

_HUNDRED = Decimal(100)


@dataclass(slots=True)
class LinePrice:
    product_id: Optional[str]
    list_price: int
    quantity: int
    unit_price: int
    line_total: int
    discount_percent: float
    discount_amount: int
    discount_source: DiscountSource


@dataclass(slots=True)
class OrderQuote:
    lines: list[LinePrice]
    list_subtotal: int
    subtotal: int
    discount_total: int
    tax: int
    total: int
    average_discount_rate: float
    credit_limit: Optional[int]
    exceeds_credit_limit: bool


def _decimal(value: float | int) -> Decimal:
    return Decimal(str(value))


def _is_integer(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_percent(value: float, name: str) -> None:
    if value < 0 or value > 100:
        raise InvalidArgumentError(f"{name} must be between 0 and 100 (got {value}).")


def _validate_line_inputs(
    list_price: int,
    quantity: int,
    basic_discount_percent: float,
    special: Optional[SpecialPrice],
    volume_tiers: Sequence[VolumeTier],
) -> None:
    if not _is_integer(list_price) or list_price < 0:
        raise InvalidArgumentError(f"list price must be a non-negative integer (got {list_price!r}).")
    if not _is_integer(quantity) or quantity < 1:
        raise InvalidArgumentError(f"quantity must be a positive integer (got {quantity!r}).")
    _check_percent(basic_discount_percent, "basic discount percent")
    if isinstance(special, FixedPrice):
        if not _is_integer(special.price) or special.price < 0:
            raise InvalidArgumentError(f"fixed special price must be a non-negative integer (got {special.price!r}).")
    elif isinstance(special, PercentDiscount):
        _check_percent(special.percent, "special discount percent")
    elif special is not None:
        raise InvalidArgumentError(f"unsupported special pricing entry: {special!r}")
    for tier in volume_tiers:
        _check_percent(tier.percent, "volume tier percent")


def volume_discount_percent(tiers: Iterable[VolumeTier], quantity: int) -> float:
    """Largest tier percent whose threshold the quantity reaches (0 when none)."""
    best = 0.0
    for tier in tiers:
        if tier.min_quantity <= quantity and tier.percent > best:
            best = float(tier.percent)
    return best


def resolve_discount_percent(
    quantity: int,
    basic_discount_percent: float = 0.0,
    special: Optional[PercentDiscount] = None,
    volume_tiers: Sequence[VolumeTier] = (),
) -> tuple[float, DiscountSource]:
    """Pick the effective percent and its provenance for percent-based sources."""
    volume = volume_discount_percent(volume_tiers, quantity)
    if special is not None:
        if volume > special.percent:
            return volume, DiscountSource.VOLUME
        return float(special.percent), DiscountSource.SPECIAL
    if volume > basic_discount_percent:
        return volume, DiscountSource.VOLUME
    return float(basic_discount_percent), DiscountSource.BASIC


def discounted_unit_price(list_price: int, percent: float) -> int:
    return math.floor(Decimal(list_price) * (_HUNDRED - _decimal(percent)) / _HUNDRED)


def _fixed_price_percent(list_price: int, fixed_price: int) -> float:
    if list_price == 0:
        return 0.0
    percent = (Decimal(list_price - fixed_price) / Decimal(list_price)) * _HUNDRED
    return float(min(max(percent, Decimal(0)), _HUNDRED))


def price_line(
    list_price: int,
    quantity: int,
    *,
    basic_discount_percent: Optional[float] = None,
    special: Optional[SpecialPrice] = None,
    volume_tiers: Sequence[VolumeTier] = (),
    product_id: Optional[str] = None,
) -> LinePrice:
    """Price a single line for one customer."""
    basic = basic_discount_percent or 0.0
    _validate_line_inputs(list_price, quantity, basic, special, volume_tiers)

    if isinstance(special, FixedPrice):
        unit_price = special.price
        percent = _fixed_price_percent(list_price, special.price)
        source = DiscountSource.SPECIAL
    else:
        percent, source = resolve_discount_percent(quantity, basic, special, volume_tiers)
        unit_price = discounted_unit_price(list_price, percent)

    return LinePrice(
        product_id=product_id,
        list_price=list_price,
        quantity=quantity,
        unit_price=unit_price,
        line_total=unit_price * quantity,
        discount_percent=round(percent, 2),
        discount_amount=(list_price - unit_price) * quantity,
        discount_source=source,
    )


def price_order(
    lines: Sequence[LinePrice],
    *,
    tax_rate: float,
    credit_limit: Optional[int] = None,
) -> OrderQuote:
    """Aggregate priced lines into order totals with tax and the credit flag."""
    if tax_rate < 0:
        raise InvalidArgumentError(f"tax rate must be >= 0 (got {tax_rate}).")

    list_subtotal = sum(line.list_price * line.quantity for line in lines)
    subtotal = sum(line.line_total for line in lines)
    discount_total = sum(line.discount_amount for line in lines)
    tax = math.floor(Decimal(subtotal) * _decimal(tax_rate))
    total = subtotal + tax
    average = round(discount_total / list_subtotal * 100, 2) if list_subtotal else 0.0

    return OrderQuote(
        lines=list(lines),
        list_subtotal=list_subtotal,
        subtotal=subtotal,
        discount_total=discount_total,
        tax=tax,
        total=total,
        average_discount_rate=average,
        credit_limit=credit_limit,
        exceeds_credit_limit=credit_limit is not None and total > credit_limit,
    )


def quote_for_customer(
    customer: Customer,
    items: Iterable[tuple[Product, int]],
    *,
    tax_rate: float,
) -> OrderQuote:
    """Price every requested product for ``customer``; non-positive quantities are dropped."""
    lines = [
        price_line(
            product.list_price,
            quantity,
            basic_discount_percent=customer.discount_rate,
            special=customer.special_pricing.get(product.id),
            volume_tiers=product.volume_tiers,
            product_id=product.id,
        )
        for product, quantity in items
        if quantity > 0
    ]
    return price_order(lines, tax_rate=tax_rate, credit_limit=customer.credit_limit)
