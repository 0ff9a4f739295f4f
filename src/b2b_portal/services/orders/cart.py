"""In-memory shopping cart for a single customer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ...errors import InvalidArgumentError
from ...models.domain import Customer, Product
from ..pricing import OrderQuote, quote_for_customer


@dataclass(slots=True)
class CartLine:
    product: Product
    quantity: int


@dataclass
class Cart:
    """Lines keyed by product id, in the order they were first added."""

    customer_id: str
    lines: dict[str, CartLine] = field(default_factory=dict)

    def _check_minimum(self, product: Product, quantity: int) -> None:
        if quantity < product.min_order_quantity:
            raise InvalidArgumentError(
                f"minimum order quantity for '{product.name}' is {product.min_order_quantity} (got {quantity})."
            )

    def add_item(self, product: Product, quantity: int = 1) -> CartLine:
        """Add ``quantity`` of ``product``, merging with an existing line."""
        self._check_minimum(product, quantity)
        line = self.lines.get(product.id)
        if line is None:
            line = CartLine(product=product, quantity=quantity)
            self.lines[product.id] = line
        else:
            line.quantity += quantity
        return line

    def update_quantity(self, product_id: str, quantity: int) -> Optional[CartLine]:
        line = self.lines.get(product_id)
        if line is None:
            return None
        if quantity < 1:
            self.remove_item(product_id)
            return None
        self._check_minimum(line.product, quantity)
        line.quantity = quantity
        return line

    def remove_item(self, product_id: str) -> None:
        self.lines.pop(product_id, None)

    def clear(self) -> None:
        self.lines.clear()

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines.values())

    def unique_item_count(self) -> int:
        return len(self.lines)

    def has_item(self, product_id: str) -> bool:
        return product_id in self.lines

    def quantity_of(self, product_id: str) -> int:
        line = self.lines.get(product_id)
        return line.quantity if line else 0

    def quote(self, customer: Customer, *, tax_rate: float) -> OrderQuote:
        if customer.id != self.customer_id:
            raise InvalidArgumentError(f"cart belongs to customer '{self.customer_id}', not '{customer.id}'.")
        items = [(line.product, line.quantity) for line in self.lines.values()]
        return quote_for_customer(customer, items, tax_rate=tax_rate)
