"""Pydantic request/response models for order endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import Order, OrderStatus
from .pricing import OrderQuoteModel, QuoteItem


class OrderCreateRequest(BaseModel):
    customer_id: str
    items: List[QuoteItem] = Field(..., min_length=1)
    notes: Optional[str] = None


class OrderStatusChange(BaseModel):
    status: OrderStatus


class OrderLineModel(BaseModel):
    product_id: str
    quantity: int
    unit_price: int
    subtotal: int
    discount_type: Optional[str] = None
    discount_rate: float = 0.0
    discount_amount: int = 0


class OrderModel(BaseModel):
    id: str
    customer_id: str
    status: OrderStatus
    lines: List[OrderLineModel]
    subtotal: int
    discount_amount: int
    tax_amount: int
    total_amount: int
    credit_limit_exceeded: bool
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderModel":
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            status=order.status,
            lines=[
                OrderLineModel(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    subtotal=line.subtotal,
                    discount_type=line.discount_type.value if line.discount_type else None,
                    discount_rate=line.discount_rate,
                    discount_amount=line.discount_amount,
                )
                for line in order.lines
            ],
            subtotal=order.subtotal,
            discount_amount=order.discount_amount,
            tax_amount=order.tax_amount,
            total_amount=order.total_amount,
            credit_limit_exceeded=order.credit_limit_exceeded,
            notes=order.notes,
            created_at=order.created_at,
        )


class PlacedOrderResponse(BaseModel):
    order: OrderModel
    quote: OrderQuoteModel
    credit_warning: Optional[str] = None
