"""Pydantic request/response models for pricing endpoints."""

from __future__ import annotations

import math
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from ..models.domain import FixedPrice, PercentDiscount, SpecialPrice, VolumeTier
from ..services.pricing import LinePrice, OrderQuote


class VolumeTierModel(BaseModel):
    min_quantity: int = Field(..., ge=0)
    percent: float = Field(..., ge=0.0, le=100.0)

    def to_domain(self) -> VolumeTier:
        return VolumeTier(min_quantity=self.min_quantity, percent=self.percent)


class SpecialPriceModel(BaseModel):
    mode: Literal["fixed", "percent_discount"]
    value: float = Field(..., ge=0.0, description="Unit price for 'fixed', percent for 'percent_discount'.")

    @model_validator(mode="after")
    def _percent_within_bounds(self) -> "SpecialPriceModel":
        if self.mode == "percent_discount" and self.value > 100:
            raise ValueError("percent_discount value must be between 0 and 100")
        return self

    def to_domain(self) -> SpecialPrice:
        if self.mode == "fixed":
            return FixedPrice(price=math.floor(self.value))
        return PercentDiscount(percent=self.value)

    @classmethod
    def from_domain(cls, entry: SpecialPrice) -> "SpecialPriceModel":
        if isinstance(entry, FixedPrice):
            return cls(mode="fixed", value=entry.price)
        return cls(mode="percent_discount", value=entry.percent)


class LinePriceRequest(BaseModel):
    list_price: int = Field(..., description="Undiscounted unit price in whole currency units.")
    quantity: int
    basic_discount_percent: float = Field(default=0.0)
    special: Optional[SpecialPriceModel] = None
    volume_tiers: List[VolumeTierModel] = Field(default_factory=list)


class LinePriceModel(BaseModel):
    product_id: Optional[str] = None
    list_price: int
    quantity: int
    unit_price: int
    line_total: int
    discount_percent: float
    discount_amount: int
    discount_source: str

    @classmethod
    def from_domain(cls, line: LinePrice) -> "LinePriceModel":
        return cls(
            product_id=line.product_id,
            list_price=line.list_price,
            quantity=line.quantity,
            unit_price=line.unit_price,
            line_total=line.line_total,
            discount_percent=line.discount_percent,
            discount_amount=line.discount_amount,
            discount_source=line.discount_source.value,
        )


class QuoteItem(BaseModel):
    product_id: str
    quantity: int


class QuoteRequest(BaseModel):
    customer_id: str
    items: List[QuoteItem]


class OrderQuoteModel(BaseModel):
    lines: List[LinePriceModel]
    list_subtotal: int
    subtotal: int
    discount_total: int
    tax: int
    total: int
    average_discount_rate: float
    credit_limit: Optional[int] = None
    exceeds_credit_limit: bool

    @classmethod
    def from_domain(cls, quote: OrderQuote) -> "OrderQuoteModel":
        return cls(
            lines=[LinePriceModel.from_domain(line) for line in quote.lines],
            list_subtotal=quote.list_subtotal,
            subtotal=quote.subtotal,
            discount_total=quote.discount_total,
            tax=quote.tax,
            total=quote.total,
            average_discount_rate=quote.average_discount_rate,
            credit_limit=quote.credit_limit,
            exceeds_credit_limit=quote.exceeds_credit_limit,
        )
