"""Catalog API schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from ..models.domain import Product
from .pricing import VolumeTierModel


class ProductModel(BaseModel):
    id: str
    name: str
    list_price: int
    volume_tiers: List[VolumeTierModel]
    min_order_quantity: int
    category: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_domain(cls, product: Product) -> "ProductModel":
        return cls(
            id=product.id,
            name=product.name,
            list_price=product.list_price,
            volume_tiers=[
                VolumeTierModel(min_quantity=tier.min_quantity, percent=tier.percent)
                for tier in product.volume_tiers
            ],
            min_order_quantity=product.min_order_quantity,
            category=product.category,
            description=product.description,
        )
