"""Product catalog endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from ...errors import PortalError
from ...persistence.products import list_active_products
from ...schemas.products import ProductModel
from ..errors import to_http_exception

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=List[ProductModel], status_code=status.HTTP_200_OK)
def list_products() -> List[ProductModel]:
    try:
        products = list_active_products()
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return [ProductModel.from_domain(product) for product in products]
