"""Pricing endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...errors import PortalError
from ...models.session import Session
from ...schemas.pricing import LinePriceModel, LinePriceRequest, OrderQuoteModel, QuoteRequest
from ...services.orders import quote_order
from ...services.pricing import price_line
from ..dependencies import get_session
from ..errors import to_http_exception

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.post("/calculate", response_model=LinePriceModel, status_code=status.HTTP_200_OK)
def calculate_line(payload: LinePriceRequest) -> LinePriceModel:
    """Price one line from explicit inputs; nothing is read from the store."""
    try:
        line = price_line(
            payload.list_price,
            payload.quantity,
            basic_discount_percent=payload.basic_discount_percent,
            special=payload.special.to_domain() if payload.special else None,
            volume_tiers=[tier.to_domain() for tier in payload.volume_tiers],
        )
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return LinePriceModel.from_domain(line)


@router.post("/quote", response_model=OrderQuoteModel, status_code=status.HTTP_200_OK)
def quote(payload: QuoteRequest, session: Session = Depends(get_session)) -> OrderQuoteModel:
    try:
        order_quote = quote_order(session, payload)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return OrderQuoteModel.from_domain(order_quote)
