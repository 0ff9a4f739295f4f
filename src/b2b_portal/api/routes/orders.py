"""Order endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...errors import PortalError
from ...models.domain import OrderStatus
from ...models.session import Session
from ...schemas.orders import OrderCreateRequest, OrderModel, OrderStatusChange, PlacedOrderResponse
from ...schemas.pricing import OrderQuoteModel
from ...services import orders as order_service
from ..dependencies import get_session, require_staff_session
from ..errors import to_http_exception

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=PlacedOrderResponse, status_code=status.HTTP_201_CREATED)
def place_order(payload: OrderCreateRequest, session: Session = Depends(get_session)) -> PlacedOrderResponse:
    try:
        placed = order_service.place_order(session, payload)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return PlacedOrderResponse(
        order=OrderModel.from_domain(placed.order),
        quote=OrderQuoteModel.from_domain(placed.quote),
        credit_warning=placed.credit_warning,
    )


@router.get("", response_model=List[OrderModel], status_code=status.HTTP_200_OK)
def list_orders(
    customer_id: Optional[str] = Query(default=None, description="Optional customer filter"),
    status_filter: Optional[OrderStatus] = Query(default=None, alias="status"),
    session: Session = Depends(get_session),
) -> List[OrderModel]:
    try:
        orders = order_service.list_orders(session, customer_id, status_filter)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return [OrderModel.from_domain(order) for order in orders]


@router.get("/{order_id}", response_model=OrderModel, status_code=status.HTTP_200_OK)
def get_order(order_id: str, session: Session = Depends(get_session)) -> OrderModel:
    try:
        order = order_service.get_order(session, order_id)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return OrderModel.from_domain(order)


@router.post("/{order_id}/status", response_model=OrderModel, status_code=status.HTTP_200_OK)
def change_status(
    order_id: str,
    payload: OrderStatusChange,
    session: Session = Depends(require_staff_session),
) -> OrderModel:
    try:
        order = order_service.change_order_status(session, order_id, payload.status)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return OrderModel.from_domain(order)


@router.post("/{order_id}/advance", response_model=OrderModel, status_code=status.HTTP_200_OK)
def advance(order_id: str, session: Session = Depends(require_staff_session)) -> OrderModel:
    try:
        order = order_service.advance_order(session, order_id)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return OrderModel.from_domain(order)


@router.post("/{order_id}/cancel", response_model=OrderModel, status_code=status.HTTP_200_OK)
def cancel(order_id: str, session: Session = Depends(require_staff_session)) -> OrderModel:
    try:
        order = order_service.cancel_order(session, order_id)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return OrderModel.from_domain(order)
