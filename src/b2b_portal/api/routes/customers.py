"""Customer account endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...errors import PortalError
from ...models.domain import CustomerStatus
from ...models.session import Session
from ...schemas.customers import CustomerModel, CustomerUpdate
from ...schemas.pricing import SpecialPriceModel
from ...services import customers as customer_service
from ..dependencies import get_session, require_staff_session
from ..errors import to_http_exception

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=List[CustomerModel], status_code=status.HTTP_200_OK)
def list_customers(
    status_filter: Optional[CustomerStatus] = Query(default=None, alias="status"),
    session: Session = Depends(require_staff_session),
) -> List[CustomerModel]:
    try:
        customers = customer_service.list_customers(session, status_filter)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return [CustomerModel.from_domain(customer) for customer in customers]


@router.get("/{customer_id}", response_model=CustomerModel, status_code=status.HTTP_200_OK)
def get_customer(customer_id: str, session: Session = Depends(get_session)) -> CustomerModel:
    try:
        customer = customer_service.get_customer(session, customer_id)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return CustomerModel.from_domain(customer)


@router.patch("/{customer_id}", response_model=CustomerModel, status_code=status.HTTP_200_OK)
def update_customer(
    customer_id: str,
    payload: CustomerUpdate,
    session: Session = Depends(require_staff_session),
) -> CustomerModel:
    try:
        customer = customer_service.update_customer(session, customer_id, payload)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return CustomerModel.from_domain(customer)


@router.put(
    "/{customer_id}/special-pricing/{product_id}",
    response_model=CustomerModel,
    status_code=status.HTTP_200_OK,
)
def set_special_price(
    customer_id: str,
    product_id: str,
    payload: SpecialPriceModel,
    session: Session = Depends(require_staff_session),
) -> CustomerModel:
    try:
        customer = customer_service.set_special_price(session, customer_id, product_id, payload)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return CustomerModel.from_domain(customer)


@router.delete(
    "/{customer_id}/special-pricing/{product_id}",
    response_model=CustomerModel,
    status_code=status.HTTP_200_OK,
)
def remove_special_price(
    customer_id: str,
    product_id: str,
    session: Session = Depends(require_staff_session),
) -> CustomerModel:
    try:
        customer = customer_service.remove_special_price(session, customer_id, product_id)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return CustomerModel.from_domain(customer)
