"""Customer application endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...errors import PortalError
from ...models.domain import ApplicationStatus
from ...models.session import Session
from ...schemas.applications import (
    AccountingReview,
    ApplicationModel,
    ApplicationStatusChange,
    ApplicationSubmission,
    ApprovalTerms,
    RejectionRequest,
)
from ...schemas.customers import CustomerModel
from ...services import applications as application_service
from ..dependencies import get_session, require_staff_session
from ..errors import to_http_exception

router = APIRouter(prefix="/applications", tags=["applications"])


@router.post("", response_model=ApplicationModel, status_code=status.HTTP_201_CREATED)
def submit_application(payload: ApplicationSubmission) -> ApplicationModel:
    """Public endpoint; no session is required to apply."""
    try:
        application = application_service.submit_application(payload)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return ApplicationModel.from_domain(application)


@router.get("", response_model=List[ApplicationModel], status_code=status.HTTP_200_OK)
def list_applications(
    status_filter: Optional[ApplicationStatus] = Query(default=None, alias="status"),
    session: Session = Depends(require_staff_session),
) -> List[ApplicationModel]:
    try:
        applications = application_service.list_applications(session, status_filter)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return [ApplicationModel.from_domain(application) for application in applications]


@router.get("/{application_id}", response_model=ApplicationModel, status_code=status.HTTP_200_OK)
def get_application(application_id: str, session: Session = Depends(require_staff_session)) -> ApplicationModel:
    try:
        application = application_service.get_application(session, application_id)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return ApplicationModel.from_domain(application)


@router.put("/{application_id}/review", response_model=ApplicationModel, status_code=status.HTTP_200_OK)
def record_review(
    application_id: str,
    payload: AccountingReview,
    session: Session = Depends(require_staff_session),
) -> ApplicationModel:
    try:
        application = application_service.record_accounting_review(session, application_id, payload)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return ApplicationModel.from_domain(application)


@router.post("/{application_id}/status", response_model=ApplicationModel, status_code=status.HTTP_200_OK)
def change_status(
    application_id: str,
    payload: ApplicationStatusChange,
    session: Session = Depends(get_session),
) -> ApplicationModel:
    try:
        application = application_service.change_application_status(session, application_id, payload)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return ApplicationModel.from_domain(application)


@router.post("/{application_id}/approve", status_code=status.HTTP_200_OK)
def approve(
    application_id: str,
    payload: Optional[ApprovalTerms] = None,
    session: Session = Depends(get_session),
) -> dict:
    try:
        result = application_service.approve_application(session, application_id, payload)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return {
        "application": ApplicationModel.from_domain(result.application),
        "customer": CustomerModel.from_domain(result.customer),
    }


@router.post("/{application_id}/reject", response_model=ApplicationModel, status_code=status.HTTP_200_OK)
def reject(
    application_id: str,
    payload: RejectionRequest,
    session: Session = Depends(get_session),
) -> ApplicationModel:
    try:
        application = application_service.reject_application(session, application_id, payload.reason)
    except PortalError as exc:
        raise to_http_exception(exc) from exc
    return ApplicationModel.from_domain(application)
