"""Application review and approval workflow."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from ...config import settings
from ...errors import InconsistentStateError, InvalidArgumentError, PortalError
from ...models.domain import Application, ApplicationStatus, Customer, CustomerStatus
from ...models.session import Session
from ...persistence import applications as application_store
from ...persistence import customers as customer_store
from ...schemas.applications import (
    AccountingReview,
    ApplicationStatusChange,
    ApplicationSubmission,
    ApprovalTerms,
)
from ..pricing.special_pricing import storable_special_pricing
from ..workflow import check_accounting_review_role, check_application_transition, require_staff

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApprovalResult:
    application: Application
    customer: Customer


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _review_fields(review: AccountingReview) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if review.accounting_id is not None:
        fields["yayoi_id"] = review.accounting_id.strip() or None
    if review.discount_rate is not None:
        fields["discount_rate"] = review.discount_rate
    if review.credit_limit is not None:
        fields["credit_limit"] = review.credit_limit
    if review.payment_terms is not None:
        fields["payment_terms"] = review.payment_terms
    return fields


def submit_application(submission: ApplicationSubmission) -> Application:
    """Store a public application; duplicate emails surface as DuplicateRecordError."""
    record = submission.model_dump()
    record["status"] = ApplicationStatus.PENDING.value
    application = application_store.insert_application(record)
    logger.info(f"Application {application.id} submitted by {application.email}")
    return application


def list_applications(session: Session, status: Optional[ApplicationStatus] = None) -> list[Application]:
    require_staff(session, "list applications")
    return application_store.list_applications(status.value if status else None)


def get_application(session: Session, application_id: str) -> Application:
    require_staff(session, "view applications")
    return application_store.get_application(application_id)


def record_accounting_review(session: Session, application_id: str, review: AccountingReview) -> Application:
    """Save accounting data on an application that is under accounting review."""
    check_accounting_review_role(session)
    application = application_store.get_application(application_id)
    if application.status != ApplicationStatus.ACCOUNTING_REVIEW:
        raise InvalidArgumentError(
            f"accounting data can only be recorded during accounting review (status is '{application.status.value}')"
        )
    fields = _review_fields(review)
    if not fields:
        return application
    fields["updated_at"] = _now()
    return application_store.update_application(application_id, fields)


def change_application_status(
    session: Session,
    application_id: str,
    change: ApplicationStatusChange,
) -> Application:
    """Move an application along the review workflow.

    Approval and rejection are delegated to their dedicated operations so
    that their side effects always run.
    """
    if change.status == ApplicationStatus.APPROVED:
        terms = change.terms or ApprovalTerms()
        if change.notes is not None and terms.notes is None:
            terms = terms.model_copy(update={"notes": change.notes})
        return approve_application(session, application_id, terms).application
    if change.status == ApplicationStatus.REJECTED:
        return reject_application(session, application_id, change.notes)

    application = application_store.get_application(application_id)
    check_application_transition(application.status, change.status, session)

    fields: dict[str, Any] = {"status": change.status.value, "updated_at": _now()}
    if change.review is not None:
        fields.update(_review_fields(change.review))
    if change.notes:
        fields["notes"] = change.notes

    if change.status == ApplicationStatus.APPROVAL_PENDING:
        accounting_id = fields.get("yayoi_id", application.accounting_id)
        if not accounting_id:
            raise InvalidArgumentError("an accounting system id is required before requesting approval")

    updated = application_store.update_application(application_id, fields)
    logger.info(
        f"Application {application_id} moved {application.status.value} -> {change.status.value} by {session.user_id}"
    )
    return updated


def reject_application(session: Session, application_id: str, reason: Optional[str] = None) -> Application:
    application = application_store.get_application(application_id)
    check_application_transition(application.status, ApplicationStatus.REJECTED, session)
    fields: dict[str, Any] = {"status": ApplicationStatus.REJECTED.value, "updated_at": _now()}
    if reason:
        fields["notes"] = reason
    updated = application_store.update_application(application_id, fields)
    logger.info(f"Application {application_id} rejected by {session.user_id}")
    return updated


def _resolve_terms(application: Application, terms: ApprovalTerms) -> dict[str, Any]:
    """Approver's terms first, then the accounting review values, then defaults."""

    def pick(override: Any, reviewed: Any, default: Any) -> Any:
        if override is not None:
            return override
        if reviewed is not None:
            return reviewed
        return default

    if terms.special_pricing is not None:
        special_pricing = {product_id: entry.to_domain() for product_id, entry in terms.special_pricing.items()}
    else:
        special_pricing = dict(application.special_pricing)

    return {
        "discount_rate": pick(terms.discount_rate, application.discount_rate, settings.default_discount_rate),
        "credit_limit": pick(terms.credit_limit, application.credit_limit, settings.default_credit_limit),
        "payment_terms": pick(terms.payment_terms, application.payment_terms, settings.default_payment_terms),
        "special_pricing": storable_special_pricing(special_pricing),
    }


def build_customer_record(application: Application, resolved_terms: dict[str, Any], notes: Optional[str]) -> dict[str, Any]:
    return {
        "application_id": application.id,
        "company_name": application.company_name,
        "contact_name": application.contact_name,
        "email": application.email,
        "phone": application.phone,
        "address": application.address,
        "business_type": application.business_type,
        "yayoi_id": application.accounting_id,
        "status": CustomerStatus.ACTIVE.value,
        "notes": notes,
        **resolved_terms,
    }


def approve_application(
    session: Session,
    application_id: str,
    terms: Optional[ApprovalTerms] = None,
) -> ApprovalResult:
    """Approve an application and create its customer record.

    The two writes are independent. Terms are validated before the first
    write. A customer that already exists for the application is reused
    rather than inserted again. If anything fails after the status write the
    application is reverted to ``approval_pending``; when that revert fails
    too, InconsistentStateError is raised.
    """
    terms = terms or ApprovalTerms()
    application = application_store.get_application(application_id)
    check_application_transition(application.status, ApplicationStatus.APPROVED, session)

    resolved = _resolve_terms(application, terms)
    fields: dict[str, Any] = {"status": ApplicationStatus.APPROVED.value, "updated_at": _now(), **resolved}
    if terms.notes:
        fields["notes"] = terms.notes

    try:
        approved = application_store.update_application(application_id, fields)
        customer = customer_store.find_customer_by_application(application_id)
        if customer is not None:
            logger.warning(f"Customer {customer.id} already exists for application {application_id}; not inserting")
        else:
            customer = customer_store.insert_customer(build_customer_record(approved, resolved, terms.notes))
    except PortalError as exc:
        logger.error(f"Approval of application {application_id} failed after the status write: {exc}")
        try:
            application_store.update_application(
                application_id,
                {"status": ApplicationStatus.APPROVAL_PENDING.value, "updated_at": _now()},
            )
        except PortalError as revert_exc:
            logger.error(f"Could not revert application {application_id} after failed approval: {revert_exc}")
            raise InconsistentStateError(
                application_id,
                f"application {application_id} is approved but has no customer record",
            ) from exc
        raise

    logger.info(f"Application {application_id} approved by {session.user_id}; customer {customer.id} created")
    return ApprovalResult(application=approved, customer=customer)
