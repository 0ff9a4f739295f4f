"""Status transition rules for applications, customers and orders."""

from __future__ import annotations

from typing import Mapping, Optional

from ...errors import InvalidTransitionError, PermissionDeniedError
from ...models.domain import ApplicationStatus, CustomerStatus, OrderStatus
from ...models.session import STAFF_ROLES, Role, Session

APPLICATION_TRANSITIONS: Mapping[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset({ApplicationStatus.ACCOUNTING_REVIEW, ApplicationStatus.REJECTED}),
    ApplicationStatus.ACCOUNTING_REVIEW: frozenset({ApplicationStatus.APPROVAL_PENDING, ApplicationStatus.REJECTED}),
    ApplicationStatus.APPROVAL_PENDING: frozenset({ApplicationStatus.APPROVED, ApplicationStatus.REJECTED}),
    ApplicationStatus.APPROVED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
}

APPLICATION_ROLES: Mapping[ApplicationStatus, frozenset[Role]] = {
    ApplicationStatus.ACCOUNTING_REVIEW: frozenset({Role.ACCOUNTING, Role.ADMIN}),
    ApplicationStatus.APPROVAL_PENDING: frozenset({Role.ACCOUNTING, Role.ADMIN}),
    ApplicationStatus.APPROVED: frozenset({Role.PRESIDENT, Role.ADMIN}),
    ApplicationStatus.REJECTED: STAFF_ROLES,
}

ORDER_SEQUENCE: tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)

ORDER_TERMINAL = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


def allowed_application_targets(current: ApplicationStatus) -> frozenset[ApplicationStatus]:
    return APPLICATION_TRANSITIONS[current]


def check_application_transition(
    current: ApplicationStatus,
    target: ApplicationStatus,
    session: Session,
) -> None:
    """Raise unless ``session`` may move an application from ``current`` to ``target``."""
    if target not in APPLICATION_TRANSITIONS[current]:
        raise InvalidTransitionError("application", current.value, target.value)
    if session.role not in APPLICATION_ROLES[target]:
        raise PermissionDeniedError(f"role '{session.role.value}' may not move an application to '{target.value}'")


def check_accounting_review_role(session: Session) -> None:
    """Accounting data may only be entered by the roles that run the review."""
    allowed = APPLICATION_ROLES[ApplicationStatus.ACCOUNTING_REVIEW]
    if session.role not in allowed:
        raise PermissionDeniedError(f"role '{session.role.value}' may not record accounting review data")


def next_order_status(current: OrderStatus) -> Optional[OrderStatus]:
    """Next status in the shipping sequence, or None for terminal states."""
    if current in ORDER_TERMINAL:
        return None
    index = ORDER_SEQUENCE.index(current)
    return ORDER_SEQUENCE[index + 1]


def allowed_order_targets(current: OrderStatus) -> frozenset[OrderStatus]:
    if current in ORDER_TERMINAL:
        return frozenset()
    following = next_order_status(current)
    return frozenset({following, OrderStatus.CANCELLED})


def check_order_transition(current: OrderStatus, target: OrderStatus, session: Session) -> None:
    if not session.is_staff:
        raise PermissionDeniedError("only staff may change order status")
    if target not in allowed_order_targets(current):
        raise InvalidTransitionError("order", current.value, target.value)


def check_customer_status_change(target: CustomerStatus, session: Session) -> None:
    """Customer status moves freely among its values, but only by staff."""
    if not session.is_staff:
        raise PermissionDeniedError("only staff may change customer status")
    if not isinstance(target, CustomerStatus):
        raise InvalidTransitionError("customer", "*", str(target))


def require_staff(session: Session, action: str) -> None:
    if not session.is_staff:
        raise PermissionDeniedError(f"only staff may {action}")


def check_order_placement(session: Session, customer_id: str) -> None:
    """Staff may order for anyone; a customer session only for itself."""
    if session.is_staff:
        return
    if session.role == Role.CUSTOMER and session.customer_id == customer_id:
        return
    raise PermissionDeniedError("customers may only place orders for their own account")
