import pytest

from src.b2b_portal.errors import InvalidTransitionError, PermissionDeniedError
from src.b2b_portal.models.domain import ApplicationStatus, CustomerStatus, OrderStatus
from src.b2b_portal.models.session import Role, Session
from src.b2b_portal.services.workflow import (
    allowed_application_targets,
    allowed_order_targets,
    check_application_transition,
    check_customer_status_change,
    check_order_placement,
    check_order_transition,
    next_order_status,
)

ADMIN = Session(user_id="a", role=Role.ADMIN)
ACCOUNTING = Session(user_id="b", role=Role.ACCOUNTING)
PRESIDENT = Session(user_id="c", role=Role.PRESIDENT)
CUSTOMER = Session(user_id="d", role=Role.CUSTOMER, customer_id="c1")


def test_application_transition_table() -> None:
    assert allowed_application_targets(ApplicationStatus.PENDING) == {
        ApplicationStatus.ACCOUNTING_REVIEW,
        ApplicationStatus.REJECTED,
    }
    assert allowed_application_targets(ApplicationStatus.ACCOUNTING_REVIEW) == {
        ApplicationStatus.APPROVAL_PENDING,
        ApplicationStatus.REJECTED,
    }
    assert allowed_application_targets(ApplicationStatus.APPROVAL_PENDING) == {
        ApplicationStatus.APPROVED,
        ApplicationStatus.REJECTED,
    }
    assert allowed_application_targets(ApplicationStatus.APPROVED) == set()
    assert allowed_application_targets(ApplicationStatus.REJECTED) == set()


@pytest.mark.parametrize(
    "current,target",
    [
        (ApplicationStatus.PENDING, ApplicationStatus.APPROVED),
        (ApplicationStatus.PENDING, ApplicationStatus.APPROVAL_PENDING),
        (ApplicationStatus.ACCOUNTING_REVIEW, ApplicationStatus.PENDING),
        (ApplicationStatus.APPROVED, ApplicationStatus.REJECTED),
        (ApplicationStatus.REJECTED, ApplicationStatus.ACCOUNTING_REVIEW),
    ],
)
def test_illegal_application_transitions(current, target) -> None:
    with pytest.raises(InvalidTransitionError):
        check_application_transition(current, target, ADMIN)


def test_application_role_gating() -> None:
    check_application_transition(ApplicationStatus.PENDING, ApplicationStatus.ACCOUNTING_REVIEW, ACCOUNTING)
    check_application_transition(ApplicationStatus.APPROVAL_PENDING, ApplicationStatus.APPROVED, PRESIDENT)
    check_application_transition(ApplicationStatus.PENDING, ApplicationStatus.REJECTED, PRESIDENT)

    with pytest.raises(PermissionDeniedError):
        check_application_transition(ApplicationStatus.APPROVAL_PENDING, ApplicationStatus.APPROVED, ACCOUNTING)
    with pytest.raises(PermissionDeniedError):
        check_application_transition(ApplicationStatus.PENDING, ApplicationStatus.ACCOUNTING_REVIEW, PRESIDENT)
    with pytest.raises(PermissionDeniedError):
        check_application_transition(ApplicationStatus.PENDING, ApplicationStatus.REJECTED, CUSTOMER)


def test_order_sequence() -> None:
    assert next_order_status(OrderStatus.PENDING) == OrderStatus.CONFIRMED
    assert next_order_status(OrderStatus.CONFIRMED) == OrderStatus.PROCESSING
    assert next_order_status(OrderStatus.PROCESSING) == OrderStatus.SHIPPED
    assert next_order_status(OrderStatus.SHIPPED) == OrderStatus.DELIVERED
    assert next_order_status(OrderStatus.DELIVERED) is None
    assert next_order_status(OrderStatus.CANCELLED) is None


def test_cancel_reachable_from_every_non_terminal_state() -> None:
    for current in (OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED):
        assert OrderStatus.CANCELLED in allowed_order_targets(current)
    assert allowed_order_targets(OrderStatus.DELIVERED) == set()
    assert allowed_order_targets(OrderStatus.CANCELLED) == set()


def test_order_transition_checks() -> None:
    check_order_transition(OrderStatus.PENDING, OrderStatus.CONFIRMED, ADMIN)

    with pytest.raises(InvalidTransitionError):
        check_order_transition(OrderStatus.PENDING, OrderStatus.SHIPPED, ADMIN)
    with pytest.raises(InvalidTransitionError):
        check_order_transition(OrderStatus.DELIVERED, OrderStatus.CANCELLED, ADMIN)
    with pytest.raises(PermissionDeniedError):
        check_order_transition(OrderStatus.PENDING, OrderStatus.CANCELLED, CUSTOMER)


def test_customer_status_moves_freely_for_staff() -> None:
    for target in CustomerStatus:
        check_customer_status_change(target, ACCOUNTING)
    with pytest.raises(PermissionDeniedError):
        check_customer_status_change(CustomerStatus.SUSPENDED, CUSTOMER)


def test_order_placement_permissions() -> None:
    check_order_placement(ADMIN, "anyone")
    check_order_placement(CUSTOMER, "c1")
    with pytest.raises(PermissionDeniedError):
        check_order_placement(CUSTOMER, "c2")
