"""Workflow rule exports."""

from .transitions import (
    allowed_application_targets,
    allowed_order_targets,
    check_accounting_review_role,
    check_application_transition,
    check_customer_status_change,
    check_order_placement,
    check_order_transition,
    next_order_status,
    require_staff,
)

__all__ = [
    "allowed_application_targets",
    "allowed_order_targets",
    "check_accounting_review_role",
    "check_application_transition",
    "check_customer_status_change",
    "check_order_placement",
    "check_order_transition",
    "next_order_status",
    "require_staff",
]
