"""Application workflow service exports."""

from .service import (
    ApprovalResult,
    approve_application,
    change_application_status,
    get_application,
    list_applications,
    record_accounting_review,
    reject_application,
    submit_application,
)

__all__ = [
    "ApprovalResult",
    "approve_application",
    "change_application_status",
    "get_application",
    "list_applications",
    "record_accounting_review",
    "reject_application",
    "submit_application",
]
