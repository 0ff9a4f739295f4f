"""Error taxonomy shared by pricing, workflow and persistence code."""

from __future__ import annotations


class PortalError(Exception):
    """Base class for all ordering-portal domain exceptions."""

    def __init__(self, error_code: str, category: str, explanation: str):
        self.error_code = error_code
        self.category = category
        self.explanation = explanation
        super().__init__(f"[{self.category}:{self.error_code}] {self.explanation}")


class InvalidArgumentError(PortalError):
    def __init__(self, explanation: str):
        super().__init__("INVALID_ARGUMENT", "INPUT", explanation)


class RecordNotFoundError(PortalError):
    def __init__(self, table: str, record_id: str):
        self.table = table
        self.record_id = record_id
        super().__init__("NOT_FOUND", "STORE", f"No row in '{table}' with id '{record_id}'.")


class RemoteOperationFailed(PortalError):
    """A read or write against the remote store did not complete."""

    def __init__(self, table: str, operation: str, explanation: str, remote_code: str | None = None):
        self.table = table
        self.operation = operation
        self.remote_code = remote_code
        super().__init__("REMOTE_OPERATION_FAILED", "STORE", f"{operation} on '{table}' failed: {explanation}")


class DuplicateRecordError(RemoteOperationFailed):
    def __init__(self, table: str, operation: str, explanation: str, remote_code: str | None = "23505"):
        super().__init__(table, operation, explanation, remote_code)
        self.error_code = "DUPLICATE_RECORD"


class InvalidTransitionError(PortalError):
    def __init__(self, entity: str, current: str, target: str):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__("INVALID_TRANSITION", "WORKFLOW", f"{entity} cannot move from '{current}' to '{target}'.")


class PermissionDeniedError(PortalError):
    def __init__(self, explanation: str):
        super().__init__("PERMISSION_DENIED", "WORKFLOW", explanation)


class InconsistentStateError(PortalError):
    """Application approved but its customer record is missing and the status could not be reverted."""

    def __init__(self, application_id: str, explanation: str):
        self.application_id = application_id
        super().__init__("INCONSISTENT_STATE", "WORKFLOW", explanation)
