from __future__ import annotations

from enum import Enum


class RejectionReason(str, Enum):
    AUTHORITY_REQUIRED = "authority_required"
    EMPLOYEE_REQUIRED = "employee_required"
    EMPLOYEE_OUT_OF_SCOPE = "employee_out_of_scope"
    EXIT_NOT_AFTER_ENTRY = "exit_not_after_entry"


REJECTION_MESSAGES = {
    RejectionReason.AUTHORITY_REQUIRED: "Select who is registering the entry.",
    RejectionReason.EMPLOYEE_REQUIRED: "Select an employee from the roster.",
    RejectionReason.EMPLOYEE_OUT_OF_SCOPE: "The employee is not assigned to the selected coordinator.",
    RejectionReason.EXIT_NOT_AFTER_ENTRY: "The exit time must be later than the entry time.",
}


class OvertimeError(Exception):
    """Base class for every error raised by the overtime core."""


class LoadError(OvertimeError):
    """The roster source could not be fetched or read."""


class EntryValidationError(OvertimeError):
    def __init__(self, reason: RejectionReason) -> None:
        self.reason = reason
        super().__init__(REJECTION_MESSAGES[reason])


class StorageError(OvertimeError):
    """The local persistence medium is full, unreadable or unavailable."""


class NothingToExportError(OvertimeError):
    def __init__(self) -> None:
        super().__init__("There are no overtime entries to export.")
