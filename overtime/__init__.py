from .errors import EntryValidationError, LoadError, NothingToExportError, OvertimeError, RejectionReason, StorageError
from .models import EmployeeRecord, OvertimeEntry
from .session import OvertimeSession, SessionListener

__all__ = [
    "EmployeeRecord",
    "OvertimeEntry",
    "OvertimeSession",
    "SessionListener",
    "OvertimeError",
    "LoadError",
    "EntryValidationError",
    "RejectionReason",
    "StorageError",
    "NothingToExportError",
]
