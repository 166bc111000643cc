from __future__ import annotations
from dataclasses import dataclass
from datetime import date, time
from typing import Iterable, Optional

from .errors import EntryValidationError, RejectionReason
from .models import EmployeeRecord, OvertimeEntry, combine_moment
from .roster import filter_by_authority


@dataclass
class EntryCandidate:
    """Raw form input for one overtime entry, before any checks."""

    registered_by: str
    employee_identifier: str
    employee_full_name: str
    employee_code: str
    employee_position: str
    entry_time: time
    exit_time: time
    entry_date: Optional[date] = None
    exit_date: Optional[date] = None
    note: Optional[str] = None

    @classmethod
    def for_employee(cls, registered_by: str, employee: EmployeeRecord, **interval) -> "EntryCandidate":
        return cls(
            registered_by=registered_by,
            employee_identifier=employee.identifier,
            employee_full_name=employee.full_name,
            employee_code=employee.code,
            employee_position=employee.position,
            **interval,
        )


def _matches(record: EmployeeRecord, candidate: EntryCandidate) -> bool:
    return (
        record.identifier == candidate.employee_identifier.strip()
        and record.full_name == candidate.employee_full_name.strip()
        and record.code == candidate.employee_code.strip()
        and record.position == candidate.employee_position.strip()
    )


def resolve_employee(
    candidate: EntryCandidate,
    roster: Iterable[EmployeeRecord],
    *,
    supervisor: str,
) -> EmployeeRecord:
    fields = (
        candidate.employee_identifier,
        candidate.employee_full_name,
        candidate.employee_code,
        candidate.employee_position,
    )
    if not all(value and value.strip() for value in fields):
        raise EntryValidationError(RejectionReason.EMPLOYEE_REQUIRED)

    scoped = filter_by_authority(roster, candidate.registered_by, supervisor=supervisor)
    record = next((record for record in scoped if _matches(record, candidate)), None)
    if record is None:
        raise EntryValidationError(RejectionReason.EMPLOYEE_OUT_OF_SCOPE)
    return record


def check_interval(candidate: EntryCandidate) -> None:
    entry_day = candidate.entry_date or candidate.exit_date
    exit_day = candidate.exit_date or candidate.entry_date
    if combine_moment(exit_day, candidate.exit_time) <= combine_moment(entry_day, candidate.entry_time):
        raise EntryValidationError(RejectionReason.EXIT_NOT_AFTER_ENTRY)


def validate(
    candidate: EntryCandidate,
    roster: Iterable[EmployeeRecord],
    *,
    supervisor: str,
) -> OvertimeEntry:
    """Check a candidate against the roster and return the accepted snapshot.

    Rules run in order and stop at the first failure: an authority is
    selected, the employee belongs to that authority's scope, and the exit
    moment is strictly after the entry moment. Employee fields on the result
    are copied from the roster record, not from the candidate.
    """
    if not (candidate.registered_by or "").strip():
        raise EntryValidationError(RejectionReason.AUTHORITY_REQUIRED)

    employee = resolve_employee(candidate, roster, supervisor=supervisor)
    check_interval(candidate)

    return OvertimeEntry(
        registered_by=candidate.registered_by.strip(),
        employee_identifier=employee.identifier,
        employee_full_name=employee.full_name,
        employee_code=employee.code,
        employee_position=employee.position,
        entry_date=candidate.entry_date,
        entry_time=candidate.entry_time,
        exit_date=candidate.exit_date,
        exit_time=candidate.exit_time,
        note=(candidate.note or "").strip(),
    )
