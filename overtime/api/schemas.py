from __future__ import annotations

from dataclasses import asdict
from datetime import date, time

from pydantic import BaseModel, Field

from ..models import EmployeeRecord, OvertimeEntry
from ..validation import EntryCandidate


class EmployeeOut(BaseModel):
    reports_to_leader: str
    reports_to_coordinator: str
    full_name: str
    identifier: str
    code: str
    position: str

    @classmethod
    def from_record(cls, record: EmployeeRecord) -> "EmployeeOut":
        return cls(**asdict(record))


class EntryIn(BaseModel):
    registered_by: str = ""
    employee_identifier: str = ""
    employee_full_name: str = ""
    employee_code: str = ""
    employee_position: str = ""
    entry_date: date | None = None
    entry_time: time
    exit_date: date | None = None
    exit_time: time
    note: str | None = Field(default=None, max_length=500)

    def to_candidate(self) -> EntryCandidate:
        return EntryCandidate(**self.model_dump())


class EntryOut(BaseModel):
    registered_by: str
    employee_identifier: str
    employee_full_name: str
    employee_code: str
    employee_position: str
    entry_date: date | None
    entry_time: time
    exit_date: date | None
    exit_time: time
    note: str

    @classmethod
    def from_entry(cls, entry: OvertimeEntry) -> "EntryOut":
        return cls(**asdict(entry))

    def to_entry(self) -> OvertimeEntry:
        return OvertimeEntry(**self.model_dump())


class RosterStatus(BaseModel):
    ready: bool
    employees: int
    error: str | None = None


class DeleteResult(BaseModel):
    deleted: bool
