from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional


ROSTER_COLUMNS = [
    "reports_to_leader",
    "reports_to_coordinator",
    "full_name",
    "identifier",
    "code",
    "position",
]


@dataclass(frozen=True)
class EmployeeRecord:
    reports_to_leader: str
    reports_to_coordinator: str
    full_name: str
    identifier: str
    code: str
    position: str


@dataclass(frozen=True)
class OvertimeEntry:
    registered_by: str
    employee_identifier: str
    employee_full_name: str
    employee_code: str
    employee_position: str
    entry_date: Optional[date]
    entry_time: time
    exit_date: Optional[date]
    exit_time: time
    note: str = ""

    @property
    def entry_moment(self) -> datetime:
        return combine_moment(self.entry_date or self.exit_date, self.entry_time)

    @property
    def exit_moment(self) -> datetime:
        # A missing date falls back to the other one: same calendar day.
        return combine_moment(self.exit_date or self.entry_date, self.exit_time)


def combine_moment(day: Optional[date], clock: time) -> datetime:
    return datetime.combine(day or date.min, clock)
