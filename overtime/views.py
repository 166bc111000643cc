from __future__ import annotations
from typing import Iterable, Sequence

from .models import EmployeeRecord, OvertimeEntry

EMPTY_LEDGER_MESSAGE = "No hay horas extras registradas aún."


def _clock(entry_day, clock) -> str:
    day = entry_day.isoformat() if entry_day else "-"
    return f"{day} {clock.strftime('%H:%M')}"


def format_ledger(entries: Sequence[OvertimeEntry]) -> str:
    if not entries:
        return EMPTY_LEDGER_MESSAGE
    rows = ["#   Registered by         DNI/CE       Name                          Entry             Exit              Note"]
    for number, entry in enumerate(entries, start=1):
        rows.append(
            f"{number:<3} {entry.registered_by[:20]:<20}  {entry.employee_identifier:<11}  "
            f"{entry.employee_full_name[:28]:<28}  {_clock(entry.entry_date, entry.entry_time):<16}  "
            f"{_clock(entry.exit_date or entry.entry_date, entry.exit_time):<16}  {entry.note or '-'}"
        )
    rows.append(f"Total entries: {len(entries)}")
    return "\n".join(rows)


def format_employees(records: Iterable[EmployeeRecord]) -> str:
    rows = [
        f"{record.identifier}  {record.full_name}  code: {record.code}  position: {record.position}  coordinator: {record.reports_to_coordinator or '-'}"
        for record in records
    ]
    return "\n".join(rows) if rows else "No employees found."
