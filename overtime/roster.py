from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from .csv_io import parse_roster
from .models import EmployeeRecord


@dataclass(frozen=True)
class RosterIndex:
    records: Tuple[EmployeeRecord, ...] = ()

    @classmethod
    def from_records(cls, records: Iterable[EmployeeRecord]) -> "RosterIndex":
        return cls(records=tuple(records))

    @classmethod
    def from_text(cls, text: str) -> "RosterIndex":
        return cls.from_records(parse_roster(text))

    def find_by_identifier(self, identifier: str) -> Optional[EmployeeRecord]:
        wanted = identifier.strip()
        return next((record for record in self.records if record.identifier == wanted), None)

    def __iter__(self) -> Iterator[EmployeeRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


def list_authorities(roster: Iterable[EmployeeRecord], designated: Iterable[str] = ()) -> List[str]:
    """Designated coordinators plus every coordinator named in the roster, sorted."""

    names = {name.strip() for name in designated}
    names.update(record.reports_to_coordinator.strip() for record in roster)
    names.discard("")
    return sorted(names)


def filter_by_authority(
    roster: Iterable[EmployeeRecord],
    authority: Optional[str],
    search: Optional[str] = None,
    *,
    supervisor: str,
) -> List[EmployeeRecord]:
    selected = (authority or "").strip()
    if not selected:
        return []

    if selected == supervisor.strip():
        scoped = list(roster)
    else:
        scoped = [record for record in roster if record.reports_to_coordinator.strip() == selected]

    term = (search or "").strip().casefold()
    if term:
        scoped = [record for record in scoped if term in record.full_name.casefold()]
    return scoped
