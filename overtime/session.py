from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Sequence

import httpx

from .core.config import Settings
from .core.logging import get_logger
from .csv_io import load_roster_records
from .errors import EntryValidationError, LoadError, RejectionReason, StorageError
from .exporter import build_workbook, export_report, format_csv
from .models import EmployeeRecord, OvertimeEntry
from .roster import RosterIndex, filter_by_authority, list_authorities
from .storage import JsonFileStorage, LedgerStore
from .validation import EntryCandidate, validate

logger = get_logger(__name__)


class SessionListener:
    """Presentation hooks. Subclasses override the events they care about."""

    def on_roster_loaded(self, error: Optional[LoadError]) -> None:
        pass

    def on_authorities_changed(self, authorities: List[str]) -> None:
        pass

    def on_candidates_changed(self, candidates: List[EmployeeRecord]) -> None:
        pass

    def on_entry_accepted(self, entry: OvertimeEntry) -> None:
        pass

    def on_entry_rejected(self, reason: RejectionReason) -> None:
        pass

    def on_ledger_changed(self, entries: List[OvertimeEntry]) -> None:
        pass

    def on_entry_deleted(self, entry: OvertimeEntry) -> None:
        pass

    def on_ledger_cleared(self) -> None:
        pass

    def on_exported(self, fmt: str, entries: int) -> None:
        pass


class OvertimeSession:
    """Application state for one user: roster, selected coordinator and ledger."""

    def __init__(
        self,
        ledger: LedgerStore,
        *,
        supervisor: str,
        designated_coordinators: Sequence[str] = (),
        roster_source: Optional[str] = None,
        listeners: Sequence[SessionListener] = (),
    ) -> None:
        self.ledger = ledger
        self.supervisor = supervisor
        self.designated_coordinators = list(designated_coordinators)
        self.roster_source = roster_source
        self.listeners: List[SessionListener] = list(listeners)
        self.roster = RosterIndex()
        self.roster_ready = False
        self.roster_error: Optional[LoadError] = None
        self.selected_authority: Optional[str] = None
        self.search_term: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings, listeners: Sequence[SessionListener] = ()) -> "OvertimeSession":
        medium = JsonFileStorage(settings.storage_path, quota_bytes=settings.storage_quota_bytes)
        ledger = LedgerStore(medium, key=settings.ledger_key, strict=settings.strict_write_through)
        return cls(
            ledger,
            supervisor=settings.supervisor,
            designated_coordinators=settings.coordinators,
            roster_source=settings.roster_source,
            listeners=listeners,
        )

    def subscribe(self, listener: SessionListener) -> None:
        self.listeners.append(listener)

    def _emit(self, event: str, *args) -> None:
        for listener in self.listeners:
            getattr(listener, event)(*args)

    def init(self) -> List[OvertimeEntry]:
        """Read the persisted ledger. Unreadable storage starts an empty ledger."""
        try:
            entries = self.ledger.load()
        except StorageError as exc:
            logger.error("session.ledger_unavailable", error=str(exc))
            entries = []
        self._emit("on_ledger_changed", entries)
        return entries

    async def load_roster(self, source: Optional[str] = None, client: Optional[httpx.AsyncClient] = None) -> bool:
        source = source or self.roster_source
        try:
            if not source:
                raise LoadError("No roster source configured")
            records = await load_roster_records(source, client=client)
        except LoadError as exc:
            logger.error("roster.load_failed", source=source, error=str(exc))
            self.roster = RosterIndex()
            self.roster_ready = False
            self.roster_error = exc
            self._emit("on_roster_loaded", exc)
            return False

        self.roster = RosterIndex.from_records(records)
        self.roster_ready = True
        self.roster_error = None
        logger.info("roster.loaded", source=source, employees=len(self.roster))
        self._emit("on_roster_loaded", None)
        self._emit("on_authorities_changed", self.authorities())
        return True

    def use_roster(self, roster: RosterIndex) -> None:
        self.roster = roster
        self.roster_ready = True
        self.roster_error = None
        self._emit("on_roster_loaded", None)
        self._emit("on_authorities_changed", self.authorities())

    def authorities(self) -> List[str]:
        if not self.roster_ready:
            return []
        return list_authorities(self.roster, self.designated_coordinators)

    def candidates(self, authority: Optional[str] = None, search: Optional[str] = None) -> List[EmployeeRecord]:
        if not self.roster_ready:
            return []
        return filter_by_authority(self.roster, authority, search, supervisor=self.supervisor)

    def select_authority(self, authority: Optional[str]) -> List[EmployeeRecord]:
        self.selected_authority = (authority or "").strip() or None
        self.search_term = None
        return self._refresh_candidates()

    def search(self, term: Optional[str]) -> List[EmployeeRecord]:
        self.search_term = term
        return self._refresh_candidates()

    def _refresh_candidates(self) -> List[EmployeeRecord]:
        found = self.candidates(self.selected_authority, self.search_term)
        self._emit("on_candidates_changed", found)
        return found

    def lookup(self, identifier: str, authority: Optional[str] = None) -> Optional[EmployeeRecord]:
        """Autocomplete fill: the employee with this identifier inside the authority's scope."""
        wanted = identifier.strip()
        scoped = self.candidates(authority if authority is not None else self.selected_authority)
        return next((record for record in scoped if record.identifier == wanted), None)

    def submit(self, candidate: EntryCandidate) -> OvertimeEntry:
        try:
            entry = validate(candidate, self.roster, supervisor=self.supervisor)
        except EntryValidationError as exc:
            logger.info("entry.rejected", reason=exc.reason.value, registered_by=candidate.registered_by)
            self._emit("on_entry_rejected", exc.reason)
            raise

        self.ledger.append(entry)
        self._emit("on_entry_accepted", entry)
        self._emit("on_ledger_changed", self.ledger.list())
        return entry

    def entries(self) -> List[OvertimeEntry]:
        return self.ledger.list()

    def delete(self, entry: OvertimeEntry) -> bool:
        found = self.ledger.delete_matching(entry)
        if found:
            self._emit("on_entry_deleted", entry)
            self._emit("on_ledger_changed", self.ledger.list())
        return found

    def clear(self) -> None:
        self.ledger.clear()
        self._emit("on_ledger_cleared")
        self._emit("on_ledger_changed", [])

    def export_csv(self) -> str:
        content = format_csv(self.ledger.list())
        self._emit("on_exported", "csv", len(self.ledger.list()))
        return content

    def export_workbook(self) -> bytes:
        content = build_workbook(self.ledger.list())
        self._emit("on_exported", "xlsx", len(self.ledger.list()))
        return content

    def export_file(self, path: Path) -> Path:
        entries = self.ledger.list()
        export_report(entries, path)
        self._emit("on_exported", path.suffix.lstrip(".").lower(), len(entries))
        return path

    def reset(self) -> None:
        """Drop in-memory state. The persisted ledger is left untouched."""
        self.roster = RosterIndex()
        self.roster_ready = False
        self.roster_error = None
        self.selected_authority = None
        self.search_term = None
        self.ledger = LedgerStore(self.ledger.medium, key=self.ledger.key, strict=self.ledger.strict)
