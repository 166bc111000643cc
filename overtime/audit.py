from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, List, Optional

from .core.logging import get_logger
from .errors import LoadError, RejectionReason
from .models import OvertimeEntry
from .session import SessionListener

logger = get_logger(__name__)


def _entry_summary(entry: OvertimeEntry) -> Dict[str, Any]:
    return {
        "registered_by": entry.registered_by,
        "employee_identifier": entry.employee_identifier,
        "entry": entry.entry_moment.isoformat(),
        "exit": entry.exit_moment.isoformat(),
    }


class AuditTrail(SessionListener):
    """Appends one JSON line per ledger action."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def log(self, entry: Dict[str, Any]) -> None:
        record = {**entry, "timestamp": datetime.now(timezone.utc).isoformat()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(record, ensure_ascii=False) + "\n")
        except OSError as exc:
            logger.warning("audit.write_failed", path=str(self.path), error=str(exc))

    def read(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as handle:
            return [json.loads(line) for line in handle if line.strip()]

    def on_roster_loaded(self, error: Optional[LoadError]) -> None:
        self.log({"action": "roster-loaded", "error": str(error) if error else None})

    def on_entry_accepted(self, entry: OvertimeEntry) -> None:
        self.log({"action": "entry-accepted", **_entry_summary(entry)})

    def on_entry_rejected(self, reason: RejectionReason) -> None:
        self.log({"action": "entry-rejected", "reason": reason.value})

    def on_entry_deleted(self, entry: OvertimeEntry) -> None:
        self.log({"action": "entry-deleted", **_entry_summary(entry)})

    def on_ledger_cleared(self) -> None:
        self.log({"action": "ledger-cleared"})

    def on_exported(self, fmt: str, entries: int) -> None:
        self.log({"action": "export", "format": fmt, "entries": entries})
