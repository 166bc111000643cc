from __future__ import annotations
import json
from dataclasses import asdict
from datetime import date, time
from pathlib import Path
from typing import Dict, List, Optional

from .core.logging import get_logger
from .errors import StorageError
from .models import OvertimeEntry

logger = get_logger(__name__)


class JsonFileStorage:
    """Named string slots kept in one JSON object file, like browser local storage."""

    def __init__(self, path: Path, quota_bytes: Optional[int] = None) -> None:
        self.path = path
        self.quota_bytes = quota_bytes

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            content = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            raise StorageError(f"Storage file {self.path} could not be read: {exc}") from exc
        if not isinstance(content, dict):
            raise StorageError(f"Storage file {self.path} does not hold a key-value object")
        return content

    def _write_all(self, slots: Dict[str, str]) -> None:
        payload = json.dumps(slots, ensure_ascii=False, indent=2)
        if self.quota_bytes is not None and len(payload.encode("utf-8")) > self.quota_bytes:
            raise StorageError(f"Storage quota of {self.quota_bytes} bytes exceeded")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Storage file {self.path} could not be written: {exc}") from exc

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        slots = self._read_all()
        slots[key] = value
        self._write_all(slots)

    def remove_item(self, key: str) -> None:
        slots = self._read_all()
        if slots.pop(key, None) is not None:
            self._write_all(slots)


class LedgerStore:
    def __init__(self, medium: JsonFileStorage, key: str = "horasExtrasData", strict: bool = False) -> None:
        self.medium = medium
        self.key = key
        self.strict = strict
        self._entries: List[OvertimeEntry] = []

    def load(self) -> List[OvertimeEntry]:
        raw = self.medium.get_item(self.key)
        if raw is None:
            self._entries = []
            return self.list()
        try:
            self._entries = [self._deserialize_entry(item) for item in json.loads(raw)]
        except (ValueError, TypeError, KeyError) as exc:
            raise StorageError(f"Ledger slot {self.key!r} holds unreadable data: {exc}") from exc
        logger.info("ledger.loaded", key=self.key, entries=len(self._entries))
        return self.list()

    def list(self) -> List[OvertimeEntry]:
        return list(self._entries)

    def append(self, entry: OvertimeEntry) -> None:
        previous = list(self._entries)
        self._entries.append(entry)
        self._persist(previous)
        logger.info("ledger.entry_appended", employee=entry.employee_identifier, entries=len(self._entries))

    def delete_matching(self, entry: OvertimeEntry) -> bool:
        try:
            position = self._entries.index(entry)
        except ValueError:
            logger.info("ledger.delete_not_found", employee=entry.employee_identifier)
            return False
        previous = list(self._entries)
        del self._entries[position]
        self._persist(previous)
        logger.info("ledger.entry_deleted", employee=entry.employee_identifier, position=position)
        return True

    def clear(self) -> None:
        previous = list(self._entries)
        self._entries = []
        try:
            self.medium.remove_item(self.key)
        except StorageError:
            self._after_failure(previous)
            raise
        logger.info("ledger.cleared", key=self.key)

    def _persist(self, previous: List[OvertimeEntry]) -> None:
        payload = json.dumps([self._serialize_entry(e) for e in self._entries], ensure_ascii=False)
        try:
            self.medium.set_item(self.key, payload)
        except StorageError:
            self._after_failure(previous)
            raise

    def _after_failure(self, previous: List[OvertimeEntry]) -> None:
        if self.strict:
            self._entries = previous
        logger.error("ledger.persist_failed", key=self.key, rolled_back=self.strict, entries=len(self._entries))

    @staticmethod
    def _serialize_entry(entry: OvertimeEntry) -> dict:
        payload = asdict(entry)
        for name, value in payload.items():
            if isinstance(value, (date, time)):
                payload[name] = value.isoformat()
        return payload

    @staticmethod
    def _parse_date(value: Optional[str]) -> Optional[date]:
        return date.fromisoformat(value) if value else None

    def _deserialize_entry(self, data: dict) -> OvertimeEntry:
        data = dict(data)
        data["entry_date"] = self._parse_date(data.get("entry_date"))
        data["exit_date"] = self._parse_date(data.get("exit_date"))
        data["entry_time"] = time.fromisoformat(data["entry_time"])
        data["exit_time"] = time.fromisoformat(data["exit_time"])
        data["note"] = data.get("note") or ""
        return OvertimeEntry(**data)
