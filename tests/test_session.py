import asyncio
from datetime import date, time

import pytest
from conftest import SUPERVISOR

from overtime.audit import AuditTrail
from overtime.errors import EntryValidationError, LoadError, NothingToExportError, RejectionReason
from overtime.session import OvertimeSession, SessionListener
from overtime.storage import JsonFileStorage, LedgerStore
from overtime.validation import EntryCandidate


class Recorder(SessionListener):
    def __init__(self):
        self.events = []

    def on_roster_loaded(self, error):
        self.events.append(("roster_loaded", error))

    def on_authorities_changed(self, authorities):
        self.events.append(("authorities", authorities))

    def on_candidates_changed(self, candidates):
        self.events.append(("candidates", [c.identifier for c in candidates]))

    def on_entry_accepted(self, entry):
        self.events.append(("accepted", entry.employee_identifier))

    def on_entry_rejected(self, reason):
        self.events.append(("rejected", reason))

    def on_ledger_changed(self, entries):
        self.events.append(("ledger", len(entries)))

    def names(self):
        return [name for name, _ in self.events]


def build_session(tmp_path, roster_source=None, listeners=()) -> OvertimeSession:
    ledger = LedgerStore(JsonFileStorage(tmp_path / "storage.json"))
    return OvertimeSession(
        ledger,
        supervisor=SUPERVISOR,
        designated_coordinators=[SUPERVISOR],
        roster_source=roster_source,
        listeners=listeners,
    )


def candidate_for(session, identifier="23456789", authority="ROSA PEREZ", **interval) -> EntryCandidate:
    employee = session.lookup(identifier, authority)
    return EntryCandidate.for_employee(
        authority,
        employee,
        entry_date=interval.get("entry_date", date(2024, 6, 3)),
        entry_time=interval.get("entry_time", time(18, 0)),
        exit_time=interval.get("exit_time", time(20, 0)),
    )


def test_roster_unavailable_until_loaded(tmp_path, roster_file):
    session = build_session(tmp_path, roster_source=str(roster_file))

    assert session.authorities() == []
    assert session.candidates(SUPERVISOR) == []

    assert asyncio.run(session.load_roster()) is True
    assert session.roster_ready
    assert session.authorities() == [SUPERVISOR, "LUIS GOMEZ", "ROSA PEREZ"]


def test_failed_roster_load_leaves_session_inert(tmp_path):
    recorder = Recorder()
    session = build_session(tmp_path, roster_source=str(tmp_path / "missing.csv"), listeners=[recorder])

    assert asyncio.run(session.load_roster()) is False

    assert not session.roster_ready
    assert len(session.roster) == 0
    assert isinstance(session.roster_error, LoadError)
    assert recorder.events == [("roster_loaded", session.roster_error)]
    assert session.authorities() == []


def test_select_authority_and_search_emit_candidates(tmp_path, roster_file):
    recorder = Recorder()
    session = build_session(tmp_path, roster_source=str(roster_file), listeners=[recorder])
    asyncio.run(session.load_roster())

    session.select_authority("LUIS GOMEZ")
    session.search("maria")

    assert recorder.events[-2:] == [
        ("candidates", ["34567890", "45678901"]),
        ("candidates", ["45678901"]),
    ]


def test_lookup_respects_selected_authority(tmp_path, roster_file):
    session = build_session(tmp_path, roster_source=str(roster_file))
    asyncio.run(session.load_roster())
    session.select_authority("ROSA PEREZ")

    assert session.lookup("23456789").full_name == "TORRES DIAZ ANA"
    assert session.lookup("34567890") is None
    assert session.lookup("34567890", SUPERVISOR).full_name == "FLORES RAMOS PEDRO"


def test_submit_accepts_and_persists(tmp_path, roster_file):
    recorder = Recorder()
    session = build_session(tmp_path, roster_source=str(roster_file), listeners=[recorder])
    asyncio.run(session.load_roster())

    entry = session.submit(candidate_for(session))

    assert session.entries() == [entry]
    assert recorder.events[-2:] == [("accepted", "23456789"), ("ledger", 1)]

    restarted = build_session(tmp_path)
    assert restarted.init() == [entry]


def test_submit_rejection_emits_reason(tmp_path, roster_file):
    recorder = Recorder()
    session = build_session(tmp_path, roster_source=str(roster_file), listeners=[recorder])
    asyncio.run(session.load_roster())

    with pytest.raises(EntryValidationError):
        session.submit(candidate_for(session, exit_time=time(17, 0)))

    assert recorder.events[-1] == ("rejected", RejectionReason.EXIT_NOT_AFTER_ENTRY)
    assert session.entries() == []


def test_delete_and_clear(tmp_path, roster_file):
    session = build_session(tmp_path, roster_source=str(roster_file))
    asyncio.run(session.load_roster())
    first = session.submit(candidate_for(session))
    second = session.submit(candidate_for(session, identifier="12345678", entry_time=time(19, 0)))

    assert session.delete(first) is True
    assert session.delete(first) is False
    assert session.entries() == [second]

    session.clear()

    assert session.entries() == []
    assert build_session(tmp_path).init() == []


def test_init_with_unreadable_storage_starts_empty(tmp_path):
    (tmp_path / "storage.json").write_text("not json", encoding="utf-8")
    session = build_session(tmp_path)

    assert session.init() == []


def test_export_requires_entries(tmp_path):
    session = build_session(tmp_path)
    session.init()

    with pytest.raises(NothingToExportError):
        session.export_csv()


def test_reset_drops_memory_but_keeps_persisted_ledger(tmp_path, roster_file):
    session = build_session(tmp_path, roster_source=str(roster_file))
    asyncio.run(session.load_roster())
    entry = session.submit(candidate_for(session))
    session.select_authority("ROSA PEREZ")

    session.reset()

    assert not session.roster_ready
    assert session.selected_authority is None
    assert session.entries() == []
    assert session.init() == [entry]


def test_audit_trail_records_ledger_actions(tmp_path, roster_file):
    audit = AuditTrail(tmp_path / "audit.jsonl")
    session = build_session(tmp_path, roster_source=str(roster_file), listeners=[audit])
    asyncio.run(session.load_roster())

    entry = session.submit(candidate_for(session))
    with pytest.raises(EntryValidationError):
        session.submit(candidate_for(session, authority="LUIS GOMEZ", identifier="34567890", exit_time=time(9, 0)))
    session.export_csv()
    session.delete(entry)
    session.clear()

    actions = [record["action"] for record in audit.read()]
    assert actions == ["roster-loaded", "entry-accepted", "entry-rejected", "export", "entry-deleted", "ledger-cleared"]
    assert audit.read()[1]["entry"] == "2024-06-03T18:00:00"
    assert all("timestamp" in record for record in audit.read())


def test_roster_with_oversized_field_still_loads(tmp_path, roster_csv):
    path = tmp_path / "trabajadores_maestro.csv"
    oversized = "LIDER SUR,LUIS GOMEZ," + "X" * 200_000 + ",99999999,C999,OPERARIO\n"
    path.write_text(roster_csv + oversized, encoding="utf-8")
    recorder = Recorder()
    session = build_session(tmp_path, roster_source=str(path), listeners=[recorder])

    assert asyncio.run(session.load_roster()) is True

    assert len(session.roster) == 4
    assert session.roster.find_by_identifier("99999999") is None
    assert recorder.events[0] == ("roster_loaded", None)
