from __future__ import annotations
import argparse
import asyncio
import sys
from datetime import date, time
from pathlib import Path

from .audit import AuditTrail
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .errors import OvertimeError
from .exporter import export_filename
from .session import OvertimeSession
from .validation import EntryCandidate
from .views import format_employees, format_ledger


def settings_from_args(args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.roster:
        overrides["roster_source"] = args.roster
    if args.storage:
        overrides["storage_path"] = Path(args.storage)
    if args.audit_log:
        overrides["audit_log_path"] = Path(args.audit_log)
    return get_settings().model_copy(update=overrides)


def session_from_args(args: argparse.Namespace, with_roster: bool = True) -> OvertimeSession:
    settings = settings_from_args(args)
    listeners = [AuditTrail(settings.audit_log_path)] if settings.audit_log_path else []
    session = OvertimeSession.from_settings(settings, listeners=listeners)
    session.init()
    if with_roster and not asyncio.run(session.load_roster()):
        raise OvertimeError(f"Could not load the employee roster: {session.roster_error}")
    return session


def parse_date(value: str) -> date:
    return date.fromisoformat(value)


def parse_time(value: str) -> time:
    return time.fromisoformat(value)


def cmd_authorities(args: argparse.Namespace) -> None:
    session = session_from_args(args)
    for authority in session.authorities():
        print(authority)


def cmd_employees(args: argparse.Namespace) -> None:
    session = session_from_args(args)
    session.select_authority(args.authority)
    print(format_employees(session.search(args.search)))


def cmd_lookup(args: argparse.Namespace) -> None:
    session = session_from_args(args)
    record = session.lookup(args.identifier, args.authority)
    if record is None:
        raise OvertimeError(f"No employee {args.identifier} for {args.authority}")
    print(format_employees([record]))


def cmd_add(args: argparse.Namespace) -> None:
    session = session_from_args(args)
    # Fill the employee fields from the roster, as the form's autocomplete does;
    # scoping is enforced by the validator.
    employee = session.roster.find_by_identifier(args.identifier)
    candidate = EntryCandidate(
        registered_by=args.authority,
        employee_identifier=args.identifier,
        employee_full_name=employee.full_name if employee else "",
        employee_code=employee.code if employee else "",
        employee_position=employee.position if employee else "",
        entry_date=parse_date(args.date) if args.date else date.today(),
        entry_time=parse_time(args.entry_time),
        exit_date=parse_date(args.exit_date) if args.exit_date else None,
        exit_time=parse_time(args.exit_time),
        note=args.note,
    )
    entry = session.submit(candidate)
    print(f"Registered overtime for {entry.employee_full_name} ({entry.employee_identifier}) {entry.entry_moment:%Y-%m-%d %H:%M} - {entry.exit_moment:%Y-%m-%d %H:%M}")


def cmd_list(args: argparse.Namespace) -> None:
    session = session_from_args(args, with_roster=False)
    print(format_ledger(session.entries()))


def cmd_delete(args: argparse.Namespace) -> None:
    session = session_from_args(args, with_roster=False)
    entries = session.entries()
    if not 1 <= args.number <= len(entries):
        raise OvertimeError(f"No entry number {args.number}; the ledger has {len(entries)} entries")
    entry = entries[args.number - 1]
    if not session.delete(entry):
        raise OvertimeError("The entry could not be found in the ledger")
    print(f"Deleted entry {args.number} ({entry.employee_full_name})")


def cmd_clear(args: argparse.Namespace) -> None:
    if not args.yes:
        raise OvertimeError("Refusing to delete every entry without --yes")
    session = session_from_args(args, with_roster=False)
    session.clear()
    print("All overtime entries have been deleted.")


def cmd_export(args: argparse.Namespace) -> None:
    session = session_from_args(args, with_roster=False)
    path = Path(args.path) if args.path else Path(export_filename(args.format))
    session.export_file(path)
    print(f"Exported {len(session.entries())} entries to {path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Overtime registration CLI")
    parser.add_argument("--roster", help="Roster CSV path or URL")
    parser.add_argument("--storage", help="Local storage file")
    parser.add_argument("--audit-log", help="Audit log file (JSON lines)")
    sub = parser.add_subparsers(dest="command", required=True)

    authorities = sub.add_parser("authorities", help="List coordinators who can register overtime")
    authorities.set_defaults(func=cmd_authorities)

    employees = sub.add_parser("employees", help="List employees a coordinator may register")
    employees.add_argument("authority")
    employees.add_argument("--search", help="Case-insensitive part of the employee name")
    employees.set_defaults(func=cmd_employees)

    lookup = sub.add_parser("lookup", help="Show one employee within a coordinator's scope")
    lookup.add_argument("authority")
    lookup.add_argument("identifier", help="DNI/CE")
    lookup.set_defaults(func=cmd_lookup)

    add = sub.add_parser("add", help="Register an overtime entry")
    add.add_argument("authority")
    add.add_argument("identifier", help="DNI/CE")
    add.add_argument("entry_time", help="HH:MM")
    add.add_argument("exit_time", help="HH:MM")
    add.add_argument("--date", help="Entry date (YYYY-MM-DD), defaults to today")
    add.add_argument("--exit-date", help="Exit date when the interval crosses midnight")
    add.add_argument("--note")
    add.set_defaults(func=cmd_add)

    list_cmd = sub.add_parser("list", help="Show the registered entries")
    list_cmd.set_defaults(func=cmd_list)

    delete = sub.add_parser("delete", help="Delete one entry by its number in the list")
    delete.add_argument("number", type=int)
    delete.set_defaults(func=cmd_delete)

    clear = sub.add_parser("clear", help="Delete every registered entry")
    clear.add_argument("--yes", action="store_true", help="Confirm the deletion")
    clear.set_defaults(func=cmd_clear)

    export = sub.add_parser("export", help="Export entries to CSV or XLSX")
    export.add_argument("path", nargs="?", help="Output file (.csv or .xlsx)")
    export.add_argument("--format", choices=["csv", "xlsx"], default="csv")
    export.set_defaults(func=cmd_export)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(get_settings().log_level, json_output=False)
    try:
        args.func(args)
    except (OvertimeError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
