from datetime import date, time
from pathlib import Path

import pytest

from overtime.models import EmployeeRecord, OvertimeEntry
from overtime.roster import RosterIndex
from overtime.storage import JsonFileStorage, LedgerStore

SUPERVISOR = "JEFE DE OPERACIONES"

ROSTER_CSV = """JEFE , COORDINADOR ,APELLIDOS Y NOMBRES,DNI/CE,CODIGO,PUESTO
LIDER NORTE,ROSA PEREZ,"QUISPE MAMANI, JUAN",12345678,C001,OPERARIO
LIDER NORTE,ROSA PEREZ,TORRES DIAZ ANA,23456789,C002,AUXILIAR

LIDER SUR,LUIS GOMEZ,FLORES RAMOS PEDRO,34567890,C003,OPERARIO
LIDER SUR,LUIS GOMEZ,CHAVEZ LEON MARIA,45678901,C004,SUPERVISORA
"""


@pytest.fixture
def roster_csv() -> str:
    return ROSTER_CSV


@pytest.fixture
def roster_file(tmp_path) -> Path:
    path = tmp_path / "trabajadores_maestro.csv"
    path.write_text(ROSTER_CSV, encoding="utf-8")
    return path


@pytest.fixture
def roster() -> RosterIndex:
    return RosterIndex.from_text(ROSTER_CSV)


@pytest.fixture
def ledger(tmp_path) -> LedgerStore:
    store = LedgerStore(JsonFileStorage(tmp_path / "storage.json"))
    store.load()
    return store


def make_entry(identifier: str = "12345678", day: int = 3, note: str = "") -> OvertimeEntry:
    return OvertimeEntry(
        registered_by="ROSA PEREZ",
        employee_identifier=identifier,
        employee_full_name="QUISPE MAMANI, JUAN",
        employee_code="C001",
        employee_position="OPERARIO",
        entry_date=date(2024, 6, day),
        entry_time=time(18, 0),
        exit_date=date(2024, 6, day),
        exit_time=time(21, 30),
        note=note,
    )


def make_employee(identifier: str, coordinator: str, name: str = "EMPLEADO") -> EmployeeRecord:
    return EmployeeRecord(
        reports_to_leader="LIDER",
        reports_to_coordinator=coordinator,
        full_name=name,
        identifier=identifier,
        code=f"C{identifier}",
        position="OPERARIO",
    )
