from __future__ import annotations

import csv
import io
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font

from .errors import NothingToExportError
from .models import OvertimeEntry

EXPORT_PREFIX = "informe_horas_extras"
WORKBOOK_PLACEHOLDER = "-"
SHEET_TITLE = "Horas Extras"

EXPORT_COLUMNS = [
    "registered_by",
    "employee_identifier",
    "employee_full_name",
    "employee_code",
    "employee_position",
    "entry_date",
    "entry_time",
    "exit_date",
    "exit_time",
    "note",
]

EXPORT_HEADERS = [
    "QUIEN REGISTRA LA NOVEDAD",
    "DNI/CE",
    "APELLIDOS Y NOMBRES",
    "CODIGO",
    "PUESTO",
    "FECHA INGRESO",
    "INGRESO",
    "FECHA SALIDA",
    "SALIDA",
    "OBSERVACION DE LA NOVEDAD",
]


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, time):
        if value.second or value.microsecond:
            return value.isoformat()
        return value.strftime("%H:%M")
    return str(value)


def _header_row(columns: Sequence[str], headers: Optional[Sequence[str]]) -> List[str]:
    if headers is None or len(headers) != len(columns):
        return list(columns)
    return list(headers)


def _require_entries(entries: Sequence[OvertimeEntry]) -> List[OvertimeEntry]:
    entries = list(entries)
    if not entries:
        raise NothingToExportError()
    return entries


def format_csv(
    entries: Sequence[OvertimeEntry],
    columns: Sequence[str] = EXPORT_COLUMNS,
    headers: Optional[Sequence[str]] = EXPORT_HEADERS,
) -> str:
    entries = _require_entries(entries)
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(_header_row(columns, headers))
    for entry in entries:
        writer.writerow([_stringify(getattr(entry, column, None)) for column in columns])
    return buffer.getvalue()


def build_workbook(
    entries: Sequence[OvertimeEntry],
    columns: Sequence[str] = EXPORT_COLUMNS,
    headers: Optional[Sequence[str]] = EXPORT_HEADERS,
) -> bytes:
    entries = _require_entries(entries)
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append(_header_row(columns, headers))
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for entry in entries:
        ws.append([_stringify(getattr(entry, column, None)) or WORKBOOK_PLACEHOLDER for column in columns])

    for column_cells in ws.columns:
        width = max(len(str(cell.value or "")) for cell in column_cells)
        ws.column_dimensions[column_cells[0].column_letter].width = min(width + 2, 60)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def export_filename(extension: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{EXPORT_PREFIX}_{today.isoformat()}.{extension.lstrip('.')}"


def export_report(entries: Sequence[OvertimeEntry], output_path: Path) -> Path:
    suffix = output_path.suffix.lower()
    if suffix == ".csv":
        content = format_csv(entries).encode("utf-8-sig")
    elif suffix == ".xlsx":
        content = build_workbook(entries)
    else:
        raise ValueError("Unsupported export format. Use .csv or .xlsx")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(content)
    return output_path
