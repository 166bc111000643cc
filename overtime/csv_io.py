from __future__ import annotations
import csv
import io
from pathlib import Path
from typing import Dict, List, Optional

import httpx

from .core.logging import get_logger
from .errors import LoadError
from .models import ROSTER_COLUMNS, EmployeeRecord

logger = get_logger(__name__)


def parse_rows(text: str) -> List[List[str]]:
    """Split CSV text into rows of raw fields, header included.

    Quoted fields may hold commas, doubled quotes and line breaks. Blank lines
    are dropped. A line the reader cannot parse is skipped with a warning.
    """
    reader = csv.reader(io.StringIO(text), delimiter=",", quotechar='"', doublequote=True)
    rows: List[List[str]] = []
    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            logger.warning("csv.row_unreadable", row=reader.line_num, error=str(exc))
            continue
        if any(field.strip() for field in row):
            rows.append(row)
    return rows


def _well_formed(rows: List[List[str]]) -> List[List[str]]:
    if not rows:
        return []
    header, *body = rows
    kept = [[field.strip() for field in header]]
    for line_number, row in enumerate(body, start=2):
        if len(row) != len(header):
            logger.warning(
                "csv.row_skipped",
                row=line_number,
                expected_fields=len(header),
                found_fields=len(row),
            )
            continue
        kept.append([field.strip() for field in row])
    return kept


def parse_records(text: str) -> List[Dict[str, str]]:
    rows = _well_formed(parse_rows(text))
    if not rows:
        return []
    header, *body = rows
    return [dict(zip(header, row)) for row in body]


def parse_roster(text: str) -> List[EmployeeRecord]:
    """Map roster rows to records by column position; the header is discarded."""
    rows = _well_formed(parse_rows(text))
    if not rows:
        return []
    header, *body = rows
    if len(header) != len(ROSTER_COLUMNS):
        logger.warning("roster.unexpected_header", header=header, expected_fields=len(ROSTER_COLUMNS))
        return []
    return [EmployeeRecord(**dict(zip(ROSTER_COLUMNS, row))) for row in body]


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def fetch_text(source: str, client: Optional[httpx.AsyncClient] = None) -> str:
    if not _is_url(source):
        path = Path(source)
        try:
            return path.read_text(encoding="utf-8-sig")
        except FileNotFoundError as exc:
            raise LoadError(f"Roster file not found: {path}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise LoadError(f"Roster file could not be read: {path} ({exc})") from exc

    owns_client = client is None
    http = client or httpx.AsyncClient()
    try:
        response = await http.get(source)
    except httpx.HTTPError as exc:
        raise LoadError(f"Roster request to {source} failed: {exc}") from exc
    finally:
        if owns_client:
            await http.aclose()
    if not response.is_success:
        raise LoadError(f"HTTP error! status: {response.status_code}")
    return response.text


async def load_roster_records(source: str, client: Optional[httpx.AsyncClient] = None) -> List[EmployeeRecord]:
    text = await fetch_text(source, client=client)
    records = parse_roster(text)
    logger.info("roster.parsed", source=source, employees=len(records))
    return records
