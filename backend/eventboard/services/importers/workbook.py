"""Workbook parser converting agenda spreadsheets into plain import records."""

# purpose: validate sheet/column layout and normalise agenda, expert and company rows
# status: active
# depends_on: pandas, backend.eventboard.services.importers.models

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Mapping

import pandas as pd

from ...schemas import normalise_clock
from .errors import InvalidCellError, MissingColumnsError, MissingSheetError
from .models import AgendaImportResult

EXCEL_EPOCH = date(1899, 12, 30)


@dataclass(frozen=True, slots=True)
class ColumnSpec:
    field: str
    label: str
    aliases: tuple[str, ...]
    required: bool = False


DAY_COLUMNS = (
    ColumnSpec("day_name", "Day Name", ("Day Name", "Name", "Day"), required=True),
    ColumnSpec("day_date", "Date", ("Date (YYYY-MM-DD)", "Date"), required=True),
)

SLOT_COLUMNS = (
    ColumnSpec("day_name", "Day Name", ("Day Name", "Day"), required=True),
    ColumnSpec("slot_title", "Slot Title", ("Slot Title", "Title"), required=True),
    ColumnSpec("start_time", "Start Time", ("Start Time (HH:mm)", "Start Time", "Start"), required=True),
    ColumnSpec("end_time", "End Time", ("End Time (HH:mm)", "End Time", "End"), required=True),
    ColumnSpec("presenter_name", "Presenter Name", ("Presenter Name", "Presenter")),
    ColumnSpec("show_presenter", "Show Presenter", ("Show Presenter (TRUE/FALSE)", "Show Presenter")),
)

EXPERT_COLUMNS = (
    ColumnSpec("name", "Name", ("Name", "Full Name"), required=True),
    ColumnSpec("title", "Title", ("Title",)),
    ColumnSpec("bio", "Bio", ("Bio",)),
    ColumnSpec("linkedin_url", "LinkedIn URL", ("LinkedIn URL", "LinkedIn")),
)

COMPANY_COLUMNS = (
    ColumnSpec("name", "Company Name", ("Company Name", "Name", "Startup Name"), required=True),
    ColumnSpec("founder", "Founder", ("Founder", "CEO")),
    ColumnSpec("location", "Location", ("Governorate", "Location", "City")),
    ColumnSpec("industry", "Industry", ("Industry", "Sector")),
)


def _squash(value: Any) -> str:
    return re.sub(r"\s", "", str(value)).lower()


def find_sheet(sheets: Mapping[str, pd.DataFrame], *names: str) -> pd.DataFrame | None:
    """Return the first sheet matching any of ``names`` (case/space-insensitive)."""

    for name in names:
        if name in sheets:
            return sheets[name]
        wanted = _squash(name)
        for sheet_name, frame in sheets.items():
            if _squash(sheet_name) == wanted:
                return frame
    return None


def resolve_columns(
    frame: pd.DataFrame, sheet_name: str, column_specs: tuple[ColumnSpec, ...]
) -> dict[str, Any]:
    """Map ColumnSpec fields to the frame's actual headers, failing on missing required ones."""

    by_key: dict[str, Any] = {}
    for column in frame.columns:
        by_key.setdefault(_squash(column), column)
    resolved: dict[str, Any] = {}
    missing: list[str] = []
    for column_spec in column_specs:
        match = next((by_key[_squash(alias)] for alias in column_spec.aliases if _squash(alias) in by_key), None)
        if match is None and column_spec.required:
            missing.append(column_spec.label)
        resolved[column_spec.field] = match
    if missing:
        raise MissingColumnsError(sheet_name, missing, list(frame.columns))
    return resolved


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _text(value: Any) -> str:
    if _is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _coerce_date(value: Any, sheet: str, row: int) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return EXCEL_EPOCH + timedelta(days=int(value))
    text = str(value).strip()
    for candidate in (text, text[:10]):
        try:
            return date.fromisoformat(candidate)
        except ValueError:
            continue
    for fmt in ("%Y/%m/%d", "%d/%m/%Y", "%d-%m-%Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise InvalidCellError(sheet, row, "Date", value)


def _coerce_clock(value: Any, sheet: str, row: int, column: str) -> str | None:
    if _is_blank(value):
        return None
    if isinstance(value, (datetime, time)):
        return normalise_clock(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool) and 0 <= value < 1:
        minutes = int(round(value * 24 * 60))
        return f"{minutes // 60:02d}:{minutes % 60:02d}"
    text = str(value).strip()
    try:
        return normalise_clock(text)
    except ValueError:
        pass
    for fmt in ("%I:%M %p", "%I:%M%p", "%I %p"):
        try:
            return normalise_clock(datetime.strptime(text.upper(), fmt).time())
        except ValueError:
            continue
    raise InvalidCellError(sheet, row, column, value)


def _coerce_flag(value: Any) -> bool:
    if _is_blank(value):
        return True
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    return str(value).strip().lower() == "true"


def _records(frame: pd.DataFrame, columns: dict[str, Any]):
    """Yield (sheet row number, {field: raw cell}) pairs in sheet order."""

    for offset, record in enumerate(frame.to_dict(orient="records")):
        row = {field: (record.get(column) if column is not None else None) for field, column in columns.items()}
        yield offset + 2, row


def _parse_days(frame: pd.DataFrame, columns: dict[str, Any]) -> list[dict[str, Any]]:
    days: list[dict[str, Any]] = []
    for row_number, raw in _records(frame, columns):
        name = _text(raw["day_name"])
        if not name or _is_blank(raw["day_date"]):
            continue
        days.append({"day_name": name, "day_date": _coerce_date(raw["day_date"], "Days", row_number)})
    return days


def _parse_slots(frame: pd.DataFrame, columns: dict[str, Any]) -> list[dict[str, Any]]:
    slots: list[dict[str, Any]] = []
    for row_number, raw in _records(frame, columns):
        day_name = _text(raw["day_name"])
        title = _text(raw["slot_title"])
        if not day_name or not title:
            continue
        slots.append(
            {
                "day_name": day_name,
                "slot_title": title,
                "start_time": _coerce_clock(raw["start_time"], "Agenda Slots", row_number, "Start Time"),
                "end_time": _coerce_clock(raw["end_time"], "Agenda Slots", row_number, "End Time"),
                "presenter_name": _text(raw["presenter_name"]),
                "show_presenter": _coerce_flag(raw["show_presenter"]),
            }
        )
    return slots


def _parse_directory(frame: pd.DataFrame, columns: dict[str, Any]) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for _, raw in _records(frame, columns):
        record = {field: _text(value) for field, value in raw.items()}
        if record["name"]:
            rows.append(record)
    return rows


def parse_workbook(sheets: Mapping[str, pd.DataFrame], *, source_format: str = "xlsx") -> AgendaImportResult:
    """Validate every relevant sheet, then convert them into import records.

    Days and Agenda Slots are mandatory; Experts and Companies are optional
    and yield empty sequences when absent. Column validation for all present
    sheets completes before any row is converted, so a malformed workbook
    never produces partial output.
    """

    available = list(sheets.keys())
    days_frame = find_sheet(sheets, "Days")
    if days_frame is None:
        raise MissingSheetError("Days", available)
    slots_frame = find_sheet(sheets, "Agenda Slots", "Slots", "Agenda")
    if slots_frame is None:
        raise MissingSheetError("Agenda Slots", available)
    experts_frame = find_sheet(sheets, "Experts")
    companies_frame = find_sheet(sheets, "Companies", "Startups")

    day_columns = resolve_columns(days_frame, "Days", DAY_COLUMNS)
    slot_columns = resolve_columns(slots_frame, "Agenda Slots", SLOT_COLUMNS)
    expert_columns = (
        resolve_columns(experts_frame, "Experts", EXPERT_COLUMNS) if experts_frame is not None else None
    )
    company_columns = (
        resolve_columns(companies_frame, "Companies", COMPANY_COLUMNS) if companies_frame is not None else None
    )

    return AgendaImportResult(
        days=_parse_days(days_frame, day_columns),
        slots=_parse_slots(slots_frame, slot_columns),
        experts=_parse_directory(experts_frame, expert_columns) if expert_columns is not None else [],
        companies=_parse_directory(companies_frame, company_columns) if company_columns is not None else [],
        source_format=source_format,
        sheet_names=available,
    )
