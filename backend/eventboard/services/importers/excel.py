"""Excel workbook loader and template generator for agenda imports."""

# purpose: read uploaded .xlsx agendas and produce the blank organiser template
# status: active
# depends_on: pandas, openpyxl

from __future__ import annotations

import io

import pandas as pd

from .errors import WorkbookFormatError
from .models import AgendaImportResult
from .workbook import parse_workbook

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

TEMPLATE_SHEETS: dict[str, list[list[str]]] = {
    "Days": [
        ["Day Name", "Date (YYYY-MM-DD)"],
        ["Day 1", "2026-02-11"],
        ["Day 2", "2026-02-12"],
    ],
    "Agenda Slots": [
        ["Day Name", "Slot Title", "Start Time (HH:mm)", "End Time (HH:mm)", "Presenter Name", "Show Presenter (TRUE/FALSE)"],
        ["Day 1", "Opening Ceremony", "09:00", "10:00", "John Doe", "TRUE"],
        ["Day 1", "Keynote Speech", "10:00", "11:00", "Jane Smith", "TRUE"],
        ["Day 2", "Workshop A", "14:00", "16:00", "Alice Brown", "FALSE"],
    ],
    "Experts": [
        ["Name", "Title", "Bio", "LinkedIn URL"],
        ["Jane Doe", "CEO @ Startup", "Entrepreneur and tech enthusiast", "https://linkedin.com/in/janedoe"],
        ["Robert Smith", "Product Manager", "PM with 10 years of experience", "https://linkedin.com/in/robertsmith"],
    ],
    "Companies": [
        ["Company Name", "Founder", "Governorate", "Industry"],
        ["Tech Innovators", "Alice Brown", "Cairo", "Software"],
        ["Green Energy", "Bob Wilson", "Alexandria", "Renewable Energy"],
    ],
}


def read_workbook(content: bytes) -> dict[str, pd.DataFrame]:
    """Read every sheet of an .xlsx payload as untyped frames."""

    if not content:
        raise WorkbookFormatError("Uploaded file is empty")
    try:
        return pd.read_excel(io.BytesIO(content), sheet_name=None, dtype=object, engine="openpyxl")
    except Exception as exc:
        raise WorkbookFormatError("File is not a readable Excel workbook (.xlsx)") from exc


def load_agenda_workbook(content: bytes) -> AgendaImportResult:
    """Parse an uploaded Excel agenda into import records."""

    sheets = read_workbook(content)
    return parse_workbook(sheets, source_format="xlsx")


def generate_agenda_template() -> bytes:
    """Return the example workbook organisers fill in and re-upload."""

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet_name, rows in TEMPLATE_SHEETS.items():
            header, *body = rows
            pd.DataFrame(body, columns=header).to_excel(writer, sheet_name=sheet_name, index=False)
    return buffer.getvalue()
