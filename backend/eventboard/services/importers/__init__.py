"""Importer adapters converting agenda spreadsheets into reconciliation payloads."""

# purpose: aggregate workbook importers for agenda and directory ingestion
# status: active

from .errors import (
    AgendaImportError,
    FetchError,
    InvalidCellError,
    MissingColumnsError,
    MissingSheetError,
    WorkbookFormatError,
)
from .excel import XLSX_MEDIA_TYPE, generate_agenda_template, load_agenda_workbook
from .google_sheets import load_google_sheet
from .models import AgendaImportResult
from .workbook import parse_workbook

__all__ = [
    "AgendaImportError",
    "AgendaImportResult",
    "FetchError",
    "InvalidCellError",
    "MissingColumnsError",
    "MissingSheetError",
    "WorkbookFormatError",
    "XLSX_MEDIA_TYPE",
    "generate_agenda_template",
    "load_agenda_workbook",
    "load_google_sheet",
    "parse_workbook",
]
