"""Error taxonomy raised while turning spreadsheets into agenda payloads."""

# purpose: give routes structured, user-readable failures for bad workbooks
# status: active

from __future__ import annotations

from typing import Any, Sequence


class AgendaImportError(RuntimeError):
    """Base error for spreadsheet ingestion."""


class MissingSheetError(AgendaImportError):
    """Raised when a mandatory sheet is absent from the workbook."""

    def __init__(self, sheet_name: str, available: Sequence[str]):
        self.sheet_name = sheet_name
        self.available = list(available)
        super().__init__(
            f'Sheet "{sheet_name}" is missing. Available sheets: {", ".join(self.available)}'
        )


class MissingColumnsError(AgendaImportError):
    """Raised when a sheet lacks required columns."""

    def __init__(self, sheet_name: str, missing: Sequence[str], found: Sequence[str] = ()):
        self.sheet_name = sheet_name
        self.missing = list(missing)
        self.found = [str(column) for column in found]
        super().__init__(
            f'Sheet "{sheet_name}" is missing columns: {", ".join(self.missing)}'
        )


class InvalidCellError(AgendaImportError):
    """Raised when a date or time cell cannot be interpreted."""

    def __init__(self, sheet_name: str, row: int, column: str, value: Any):
        self.sheet_name = sheet_name
        self.row = row
        self.column = column
        self.value = value
        super().__init__(
            f'Sheet "{sheet_name}" row {row}: invalid {column} value "{value}"'
        )


class WorkbookFormatError(AgendaImportError):
    """Raised when uploaded bytes are not a readable workbook."""


class FetchError(AgendaImportError):
    """Raised when a remote spreadsheet cannot be retrieved."""

    INVALID_URL = "invalid_url"
    UNREACHABLE = "unreachable"
    NOT_PUBLIC = "not_public"

    def __init__(self, message: str, *, reason: str):
        self.reason = reason
        super().__init__(message)
