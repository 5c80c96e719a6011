"""Google Sheets importer downloading a public sheet as an xlsx export."""

# purpose: let organisers sync an agenda kept in Google Sheets without a manual upload
# status: active
# depends_on: requests, backend.eventboard.services.importers.excel

from __future__ import annotations

import logging
import os
import re

import requests

from .errors import FetchError
from .excel import read_workbook
from .models import AgendaImportResult
from .workbook import parse_workbook

logger = logging.getLogger(__name__)

EXPORT_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/export?format=xlsx"
FETCH_TIMEOUT = float(os.getenv("GOOGLE_SHEETS_TIMEOUT", "15"))
_SPREADSHEET_ID = re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)")

NOT_PUBLIC_MESSAGE = (
    'Failed to fetch Google Sheet. Ensure it is shared as "Anyone with the link can view".'
)


def extract_spreadsheet_id(url: str) -> str:
    match = _SPREADSHEET_ID.search(url or "")
    if not match:
        raise FetchError(
            "Invalid Google Sheets URL. Please ensure it is a valid /spreadsheets/d/ link.",
            reason=FetchError.INVALID_URL,
        )
    return match.group(1)


def fetch_google_sheet(url: str) -> bytes:
    """Download the xlsx export of a shared spreadsheet."""

    spreadsheet_id = extract_spreadsheet_id(url)
    export_url = EXPORT_URL.format(spreadsheet_id=spreadsheet_id)
    try:
        resp = requests.get(export_url, timeout=FETCH_TIMEOUT)
    except requests.RequestException as exc:
        logger.warning("Google Sheet %s unreachable: %s", spreadsheet_id, exc)
        raise FetchError(
            f"Could not reach Google Sheets: {str(exc)[:200]}",
            reason=FetchError.UNREACHABLE,
        ) from exc
    if resp.status_code in (401, 403, 404):
        raise FetchError(NOT_PUBLIC_MESSAGE, reason=FetchError.NOT_PUBLIC)
    if resp.status_code != 200:
        raise FetchError(
            f"Google Sheets export failed with status {resp.status_code}",
            reason=FetchError.UNREACHABLE,
        )
    # A private sheet answers 200 with the sign-in page instead of the workbook
    if resp.headers.get("content-type", "").startswith("text/html"):
        raise FetchError(NOT_PUBLIC_MESSAGE, reason=FetchError.NOT_PUBLIC)
    return resp.content


def load_google_sheet(url: str) -> AgendaImportResult:
    """Fetch and parse a public Google Sheet into import records."""

    content = fetch_google_sheet(url)
    return parse_workbook(read_workbook(content), source_format="google_sheets")
