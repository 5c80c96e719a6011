from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile
from sqlalchemy.orm import Session
from uuid import UUID
import logging

from ..database import get_db
from .. import schemas
from ..services.importers import (
    AgendaImportError,
    FetchError,
    InvalidCellError,
    MissingColumnsError,
    MissingSheetError,
    XLSX_MEDIA_TYPE,
    generate_agenda_template,
    load_agenda_workbook,
    load_google_sheet,
)
from ..services.reconciliation import reconcile_agenda_data
from ..services.record_store import SqlRecordStore, StoreError
from .events import get_event_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["agenda-import"])


def _import_error_detail(exc: AgendaImportError) -> dict:
    detail = {"message": str(exc)}
    if isinstance(exc, MissingSheetError):
        detail.update(sheet=exc.sheet_name, available=exc.available)
    elif isinstance(exc, MissingColumnsError):
        detail.update(sheet=exc.sheet_name, missing=exc.missing, found=exc.found)
    elif isinstance(exc, InvalidCellError):
        detail.update(sheet=exc.sheet_name, row=exc.row, column=exc.column, value=str(exc.value))
    elif isinstance(exc, FetchError):
        detail.update(reason=exc.reason)
    return detail


def _raise_for_import(exc: AgendaImportError):
    status = 400
    if isinstance(exc, FetchError) and exc.reason == FetchError.UNREACHABLE:
        status = 502
    logger.warning("Agenda import rejected: %s", exc)
    raise HTTPException(status_code=status, detail=_import_error_detail(exc)) from exc


def _reconcile(db: Session, event_id: UUID, parsed) -> dict:
    try:
        return reconcile_agenda_data(SqlRecordStore(db), event_id, parsed)
    except StoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.get("/agenda/template")
def download_template():
    headers = {"Content-Disposition": "attachment; filename=agenda_template.xlsx"}
    return Response(content=generate_agenda_template(), media_type=XLSX_MEDIA_TYPE, headers=headers)


@router.post("/agenda/parse")
async def parse_agenda(file: UploadFile = File(...)):
    """Parse an uploaded workbook without touching the store."""
    content = await file.read()
    try:
        result = load_agenda_workbook(content)
    except AgendaImportError as exc:
        _raise_for_import(exc)
    return {
        "summary": result.summary(),
        "sheets": result.sheet_names,
        "data": result.to_payload().model_dump(mode="json"),
    }


@router.post("/events/{event_id}/agenda/import", response_model=schemas.ReconciliationResult)
async def import_agenda(event_id: UUID, file: UploadFile = File(...), db: Session = Depends(get_db)):
    get_event_or_404(db, event_id)
    content = await file.read()
    try:
        result = load_agenda_workbook(content)
    except AgendaImportError as exc:
        _raise_for_import(exc)
    return _reconcile(db, event_id, result)


@router.post("/events/{event_id}/agenda/import/google-sheet", response_model=schemas.ReconciliationResult)
def import_google_sheet(
    event_id: UUID,
    payload: schemas.GoogleSheetImportRequest,
    db: Session = Depends(get_db),
):
    get_event_or_404(db, event_id)
    try:
        result = load_google_sheet(payload.url)
    except AgendaImportError as exc:
        _raise_for_import(exc)
    return _reconcile(db, event_id, result)


@router.post("/events/{event_id}/agenda/reconcile", response_model=schemas.ReconciliationResult)
def reconcile_payload(
    event_id: UUID,
    payload: schemas.AgendaImportPayload,
    db: Session = Depends(get_db),
):
    get_event_or_404(db, event_id)
    return _reconcile(db, event_id, payload)
