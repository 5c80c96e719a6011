from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session
from typing import Any, Dict, Literal, Optional
from uuid import UUID
import os

from slowapi import Limiter
from slowapi.util import get_remote_address

from ..database import get_db
from .. import schemas
from ..services import submissions
from ..services.forms import FormValidationError
from ..services.record_store import StoreError
from .events import get_event_or_404

limiter = Limiter(key_func=get_remote_address)
testing = os.getenv("TESTING") == "1"
SUBMISSION_RATE_LIMIT = os.getenv("SUBMISSION_RATE_LIMIT", "10/minute")


def rate_limit(limit: str):
    if testing:
        def wrapper(func):
            return func
        return wrapper
    return limiter.limit(limit)


router = APIRouter(prefix="/api", tags=["submissions"])

_OUT = {
    "company": schemas.CompanySubmissionOut,
    "expert": schemas.ExpertSubmissionOut,
}


def _serialize(entity_type: str, row) -> dict:
    return _OUT[entity_type].model_validate(row).model_dump(mode="json")


def _handle(exc: Exception):
    if isinstance(exc, submissions.SubmissionNotFound):
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if isinstance(exc, submissions.SubmissionStateError):
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    if isinstance(exc, FormValidationError):
        raise HTTPException(status_code=422, detail={"message": "Validation failed", "errors": exc.errors}) from exc
    if isinstance(exc, StoreError):
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/events/{event_id}/submissions/{entity_type}")
@rate_limit(SUBMISSION_RATE_LIMIT)
def submit_registration(
    request: Request,
    event_id: UUID,
    entity_type: schemas.EntityType,
    data: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
):
    get_event_or_404(db, event_id)
    try:
        row = submissions.submit_registration(db, event_id, entity_type, data)
    except (submissions.SubmissionError, FormValidationError, StoreError) as exc:
        _handle(exc)
    return _serialize(entity_type, row)


@router.get("/events/{event_id}/submissions/{entity_type}")
def list_submissions(
    event_id: UUID,
    entity_type: schemas.EntityType,
    status: Literal["all", "pending", "approved", "rejected"] = "all",
    db: Session = Depends(get_db),
):
    get_event_or_404(db, event_id)
    rows = submissions.list_submissions(db, event_id, entity_type, status)
    return [_serialize(entity_type, row) for row in rows]


@router.get("/events/{event_id}/submissions/{entity_type}/export")
def export_submissions(
    event_id: UUID,
    entity_type: schemas.EntityType,
    status: Literal["all", "pending", "approved", "rejected"] = "all",
    db: Session = Depends(get_db),
):
    get_event_or_404(db, event_id)
    content = submissions.export_submissions_csv(db, event_id, entity_type, status)
    headers = {
        "Content-Disposition": f"attachment; filename={entity_type}_submissions.csv"
    }
    return Response(content=content, media_type="text/csv", headers=headers)


@router.post("/submissions/{entity_type}/{submission_id}/approve")
def approve_submission(entity_type: schemas.EntityType, submission_id: UUID, db: Session = Depends(get_db)):
    try:
        row = submissions.approve_submission(db, entity_type, submission_id)
    except (submissions.SubmissionError, StoreError) as exc:
        _handle(exc)
    return _serialize(entity_type, row)


@router.post("/submissions/{entity_type}/{submission_id}/reject")
def reject_submission(
    entity_type: schemas.EntityType,
    submission_id: UUID,
    payload: Optional[schemas.SubmissionReject] = None,
    db: Session = Depends(get_db),
):
    reason = payload.reason if payload else None
    try:
        row = submissions.reject_submission(db, entity_type, submission_id, reason)
    except (submissions.SubmissionError, StoreError) as exc:
        _handle(exc)
    return _serialize(entity_type, row)
