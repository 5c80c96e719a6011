"""Read-only endpoints backing the public event pages."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from ..database import get_db
from .. import models, schemas
from ..services.record_store import StoreError
from .events import build_full_agenda, get_event_or_404

router = APIRouter(prefix="/api/public", tags=["public"])


@router.get("/events/{event_id}", response_model=schemas.FullAgendaOut)
def public_agenda(event_id: UUID, db: Session = Depends(get_db)):
    event = get_event_or_404(db, event_id)
    try:
        return build_full_agenda(db, event)
    except StoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.get("/events/{event_id}/experts", response_model=List[schemas.ExpertOut])
def public_experts(event_id: UUID, db: Session = Depends(get_db)):
    get_event_or_404(db, event_id)
    return (
        db.query(models.Expert)
        .filter(models.Expert.event_id == event_id)
        .order_by(models.Expert.name.asc())
        .all()
    )


@router.get("/events/{event_id}/companies", response_model=List[schemas.CompanyOut])
def public_companies(event_id: UUID, db: Session = Depends(get_db)):
    get_event_or_404(db, event_id)
    return (
        db.query(models.Company)
        .filter(models.Company.event_id == event_id)
        .order_by(models.Company.name.asc())
        .all()
    )
