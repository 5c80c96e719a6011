from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from ..database import get_db
from .. import models, schemas
from ..services import cascade
from ..services.record_store import SqlRecordStore, StoreError

router = APIRouter(prefix="/api/events", tags=["events"])


def get_event_or_404(db: Session, event_id: UUID) -> models.Event:
    event = db.get(models.Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


def build_full_agenda(db: Session, event: models.Event) -> schemas.FullAgendaOut:
    store = SqlRecordStore(db)
    days = store.list_days(event.event_id)
    slots = store.list_slots(day.day_id for day in days)
    by_day: dict = {}
    for slot in slots:
        by_day.setdefault(slot.day_id, []).append(slot)
    return schemas.FullAgendaOut(
        event=schemas.EventOut.model_validate(event),
        days=[
            schemas.DayWithSlots(
                **schemas.DayOut.model_validate(day).model_dump(),
                slots=[schemas.SlotOut.model_validate(s) for s in by_day.get(day.day_id, [])],
            )
            for day in days
        ],
        experts=[schemas.ExpertOut.model_validate(e) for e in store.list_experts(event.event_id)],
        companies=[schemas.CompanyOut.model_validate(c) for c in store.list_companies(event.event_id)],
    )


@router.get("", response_model=List[schemas.EventOut])
def list_events(db: Session = Depends(get_db)):
    return db.query(models.Event).order_by(models.Event.created_at.desc()).all()


@router.post("", response_model=schemas.EventOut)
def create_event(payload: schemas.EventCreate, db: Session = Depends(get_db)):
    event = models.Event(**payload.model_dump())
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


@router.get("/{event_id}", response_model=schemas.EventOut)
def get_event(event_id: UUID, db: Session = Depends(get_db)):
    return get_event_or_404(db, event_id)


@router.put("/{event_id}", response_model=schemas.EventOut)
def update_event(event_id: UUID, payload: schemas.EventUpdate, db: Session = Depends(get_db)):
    event = get_event_or_404(db, event_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(event, key, value)
    db.commit()
    db.refresh(event)
    return event


@router.delete("/{event_id}")
def delete_event(event_id: UUID, db: Session = Depends(get_db)):
    get_event_or_404(db, event_id)
    try:
        cascade.delete_event(SqlRecordStore(db), event_id)
    except StoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {"success": True}


@router.get("/{event_id}/agenda", response_model=schemas.FullAgendaOut)
def get_full_agenda(event_id: UUID, db: Session = Depends(get_db)):
    event = get_event_or_404(db, event_id)
    try:
        return build_full_agenda(db, event)
    except StoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
