from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from ..database import get_db
from .. import models, schemas
from ..services import cascade
from ..services.record_store import SqlRecordStore, StoreError
from .events import get_event_or_404

router = APIRouter(prefix="/api", tags=["agenda"])


def _get_day(db: Session, day_id: UUID) -> models.EventDay:
    day = db.get(models.EventDay, day_id)
    if not day:
        raise HTTPException(status_code=404, detail="Day not found")
    return day


def _get_slot(db: Session, slot_id: UUID) -> models.AgendaSlot:
    slot = db.get(models.AgendaSlot, slot_id)
    if not slot:
        raise HTTPException(status_code=404, detail="Slot not found")
    return slot


@router.get("/events/{event_id}/days", response_model=List[schemas.DayOut])
def list_days(event_id: UUID, db: Session = Depends(get_db)):
    get_event_or_404(db, event_id)
    return SqlRecordStore(db).list_days(event_id)


@router.post("/events/{event_id}/days", response_model=schemas.DayOut)
def create_day(event_id: UUID, payload: schemas.DayCreate, db: Session = Depends(get_db)):
    get_event_or_404(db, event_id)
    data = payload.model_dump()
    if data["day_number"] is None:
        count = db.query(models.EventDay).filter(models.EventDay.event_id == event_id).count()
        data["day_number"] = count + 1
    day = models.EventDay(event_id=event_id, **data)
    db.add(day)
    db.commit()
    db.refresh(day)
    return day


@router.put("/days/{day_id}", response_model=schemas.DayOut)
def update_day(day_id: UUID, payload: schemas.DayUpdate, db: Session = Depends(get_db)):
    day = _get_day(db, day_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(day, key, value)
    db.commit()
    db.refresh(day)
    return day


@router.delete("/days/{day_id}")
def delete_day(day_id: UUID, db: Session = Depends(get_db)):
    _get_day(db, day_id)
    try:
        cascade.delete_day(SqlRecordStore(db), day_id)
    except StoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {"success": True}


@router.get("/days/{day_id}/slots", response_model=List[schemas.SlotOut])
def list_slots(day_id: UUID, db: Session = Depends(get_db)):
    _get_day(db, day_id)
    return SqlRecordStore(db).list_slots([day_id])


@router.post("/days/{day_id}/slots", response_model=schemas.SlotOut)
def create_slot(day_id: UUID, payload: schemas.SlotCreate, db: Session = Depends(get_db)):
    _get_day(db, day_id)
    data = payload.model_dump()
    if data["show_presenter"] is None:
        data["show_presenter"] = bool(data["presenter_name"])
    if data["sort_order"] is None:
        data["sort_order"] = 999
    slot = models.AgendaSlot(day_id=day_id, **data)
    db.add(slot)
    db.commit()
    db.refresh(slot)
    return slot


@router.put("/slots/{slot_id}", response_model=schemas.SlotOut)
def update_slot(slot_id: UUID, payload: schemas.SlotUpdate, db: Session = Depends(get_db)):
    slot = _get_slot(db, slot_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(slot, key, value)
    db.commit()
    db.refresh(slot)
    return slot


@router.delete("/slots/{slot_id}")
def delete_slot(slot_id: UUID, db: Session = Depends(get_db)):
    _get_slot(db, slot_id)
    try:
        SqlRecordStore(db).delete_slot(slot_id)
    except StoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {"success": True}
