"""Single-endpoint action API kept for clients of the spreadsheet-era backend.

Every response is HTTP 200 with a JSON body; failures are reported as
``{"error": message}`` so older clients keep working unchanged.
"""

from fastapi import APIRouter, Body, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional
from uuid import UUID
import logging

from ..database import get_db
from .. import models, schemas
from ..services import cascade
from ..services.record_store import SqlRecordStore, StoreError
from .events import build_full_agenda

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/legacy", tags=["legacy"])


def _dump(schema, row) -> dict:
    return schema.model_validate(row).model_dump(mode="json")


def _uuid(data: Dict[str, Any], key: str) -> UUID:
    value = data.get(key)
    if not value:
        raise ValueError(f"Missing {key}")
    return UUID(str(value))


def _create(db: Session, row, schema) -> dict:
    db.add(row)
    db.commit()
    db.refresh(row)
    return {"success": True, "data": _dump(schema, row)}


def _update(db: Session, model, key: UUID, update_schema, updates: Optional[dict]) -> dict:
    row = db.get(model, key)
    if row is None:
        return {"success": False, "message": "Record not found"}
    changes = update_schema.model_validate(updates or {}).model_dump(exclude_unset=True)
    for name, value in changes.items():
        setattr(row, name, value)
    db.commit()
    return {"success": True, "message": "Updated successfully"}


def _deleted(count: int) -> dict:
    if not count:
        return {"success": False, "message": "Record not found"}
    return {"success": True, "message": "Deleted successfully"}


def _get_action(action: Optional[str], params: Dict[str, Any], db: Session) -> Any:
    store = SqlRecordStore(db)
    if action == "getEvents":
        events = db.query(models.Event).order_by(models.Event.created_at.desc()).all()
        return [_dump(schemas.EventOut, e) for e in events]
    if action == "getEvent":
        event = db.get(models.Event, _uuid(params, "eventId"))
        return _dump(schemas.EventOut, event) if event else {"error": "Event not found"}
    if action == "getEventDays":
        return [_dump(schemas.DayOut, d) for d in store.list_days(_uuid(params, "eventId"))]
    if action == "getAgendaSlots":
        return [_dump(schemas.SlotOut, s) for s in store.list_slots([_uuid(params, "dayId")])]
    if action == "getFullAgenda":
        event = db.get(models.Event, _uuid(params, "eventId"))
        if event is None:
            return {"error": "Event not found"}
        return build_full_agenda(db, event).model_dump(mode="json")
    return {"error": "Invalid action"}


def _post_action(data: Dict[str, Any], db: Session) -> Any:
    action = data.get("action")
    store = SqlRecordStore(db)
    if action == "createEvent":
        payload = schemas.EventCreate.model_validate(data)
        return _create(db, models.Event(**payload.model_dump()), schemas.EventOut)
    if action == "updateEvent":
        return _update(db, models.Event, _uuid(data, "event_id"), schemas.EventUpdate, data.get("updates"))
    if action == "deleteEvent":
        return _deleted(cascade.delete_event(store, _uuid(data, "event_id")))
    if action == "createDay":
        event_id = _uuid(data, "event_id")
        payload = schemas.DayCreate.model_validate(data)
        fields = payload.model_dump()
        if fields["day_number"] is None:
            fields["day_number"] = len(store.list_days(event_id)) + 1
        return _create(db, models.EventDay(event_id=event_id, **fields), schemas.DayOut)
    if action == "updateDay":
        return _update(db, models.EventDay, _uuid(data, "day_id"), schemas.DayUpdate, data.get("updates"))
    if action == "deleteDay":
        return _deleted(cascade.delete_day(store, _uuid(data, "day_id")))
    if action == "createSlot":
        day_id = _uuid(data, "day_id")
        payload = schemas.SlotCreate.model_validate(data)
        fields = payload.model_dump()
        fields["show_presenter"] = bool(fields["show_presenter"])
        fields["sort_order"] = fields["sort_order"] or 999
        return _create(db, models.AgendaSlot(day_id=day_id, **fields), schemas.SlotOut)
    if action == "updateSlot":
        return _update(db, models.AgendaSlot, _uuid(data, "slot_id"), schemas.SlotUpdate, data.get("updates"))
    if action == "deleteSlot":
        return _deleted(store.delete_slot(_uuid(data, "slot_id")))
    return {"error": "Invalid action"}


@router.get("")
def legacy_get(
    action: Optional[str] = None,
    eventId: Optional[str] = None,
    dayId: Optional[str] = None,
    db: Session = Depends(get_db),
):
    try:
        return _get_action(action, {"eventId": eventId, "dayId": dayId}, db)
    except (ValueError, StoreError) as exc:
        logger.warning("Legacy action %s failed: %s", action, exc)
        return {"error": str(exc)}


@router.post("")
def legacy_post(data: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    try:
        return _post_action(data, db)
    except (ValueError, StoreError, SQLAlchemyError) as exc:
        db.rollback()
        logger.warning("Legacy action %s failed: %s", data.get("action"), exc)
        return {"error": str(exc)}
