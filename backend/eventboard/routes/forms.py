from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from ..database import get_db
from .. import schemas
from ..services import forms
from .events import get_event_or_404

router = APIRouter(prefix="/api/events", tags=["forms"])


@router.get("/{event_id}/forms/{entity_type}", response_model=List[schemas.FormFieldConfigOut])
def get_form(event_id: UUID, entity_type: schemas.EntityType, db: Session = Depends(get_db)):
    get_event_or_404(db, event_id)
    return [
        schemas.FormFieldConfigOut.model_validate(field, from_attributes=True)
        for field in forms.get_form_config(db, event_id, entity_type)
    ]


@router.put("/{event_id}/forms/{entity_type}", response_model=List[schemas.FormFieldConfigOut])
def save_form(
    event_id: UUID,
    entity_type: schemas.EntityType,
    fields: List[schemas.FormFieldConfigIn],
    db: Session = Depends(get_db),
):
    get_event_or_404(db, event_id)
    rows = forms.save_form_config(db, event_id, entity_type, fields)
    db.commit()
    for row in rows:
        db.refresh(row)
    return rows
