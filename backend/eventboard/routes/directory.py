from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from ..database import get_db
from .. import models, schemas
from .events import get_event_or_404

router = APIRouter(prefix="/api", tags=["directory"])


def _get_or_404(db: Session, model, key: UUID, label: str):
    row = db.get(model, key)
    if not row:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return row


def _apply(db: Session, row, changes: dict):
    for key, value in changes.items():
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return row


@router.get("/events/{event_id}/experts", response_model=List[schemas.ExpertOut])
def list_experts(event_id: UUID, db: Session = Depends(get_db)):
    get_event_or_404(db, event_id)
    return (
        db.query(models.Expert)
        .filter(models.Expert.event_id == event_id)
        .order_by(models.Expert.created_at.asc())
        .all()
    )


@router.post("/events/{event_id}/experts", response_model=schemas.ExpertOut)
def create_expert(event_id: UUID, payload: schemas.ExpertCreate, db: Session = Depends(get_db)):
    get_event_or_404(db, event_id)
    expert = models.Expert(event_id=event_id, **payload.model_dump())
    db.add(expert)
    db.commit()
    db.refresh(expert)
    return expert


@router.put("/experts/{expert_id}", response_model=schemas.ExpertOut)
def update_expert(expert_id: UUID, payload: schemas.ExpertUpdate, db: Session = Depends(get_db)):
    expert = _get_or_404(db, models.Expert, expert_id, "Expert")
    return _apply(db, expert, payload.model_dump(exclude_unset=True))


@router.delete("/experts/{expert_id}")
def delete_expert(expert_id: UUID, db: Session = Depends(get_db)):
    expert = _get_or_404(db, models.Expert, expert_id, "Expert")
    db.delete(expert)
    db.commit()
    return {"success": True}


@router.get("/events/{event_id}/companies", response_model=List[schemas.CompanyOut])
def list_companies(event_id: UUID, db: Session = Depends(get_db)):
    get_event_or_404(db, event_id)
    return (
        db.query(models.Company)
        .filter(models.Company.event_id == event_id)
        .order_by(models.Company.created_at.asc())
        .all()
    )


@router.post("/events/{event_id}/companies", response_model=schemas.CompanyOut)
def create_company(event_id: UUID, payload: schemas.CompanyCreate, db: Session = Depends(get_db)):
    get_event_or_404(db, event_id)
    company = models.Company(event_id=event_id, **payload.model_dump())
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


@router.put("/companies/{company_id}", response_model=schemas.CompanyOut)
def update_company(company_id: UUID, payload: schemas.CompanyUpdate, db: Session = Depends(get_db)):
    company = _get_or_404(db, models.Company, company_id, "Company")
    return _apply(db, company, payload.model_dump(exclude_unset=True))


@router.delete("/companies/{company_id}")
def delete_company(company_id: UUID, db: Session = Depends(get_db)):
    company = _get_or_404(db, models.Company, company_id, "Company")
    db.delete(company)
    db.commit()
    return {"success": True}


@router.get("/companies", response_model=List[schemas.CompanyOut])
def list_all_companies(db: Session = Depends(get_db)):
    """Startup directory across every event, newest first."""
    return db.query(models.Company).order_by(models.Company.created_at.desc()).all()
