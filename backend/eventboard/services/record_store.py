"""Keyed record store used by agenda reconciliation and cascade deletion."""

# purpose: expose per-table CRUD scoped by event/day over a SQLAlchemy session
# status: active
# depends_on: backend.eventboard.models

from __future__ import annotations

import logging
from typing import Any, Iterable, Protocol, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when a store read or write fails; the original error is chained."""


class RecordStore(Protocol):
    def list_days(self, event_id: UUID) -> Sequence[models.EventDay]: ...

    def insert_day(self, fields: dict[str, Any]) -> models.EventDay: ...

    def update_day(self, day_id: UUID, fields: dict[str, Any]) -> None: ...

    def list_slots(self, day_ids: Iterable[UUID]) -> Sequence[models.AgendaSlot]: ...

    def insert_slot(self, fields: dict[str, Any]) -> models.AgendaSlot: ...

    def update_slot(self, slot_id: UUID, fields: dict[str, Any]) -> None: ...

    def list_experts(self, event_id: UUID) -> Sequence[models.Expert]: ...

    def insert_expert(self, fields: dict[str, Any]) -> models.Expert: ...

    def update_expert(self, expert_id: UUID, fields: dict[str, Any]) -> None: ...

    def list_companies(self, event_id: UUID) -> Sequence[models.Company]: ...

    def insert_company(self, fields: dict[str, Any]) -> models.Company: ...

    def update_company(self, company_id: UUID, fields: dict[str, Any]) -> None: ...

    def delete_slots_by_day(self, day_id: UUID) -> int: ...

    def delete_day(self, day_id: UUID) -> int: ...

    def delete_event_directory(self, event_id: UUID) -> int: ...

    def delete_event(self, event_id: UUID) -> int: ...


class SqlRecordStore:
    """Record store backed by a SQLAlchemy session.

    Every write commits on its own, mirroring a hosted table API where each
    call is an independent request. A failed call rolls the session back and
    raises ``StoreError``; earlier calls stay committed.
    """

    def __init__(self, db: Session):
        self.db = db

    def _run(self, operation: str, fn):
        try:
            return fn()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Record store %s failed: %s", operation, exc)
            raise StoreError(f"{operation} failed: {exc}") from exc

    def _insert(self, model, fields: dict[str, Any]):
        def _write():
            row = model(**fields)
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            return row

        return self._run(f"insert {model.__tablename__}", _write)

    def _update(self, model, key_column, key: UUID, fields: dict[str, Any]) -> None:
        def _write():
            self.db.query(model).filter(key_column == key).update(fields, synchronize_session="fetch")
            self.db.commit()

        self._run(f"update {model.__tablename__}", _write)

    def _delete(self, model, *criteria) -> int:
        def _write():
            count = self.db.query(model).filter(*criteria).delete(synchronize_session=False)
            self.db.commit()
            return count

        return self._run(f"delete {model.__tablename__}", _write)

    # days

    def list_days(self, event_id: UUID) -> list[models.EventDay]:
        return self._run(
            "list event_days",
            lambda: self.db.query(models.EventDay)
            .filter(models.EventDay.event_id == event_id)
            .order_by(models.EventDay.day_number.asc())
            .all(),
        )

    def insert_day(self, fields: dict[str, Any]) -> models.EventDay:
        return self._insert(models.EventDay, fields)

    def update_day(self, day_id: UUID, fields: dict[str, Any]) -> None:
        self._update(models.EventDay, models.EventDay.day_id, day_id, fields)

    # slots

    def list_slots(self, day_ids: Iterable[UUID]) -> list[models.AgendaSlot]:
        ids = list(day_ids)
        if not ids:
            return []
        return self._run(
            "list agenda_slots",
            lambda: self.db.query(models.AgendaSlot)
            .filter(models.AgendaSlot.day_id.in_(ids))
            .order_by(models.AgendaSlot.sort_order.asc(), models.AgendaSlot.start_time.asc())
            .all(),
        )

    def insert_slot(self, fields: dict[str, Any]) -> models.AgendaSlot:
        return self._insert(models.AgendaSlot, fields)

    def update_slot(self, slot_id: UUID, fields: dict[str, Any]) -> None:
        self._update(models.AgendaSlot, models.AgendaSlot.slot_id, slot_id, fields)

    # directory

    def list_experts(self, event_id: UUID) -> list[models.Expert]:
        return self._run(
            "list experts",
            lambda: self.db.query(models.Expert).filter(models.Expert.event_id == event_id).all(),
        )

    def insert_expert(self, fields: dict[str, Any]) -> models.Expert:
        return self._insert(models.Expert, fields)

    def update_expert(self, expert_id: UUID, fields: dict[str, Any]) -> None:
        self._update(models.Expert, models.Expert.expert_id, expert_id, fields)

    def list_companies(self, event_id: UUID) -> list[models.Company]:
        return self._run(
            "list companies",
            lambda: self.db.query(models.Company).filter(models.Company.event_id == event_id).all(),
        )

    def insert_company(self, fields: dict[str, Any]) -> models.Company:
        return self._insert(models.Company, fields)

    def update_company(self, company_id: UUID, fields: dict[str, Any]) -> None:
        self._update(models.Company, models.Company.company_id, company_id, fields)

    # deletes

    def delete_slot(self, slot_id: UUID) -> int:
        return self._delete(models.AgendaSlot, models.AgendaSlot.slot_id == slot_id)

    def delete_slots_by_day(self, day_id: UUID) -> int:
        return self._delete(models.AgendaSlot, models.AgendaSlot.day_id == day_id)

    def delete_day(self, day_id: UUID) -> int:
        return self._delete(models.EventDay, models.EventDay.day_id == day_id)

    def delete_event_directory(self, event_id: UUID) -> int:
        """Remove experts, companies, submissions and form configs of an event."""

        removed = 0
        for model in (
            models.Expert,
            models.Company,
            models.CompanySubmission,
            models.ExpertSubmission,
            models.FormFieldConfig,
        ):
            removed += self._delete(model, model.event_id == event_id)
        return removed

    def delete_event(self, event_id: UUID) -> int:
        return self._delete(models.Event, models.Event.event_id == event_id)
