"""Differential sync of spreadsheet agenda snapshots into the record store."""

# purpose: merge imported days, slots, experts and companies by natural key without deleting
# inputs: record store, event id, parsed workbook payload
# outputs: per-entity added/updated/skipped counts
# status: active
# depends_on: backend.eventboard.services.record_store

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Mapping
from uuid import UUID

from .. import schemas
from .record_store import RecordStore, StoreError

logger = logging.getLogger(__name__)

SLOT_FIELDS = ("start_time", "end_time", "presenter_name", "show_presenter")
EXPERT_FIELDS = ("title", "bio", "linkedin_url")
COMPANY_FIELDS = ("founder", "location", "industry")


def _comparable(value: Any) -> Any:
    return "" if value is None else value


def has_changes(existing: Any, incoming: Mapping[str, Any]) -> bool:
    """Return True when any incoming field differs from the stored row."""

    return any(
        _comparable(getattr(existing, field)) != _comparable(value)
        for field, value in incoming.items()
    )


class AgendaReconciler:
    """Inserts and updates store rows so they match an imported snapshot.

    Rows are matched by natural key (day name, day + slot title, expert or
    company name) against what the store held when each stage began. Stages
    run in order days, slots, experts, companies because slots resolve their
    day through the names mapped in the first stage. Nothing is ever deleted:
    a renamed day or slot shows up as a new row next to the old one.

    Each store write is committed independently. A failing write aborts the
    run with ``StoreError`` and leaves earlier writes in place.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def reconcile(self, event_id: UUID, parsed: schemas.AgendaImportPayload) -> schemas.ReconciliationReport:
        report = schemas.ReconciliationReport()
        logger.info(
            "Differential sync started for event %s (%d days, %d slots, %d experts, %d companies)",
            event_id,
            len(parsed.days),
            len(parsed.slots),
            len(parsed.experts),
            len(parsed.companies),
        )
        try:
            day_ids = self._sync_days(event_id, parsed.days, report.days)
            self._sync_slots(day_ids, parsed.slots, report.slots)
            self._sync_experts(event_id, parsed.experts, report.experts)
            self._sync_companies(event_id, parsed.companies, report.companies)
        except StoreError:
            logger.error("Differential sync for event %s aborted; partial stats %s", event_id, report.model_dump())
            raise
        logger.info("Differential sync finished for event %s: %s", event_id, report.model_dump())
        return report

    def _sync_days(
        self,
        event_id: UUID,
        rows: list[schemas.ParsedDayRow],
        counts: schemas.ReconciliationCounts,
    ) -> dict[str, UUID]:
        existing_days = list(self.store.list_days(event_id))
        by_name = {}
        for day in existing_days:
            by_name.setdefault(day.day_name, day)
        day_ids: dict[str, UUID] = {}
        for row in rows:
            existing = by_name.get(row.day_name)
            if existing is not None:
                if existing.day_date != row.day_date:
                    self.store.update_day(existing.day_id, {"day_date": row.day_date})
                    counts.updated += 1
                    logger.debug("Updated day %s date to %s", row.day_name, row.day_date)
                else:
                    counts.skipped += 1
                day_ids[row.day_name] = existing.day_id
                continue
            created = self.store.insert_day(
                {
                    "event_id": event_id,
                    "day_name": row.day_name,
                    "day_date": row.day_date,
                    "day_number": len(existing_days) + counts.added + 1,
                }
            )
            counts.added += 1
            day_ids[row.day_name] = created.day_id
            logger.debug("Added day %s as number %s", row.day_name, created.day_number)
        return day_ids

    def _sync_slots(
        self,
        day_ids: dict[str, UUID],
        rows: list[schemas.ParsedSlotRow],
        counts: schemas.ReconciliationCounts,
    ) -> None:
        existing_slots = list(self.store.list_slots(set(day_ids.values())))
        by_key = {}
        for slot in existing_slots:
            by_key.setdefault((slot.day_id, slot.slot_title), slot)
        existing_per_day = Counter(slot.day_id for slot in existing_slots)
        added_per_day: Counter = Counter()
        for row in rows:
            target_day = day_ids.get(row.day_name)
            if target_day is None:
                # Day not present in the Days sheet; the row is ignored.
                continue
            fields = {field: getattr(row, field) for field in SLOT_FIELDS}
            existing = by_key.get((target_day, row.slot_title))
            if existing is not None:
                if has_changes(existing, fields):
                    self.store.update_slot(existing.slot_id, fields)
                    counts.updated += 1
                    logger.debug("Updated slot %s on %s", row.slot_title, row.day_name)
                else:
                    counts.skipped += 1
                continue
            added_per_day[target_day] += 1
            self.store.insert_slot(
                {
                    "day_id": target_day,
                    "slot_title": row.slot_title,
                    **fields,
                    "sort_order": existing_per_day[target_day] + added_per_day[target_day],
                }
            )
            counts.added += 1
            logger.debug("Added slot %s on %s", row.slot_title, row.day_name)

    def _sync_experts(
        self,
        event_id: UUID,
        rows: list[schemas.ParsedExpertRow],
        counts: schemas.ReconciliationCounts,
    ) -> None:
        existing = {}
        for expert in self.store.list_experts(event_id):
            existing.setdefault(expert.name, expert)
        for row in rows:
            fields = {field: getattr(row, field) for field in EXPERT_FIELDS}
            match = existing.get(row.name)
            if match is None:
                self.store.insert_expert({"event_id": event_id, "name": row.name, **fields})
                counts.added += 1
            elif has_changes(match, fields):
                self.store.update_expert(match.expert_id, fields)
                counts.updated += 1
            else:
                counts.skipped += 1

    def _sync_companies(
        self,
        event_id: UUID,
        rows: list[schemas.ParsedCompanyRow],
        counts: schemas.ReconciliationCounts,
    ) -> None:
        existing = {}
        for company in self.store.list_companies(event_id):
            existing.setdefault(company.name, company)
        for row in rows:
            fields = {field: getattr(row, field) for field in COMPANY_FIELDS}
            match = existing.get(row.name)
            if match is None:
                self.store.insert_company({"event_id": event_id, "name": row.name, **fields})
                counts.added += 1
            elif has_changes(match, fields):
                self.store.update_company(match.company_id, fields)
                counts.updated += 1
            else:
                counts.skipped += 1


def reconcile_agenda_data(store: RecordStore, event_id: UUID, parsed: Any) -> dict[str, Any]:
    """Run a differential sync and return ``{"success": True, "stats": report}``."""

    if hasattr(parsed, "to_payload"):
        parsed = parsed.to_payload()
    elif not isinstance(parsed, schemas.AgendaImportPayload):
        parsed = schemas.AgendaImportPayload.model_validate(parsed)
    report = AgendaReconciler(store).reconcile(event_id, parsed)
    return {"success": True, "stats": report}
