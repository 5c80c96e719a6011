"""Children-before-parents deletion for events and days."""

# purpose: keep the store free of orphaned slots and days since no FK cascades exist
# status: active

from __future__ import annotations

import logging
from uuid import UUID

from .record_store import RecordStore

logger = logging.getLogger(__name__)


def delete_day(store: RecordStore, day_id: UUID) -> int:
    """Delete a day's slots, then the day. Returns the number of days removed."""

    slots = store.delete_slots_by_day(day_id)
    removed = store.delete_day(day_id)
    logger.info("Deleted day %s with %d slots", day_id, slots)
    return removed


def delete_event(store: RecordStore, event_id: UUID) -> int:
    """Delete an event with its days, slots and directory rows.

    Deletes run sequentially; a ``StoreError`` part way through leaves the
    rows already removed gone and the rest in place for a retry.
    """

    days = list(store.list_days(event_id))
    for day in days:
        store.delete_slots_by_day(day.day_id)
        store.delete_day(day.day_id)
    store.delete_event_directory(event_id)
    removed = store.delete_event(event_id)
    logger.info("Deleted event %s with %d days", event_id, len(days))
    return removed
