from datetime import date

import pytest

from eventboard import models
from eventboard.services import cascade
from eventboard.services.record_store import SqlRecordStore, StoreError


def _seed_agenda(store, event_id, days=2, slots_per_day=3):
    day_ids = []
    for n in range(1, days + 1):
        day = store.insert_day(
            {"event_id": event_id, "day_name": f"Day {n}", "day_number": n, "day_date": date(2026, 2, 10 + n)}
        )
        day_ids.append(day.day_id)
        for s in range(1, slots_per_day + 1):
            store.insert_slot({"day_id": day.day_id, "slot_title": f"Slot {s}", "sort_order": s})
    return day_ids


def test_delete_event_removes_days_slots_and_directory(db, event):
    event_id = event.event_id
    store = SqlRecordStore(db)
    day_ids = _seed_agenda(store, event_id)
    store.insert_expert({"event_id": event_id, "name": "Jane"})
    store.insert_company({"event_id": event_id, "name": "Acme"})
    db.add(models.CompanySubmission(event_id=event_id, startup_name="Pending Co"))
    db.commit()

    assert cascade.delete_event(store, event_id) == 1

    assert db.query(models.Event).filter(models.Event.event_id == event_id).count() == 0
    assert db.query(models.EventDay).filter(models.EventDay.event_id == event_id).count() == 0
    assert db.query(models.AgendaSlot).filter(models.AgendaSlot.day_id.in_(day_ids)).count() == 0
    assert db.query(models.Expert).filter(models.Expert.event_id == event_id).count() == 0
    assert db.query(models.Company).filter(models.Company.event_id == event_id).count() == 0
    assert db.query(models.CompanySubmission).filter(models.CompanySubmission.event_id == event_id).count() == 0


def test_delete_day_leaves_sibling_days(db, event):
    store = SqlRecordStore(db)
    first, second = _seed_agenda(store, event.event_id)

    cascade.delete_day(store, first)

    assert [d.day_id for d in store.list_days(event.event_id)] == [second]
    assert store.list_slots([first]) == []
    assert len(store.list_slots([second])) == 3


def test_delete_event_endpoint(client):
    event_id = client.post("/api/events", json={"event_name": "Cascade"}).json()["event_id"]
    day_id = client.post(f"/api/events/{event_id}/days", json={"day_name": "Day 1"}).json()["day_id"]
    client.post(f"/api/days/{day_id}/slots", json={"slot_title": "Intro", "start_time": "9:00"})

    resp = client.delete(f"/api/events/{event_id}")
    assert resp.status_code == 200
    assert client.get(f"/api/events/{event_id}").status_code == 404
    assert client.get(f"/api/days/{day_id}/slots").status_code == 404
    assert client.delete(f"/api/events/{event_id}").status_code == 404


class FailingDayStore(SqlRecordStore):
    def delete_day(self, day_id):
        raise StoreError(f"delete day {day_id} failed: simulated")


def test_failed_day_delete_stops_cascade_after_slots(db, event):
    event_id = event.event_id
    day_id = _seed_agenda(SqlRecordStore(db), event_id, days=1)[0]

    with pytest.raises(StoreError):
        cascade.delete_event(FailingDayStore(db), event_id)

    assert db.query(models.AgendaSlot).filter(models.AgendaSlot.day_id == day_id).count() == 0
    assert db.query(models.EventDay).filter(models.EventDay.event_id == event_id).count() == 1
    assert db.query(models.Event).filter(models.Event.event_id == event_id).count() == 1


def test_delete_event_endpoint_reports_store_failure(client, monkeypatch):
    event_id = client.post("/api/events", json={"event_name": "Stuck"}).json()["event_id"]
    day_id = client.post(f"/api/events/{event_id}/days", json={"day_name": "Day 1"}).json()["day_id"]
    client.post(f"/api/days/{day_id}/slots", json={"slot_title": "Intro"})
    monkeypatch.setattr(SqlRecordStore, "delete_day", FailingDayStore.delete_day)

    resp = client.delete(f"/api/events/{event_id}")

    assert resp.status_code == 500
    assert "simulated" in resp.json()["detail"]
    monkeypatch.undo()
    assert client.get(f"/api/events/{event_id}").status_code == 200
    assert client.get(f"/api/days/{day_id}/slots").json() == []
