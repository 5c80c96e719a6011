import csv
import io
import uuid

import pytest

from eventboard import models
from eventboard.services import submissions
from eventboard.services.forms import FormValidationError
from .conftest import TestingSessionLocal


def _submit(client, event_id, entity_type, data):
    return client.post(f"/api/events/{event_id}/submissions/{entity_type}", json=data)


def test_company_approval_copies_all_fields(client, event):
    data = {
        "startup_name": "Acme",
        "industry": "Robotics",
        "location": "Cairo",
        "employees": "50-100",
        "founder": "Wile E.",
        "website": "https://acme.example",
    }
    resp = _submit(client, event.event_id, "company", data)
    assert resp.status_code == 200
    submission = resp.json()
    assert submission["status"] == "pending"
    assert submission["additional_data"] == {
        "employees": "50-100",
        "founder": "Wile E.",
        "website": "https://acme.example",
    }

    approved = client.post(f"/api/submissions/company/{submission['submission_id']}/approve")
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert approved.json()["reviewed_at"] is not None

    companies = client.get(f"/api/events/{event.event_id}/companies").json()
    assert len(companies) == 1
    company = companies[0]
    assert (company["name"], company["industry"], company["location"]) == ("Acme", "Robotics", "Cairo")
    assert company["additional_data"]["employees"] == "50-100"
    assert company["founder"] == "Wile E."
    assert company["website"] == "https://acme.example"


def test_expert_approval_creates_expert(client, event):
    data = {"expert_name": "Jane Doe", "title": "CTO", "bio": "Ships things", "linkedin_url": "https://linkedin.com/in/jd"}
    submission = _submit(client, event.event_id, "expert", data).json()

    client.post(f"/api/submissions/expert/{submission['submission_id']}/approve")

    experts = client.get(f"/api/events/{event.event_id}/experts").json()
    assert [(e["name"], e["title"], e["linkedin_url"]) for e in experts] == [
        ("Jane Doe", "CTO", "https://linkedin.com/in/jd")
    ]


def test_reject_defaults_reason_and_state_is_terminal(client, event):
    submission = _submit(client, event.event_id, "company", {"startup_name": "Nope Inc"}).json()
    url = f"/api/submissions/company/{submission['submission_id']}"

    rejected = client.post(f"{url}/reject")
    assert rejected.status_code == 200
    assert rejected.json()["status"] == "rejected"
    assert rejected.json()["rejection_reason"] == "Not specified"

    assert client.post(f"{url}/approve").status_code == 409
    assert client.post(f"{url}/reject", json={"reason": "again"}).status_code == 409
    assert client.get(f"/api/events/{event.event_id}/companies").json() == []


def test_reject_with_reason(client, event):
    submission = _submit(client, event.event_id, "expert", {"expert_name": "Sam"}).json()
    resp = client.post(
        f"/api/submissions/expert/{submission['submission_id']}/reject",
        json={"reason": "Duplicate"},
    )
    assert resp.json()["rejection_reason"] == "Duplicate"


def test_submission_failing_form_rules_is_rejected(client, event):
    resp = _submit(client, event.event_id, "expert", {"bio": "x" * 600})
    assert resp.status_code == 422
    errors = resp.json()["detail"]["errors"]
    assert set(errors) == {"expert_name", "bio"}


def test_unknown_submission_is_404(client):
    assert client.post(f"/api/submissions/company/{uuid.uuid4()}/approve").status_code == 404


def test_list_filters_by_status_newest_first(client, event):
    first = _submit(client, event.event_id, "company", {"startup_name": "First"}).json()
    _submit(client, event.event_id, "company", {"startup_name": "Second"})
    client.post(f"/api/submissions/company/{first['submission_id']}/approve")

    all_rows = client.get(f"/api/events/{event.event_id}/submissions/company").json()
    assert [r["startup_name"] for r in all_rows] == ["Second", "First"]
    pending = client.get(f"/api/events/{event.event_id}/submissions/company?status=pending").json()
    assert [r["startup_name"] for r in pending] == ["Second"]


def test_export_csv_flattens_additional_data(client, event):
    _submit(client, event.event_id, "company", {"startup_name": "Acme", "employees": "10"})
    _submit(client, event.event_id, "company", {"startup_name": "Beta", "stage": "MVP"})

    resp = client.get(f"/api/events/{event.event_id}/submissions/company/export")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    rows = list(csv.DictReader(io.StringIO(resp.text)))
    assert {r["startup_name"] for r in rows} == {"Acme", "Beta"}
    assert {"ID", "Status", "employees", "stage"} <= set(rows[0])
    acme = next(r for r in rows if r["startup_name"] == "Acme")
    assert (acme["employees"], acme["stage"]) == ("10", "")


def test_failed_directory_insert_leaves_submission_pending(event, monkeypatch):
    session = TestingSessionLocal()
    try:
        row = submissions.submit_company_registration(session, event.event_id, {"startup_name": "Flaky"})
        submission_id = row.submission_id

        def broken(*args, **kwargs):
            raise submissions.StoreError("approve company failed: simulated")

        monkeypatch.setattr(submissions, "_commit", broken)
        with pytest.raises(submissions.StoreError):
            submissions.approve_submission(session, "company", submission_id)
        session.rollback()
        monkeypatch.undo()

        stored = session.get(models.CompanySubmission, submission_id)
        assert stored.status == "pending"
        assert session.query(models.Company).filter(models.Company.name == "Flaky").count() == 0
    finally:
        session.close()


def test_expert_registration_splits_core_and_additional_fields(event):
    session = TestingSessionLocal()
    try:
        row = submissions.submit_expert_registration(
            session,
            event.event_id,
            {"expert_name": "Ada", "title": "Engineer", "linkedin_url": "https://linkedin.com/in/ada"},
        )
        stored = session.get(models.ExpertSubmission, row.submission_id)
        assert (stored.expert_name, stored.title, stored.status) == ("Ada", "Engineer", "pending")
        assert stored.additional_data == {"linkedin_url": "https://linkedin.com/in/ada"}

        with pytest.raises(FormValidationError):
            submissions.submit_expert_registration(session, event.event_id, {"title": "No name"})
    finally:
        session.close()
