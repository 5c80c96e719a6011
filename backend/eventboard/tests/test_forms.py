import pytest

from eventboard.schemas import FormFieldConfigIn
from eventboard.services.forms import (
    DEFAULT_FORM_FIELDS,
    FormValidationError,
    default_form_config,
    validate_submission,
)


def test_default_config_served_when_nothing_saved(client, event):
    resp = client.get(f"/api/events/{event.event_id}/forms/expert")
    assert resp.status_code == 200
    fields = resp.json()
    assert [f["field_name"] for f in fields] == ["expert_name", "photo_url", "title", "company", "bio"]
    assert fields[-1]["validation_rules"] == {"maxLength": 500}
    assert fields[0]["is_required"] is True


def test_saving_replaces_previous_config(client, event):
    url = f"/api/events/{event.event_id}/forms/company"
    first = [
        {"field_name": "startup_name", "field_label": "Name", "is_required": True, "display_order": 1},
        {"field_name": "stage", "field_label": "Stage", "field_type": "select", "field_options": ["Idea", "MVP"], "display_order": 0},
    ]
    resp = client.put(url, json=first)
    assert resp.status_code == 200
    assert [f["field_name"] for f in resp.json()] == ["stage", "startup_name"]

    second = [{"field_name": "startup_name", "field_label": "Startup", "is_required": True}]
    client.put(url, json=second)
    fields = client.get(url).json()
    assert len(fields) == 1
    assert fields[0]["field_label"] == "Startup"


def test_unknown_entity_type_is_rejected(client, event):
    assert client.get(f"/api/events/{event.event_id}/forms/sponsor").status_code == 422


def test_validate_submission_collects_all_errors():
    fields = default_form_config("company") + default_form_config("expert")[4:]
    fields += [
        FormFieldConfigIn(field_name="email", field_label="Email", field_type="email", is_required=True),
        FormFieldConfigIn(field_name="employees", field_label="Employees", field_type="number", validation_rules={"min": 1}),
        FormFieldConfigIn(field_name="stage", field_label="Stage", field_type="select", field_options=["Idea", "MVP"]),
    ]
    data = {"startup_name": "  ", "bio": "x" * 501, "email": "nope", "employees": "0", "stage": "Growth"}

    with pytest.raises(FormValidationError) as excinfo:
        validate_submission(fields, data)

    assert set(excinfo.value.errors) == {"startup_name", "bio", "email", "employees", "stage"}


def test_validate_submission_accepts_valid_data():
    fields = default_form_config("expert")
    validate_submission(fields, {"expert_name": "Jane", "bio": "Short bio", "photo_url": None})


def test_default_fields_cover_both_entities():
    assert set(DEFAULT_FORM_FIELDS) == {"company", "expert"}


@pytest.mark.parametrize(
    "rules",
    [{"pattern": "(["}, {"minLength": "abc"}, {"max": "lots"}],
)
def test_malformed_validation_rules_are_rejected_on_save(client, event, rules):
    url = f"/api/events/{event.event_id}/forms/company"
    resp = client.put(url, json=[{"field_name": "startup_name", "field_label": "Name", "validation_rules": rules}])
    assert resp.status_code == 422
    assert [f["field_name"] for f in client.get(url).json()][0] == "startup_name"


def test_numeric_rule_strings_are_coerced_on_save(client, event):
    url = f"/api/events/{event.event_id}/forms/company"
    rules = {"minLength": "2", "max": "10", "pattern": "[A-Z].*"}
    resp = client.put(url, json=[{"field_name": "startup_name", "field_label": "Name", "validation_rules": rules}])
    assert resp.status_code == 200
    assert resp.json()[0]["validation_rules"] == {"minLength": 2, "max": 10.0, "pattern": "[A-Z].*"}


def test_misconfigured_rules_report_a_field_error():
    field = FormFieldConfigIn.model_construct(
        field_name="startup_name",
        field_label="Name",
        field_type="text",
        field_options=None,
        validation_rules={"pattern": "(["},
    )

    with pytest.raises(FormValidationError) as excinfo:
        validate_submission([field], {"startup_name": "Acme"})

    assert "misconfigured" in excinfo.value.errors["startup_name"]
