"""Registration form configuration and submission validation."""

# purpose: store per-event form layouts and check public submissions against them
# status: active

from __future__ import annotations

import re
from datetime import date
from typing import Any, Iterable, Sequence
from uuid import UUID

from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from .. import models, schemas

_EMAIL = TypeAdapter(EmailStr)
_URL = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)
_TEL = re.compile(r"^\+?[0-9 ()\-.]{6,20}$")

DEFAULT_FORM_FIELDS: dict[str, list[dict[str, Any]]] = {
    "company": [
        {
            "field_name": "startup_name",
            "field_label": "Company Name",
            "field_type": "text",
            "is_required": True,
            "display_order": 0,
            "placeholder": "Enter company name",
        },
        {
            "field_name": "logo_url",
            "field_label": "Company Logo",
            "field_type": "file",
            "display_order": 1,
            "help_text": "Upload your company logo (JPG, PNG)",
        },
        {
            "field_name": "industry",
            "field_label": "Industry",
            "field_type": "text",
            "display_order": 2,
            "placeholder": "e.g., SaaS, E-commerce, FinTech",
        },
        {
            "field_name": "location",
            "field_label": "Location",
            "field_type": "text",
            "display_order": 3,
            "placeholder": "e.g., Cairo, Dubai, Remote",
        },
    ],
    "expert": [
        {
            "field_name": "expert_name",
            "field_label": "Full Name",
            "field_type": "text",
            "is_required": True,
            "display_order": 0,
            "placeholder": "Enter your full name",
        },
        {
            "field_name": "photo_url",
            "field_label": "Photo",
            "field_type": "file",
            "display_order": 1,
            "help_text": "Upload a professional photo",
        },
        {
            "field_name": "title",
            "field_label": "Job Title",
            "field_type": "text",
            "display_order": 2,
            "placeholder": "e.g., CEO, CTO, Founder",
        },
        {
            "field_name": "company",
            "field_label": "Company",
            "field_type": "text",
            "display_order": 3,
            "placeholder": "Company name",
        },
        {
            "field_name": "bio",
            "field_label": "Bio",
            "field_type": "textarea",
            "display_order": 4,
            "placeholder": "Brief bio about yourself",
            "validation_rules": {"maxLength": 500},
        },
    ],
}


class FormValidationError(ValueError):
    """Raised when submitted data violates the event's form configuration."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{name}: {message}" for name, message in errors.items()))


def default_form_config(entity_type: str) -> list[schemas.FormFieldConfigIn]:
    return [schemas.FormFieldConfigIn(**field) for field in DEFAULT_FORM_FIELDS[entity_type]]


def get_form_config(db: Session, event_id: UUID, entity_type: str) -> list[Any]:
    """Return stored fields ordered by display_order, or the built-in defaults."""

    rows = (
        db.query(models.FormFieldConfig)
        .filter(
            models.FormFieldConfig.event_id == event_id,
            models.FormFieldConfig.entity_type == entity_type,
        )
        .order_by(models.FormFieldConfig.display_order.asc())
        .all()
    )
    if not rows:
        return default_form_config(entity_type)
    return rows


def save_form_config(
    db: Session,
    event_id: UUID,
    entity_type: str,
    fields: Iterable[schemas.FormFieldConfigIn],
) -> list[models.FormFieldConfig]:
    """Replace the event's configuration for ``entity_type``."""

    db.query(models.FormFieldConfig).filter(
        models.FormFieldConfig.event_id == event_id,
        models.FormFieldConfig.entity_type == entity_type,
    ).delete(synchronize_session=False)
    rows = [
        models.FormFieldConfig(event_id=event_id, entity_type=entity_type, **field.model_dump())
        for field in fields
    ]
    db.add_all(rows)
    db.flush()
    return sorted(rows, key=lambda row: row.display_order)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return not value
    return False


def _check_type(field_type: str, value: Any, options: Sequence[str] | None) -> str | None:
    if field_type == "email":
        try:
            _EMAIL.validate_python(str(value))
        except ValidationError:
            return "must be a valid email address"
    elif field_type == "url" and not _URL.match(str(value)):
        return "must be a valid URL"
    elif field_type == "tel" and not _TEL.match(str(value)):
        return "must be a valid phone number"
    elif field_type == "number":
        try:
            float(value)
        except (TypeError, ValueError):
            return "must be a number"
    elif field_type == "date":
        try:
            date.fromisoformat(str(value))
        except ValueError:
            return "must be a date (YYYY-MM-DD)"
    elif field_type == "select" and options and str(value) not in options:
        return f"must be one of: {', '.join(options)}"
    elif field_type == "multiselect":
        values = value if isinstance(value, (list, tuple)) else [value]
        if options and any(str(item) not in options for item in values):
            return f"must only contain: {', '.join(options)}"
    return None


def _check_rules(rules: dict[str, Any], value: Any) -> str | None:
    # Rules saved before config validation existed may still be malformed.
    try:
        return _apply_rules(rules, value)
    except (re.error, TypeError, ValueError):
        return "cannot be checked, the form rules are misconfigured"


def _apply_rules(rules: dict[str, Any], value: Any) -> str | None:
    if isinstance(value, str):
        if "minLength" in rules and len(value) < int(rules["minLength"]):
            return f"must be at least {rules['minLength']} characters"
        if "maxLength" in rules and len(value) > int(rules["maxLength"]):
            return f"must be at most {rules['maxLength']} characters"
        if rules.get("pattern") and not re.fullmatch(rules["pattern"], value):
            return "has an invalid format"
    if "min" in rules or "max" in rules:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if "min" in rules and number < float(rules["min"]):
            return f"must be at least {rules['min']}"
        if "max" in rules and number > float(rules["max"]):
            return f"must be at most {rules['max']}"
    return None


def validate_submission(fields: Sequence[Any], data: dict[str, Any]) -> None:
    """Check ``data`` against form fields, raising FormValidationError on problems."""

    errors: dict[str, str] = {}
    for field in fields:
        value = data.get(field.field_name)
        if _is_empty(value):
            if field.is_required:
                errors[field.field_name] = f"{field.field_label} is required"
            continue
        problem = _check_type(field.field_type, value, field.field_options)
        if problem is None:
            problem = _check_rules(field.validation_rules or {}, value)
        if problem:
            errors[field.field_name] = f"{field.field_label} {problem}"
    if errors:
        raise FormValidationError(errors)
