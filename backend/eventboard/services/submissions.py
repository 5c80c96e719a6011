"""Registration submissions and their review workflow."""

# purpose: accept public company/expert registrations and promote approved ones into the directory
# inputs: event id, entity type, submitted form data
# outputs: submission rows, directory rows on approval, csv exports
# status: active
# depends_on: backend.eventboard.services.forms

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models
from .forms import get_form_config, validate_submission
from .record_store import StoreError

logger = logging.getLogger(__name__)


class SubmissionError(RuntimeError):
    """Base error for submission workflow failures."""


class SubmissionNotFound(SubmissionError):
    pass


class SubmissionStateError(SubmissionError):
    """Raised when reviewing a submission that is no longer pending."""


@dataclass(slots=True)
class _EntityBinding:
    submission_model: type
    directory_model: type
    core_fields: tuple[str, ...]
    name_field: str
    # submission column -> directory column
    copied_fields: dict[str, str]


_BINDINGS: dict[str, _EntityBinding] = {
    "company": _EntityBinding(
        submission_model=models.CompanySubmission,
        directory_model=models.Company,
        core_fields=("startup_name", "logo_url", "industry", "location"),
        name_field="startup_name",
        copied_fields={
            "startup_name": "name",
            "logo_url": "logo_url",
            "industry": "industry",
            "location": "location",
        },
    ),
    "expert": _EntityBinding(
        submission_model=models.ExpertSubmission,
        directory_model=models.Expert,
        core_fields=("expert_name", "photo_url", "title", "company", "bio"),
        name_field="expert_name",
        copied_fields={
            "expert_name": "name",
            "photo_url": "photo_url",
            "title": "title",
            "company": "company",
            "bio": "bio",
        },
    ),
}

# Columns an approved submission may fill from additional_data.
_PROMOTABLE = {
    "company": ("founder", "website", "location", "industry", "logo_url"),
    "expert": ("linkedin_url", "title", "bio", "photo_url", "company"),
}


def _binding(entity_type: str) -> _EntityBinding:
    try:
        return _BINDINGS[entity_type]
    except KeyError as exc:
        raise SubmissionError(f"Unknown entity type '{entity_type}'") from exc


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _commit(db: Session, operation: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Submission %s failed: %s", operation, exc)
        raise StoreError(f"{operation} failed: {exc}") from exc


def submit_registration(db: Session, event_id: UUID, entity_type: str, data: dict[str, Any]):
    """Validate form data and store it as a pending submission."""

    binding = _binding(entity_type)
    validate_submission(get_form_config(db, event_id, entity_type), data)
    core = {field: data.get(field) for field in binding.core_fields}
    extra = {key: value for key, value in data.items() if key not in binding.core_fields}
    submission = binding.submission_model(
        event_id=event_id,
        additional_data=extra,
        status="pending",
        submitted_at=_utcnow(),
        **core,
    )
    db.add(submission)
    _commit(db, f"submit {entity_type}")
    db.refresh(submission)
    logger.info("Received %s submission %s for event %s", entity_type, submission.submission_id, event_id)
    return submission


def submit_company_registration(db: Session, event_id: UUID, data: dict[str, Any]):
    return submit_registration(db, event_id, "company", data)


def submit_expert_registration(db: Session, event_id: UUID, data: dict[str, Any]):
    return submit_registration(db, event_id, "expert", data)


def list_submissions(db: Session, event_id: UUID, entity_type: str, status: str = "all") -> list:
    binding = _binding(entity_type)
    model = binding.submission_model
    query = db.query(model).filter(model.event_id == event_id)
    if status != "all":
        query = query.filter(model.status == status)
    return query.order_by(model.submitted_at.desc()).all()


def get_submission(db: Session, entity_type: str, submission_id: UUID):
    model = _binding(entity_type).submission_model
    submission = db.get(model, submission_id)
    if submission is None:
        raise SubmissionNotFound(f"{entity_type.capitalize()} submission not found")
    return submission


def _ensure_pending(submission, entity_type: str) -> None:
    if submission.status != "pending":
        raise SubmissionStateError(
            f"{entity_type.capitalize()} submission {submission.submission_id} is already {submission.status}"
        )


def approve_submission(db: Session, entity_type: str, submission_id: UUID):
    """Copy a pending submission into the directory and mark it approved.

    The directory row is committed first; if that fails the submission keeps
    its pending status and can be approved again.
    """

    binding = _binding(entity_type)
    submission = get_submission(db, entity_type, submission_id)
    _ensure_pending(submission, entity_type)

    extra = dict(submission.additional_data or {})
    fields: dict[str, Any] = {
        target: getattr(submission, source) for source, target in binding.copied_fields.items()
    }
    for column in _PROMOTABLE[entity_type]:
        if fields.get(column) in (None, "") and extra.get(column) not in (None, ""):
            fields[column] = extra[column]
    entry = binding.directory_model(event_id=submission.event_id, additional_data=extra, **fields)
    db.add(entry)
    _commit(db, f"approve {entity_type}")

    submission.status = "approved"
    submission.reviewed_at = _utcnow()
    _commit(db, f"mark {entity_type} approved")
    db.refresh(submission)
    logger.info("Approved %s submission %s", entity_type, submission_id)
    return submission


def reject_submission(db: Session, entity_type: str, submission_id: UUID, reason: str | None = None):
    submission = get_submission(db, entity_type, submission_id)
    _ensure_pending(submission, entity_type)
    submission.status = "rejected"
    submission.rejection_reason = reason or "Not specified"
    submission.reviewed_at = _utcnow()
    _commit(db, f"reject {entity_type}")
    db.refresh(submission)
    logger.info("Rejected %s submission %s: %s", entity_type, submission_id, submission.rejection_reason)
    return submission


def export_submissions_csv(db: Session, event_id: UUID, entity_type: str, status: str = "all") -> str:
    """Render submissions as CSV with one column per additional_data key."""

    binding = _binding(entity_type)
    rows = list_submissions(db, event_id, entity_type, status)
    extra_keys: list[str] = []
    for row in rows:
        for key in (row.additional_data or {}):
            if key not in extra_keys:
                extra_keys.append(key)

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["ID", "Status", "SubmittedAt", "RejectionReason", *binding.core_fields, *extra_keys])
    for row in rows:
        extra = row.additional_data or {}
        writer.writerow(
            [
                str(row.submission_id),
                row.status,
                row.submitted_at.isoformat() if row.submitted_at else "",
                row.rejection_reason or "",
                *[getattr(row, field) or "" for field in binding.core_fields],
                *[_cell(extra.get(key)) for key in extra_keys],
            ]
        )
    return output.getvalue()


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return "; ".join(str(item) for item in value)
    return str(value)
