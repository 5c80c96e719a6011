import uuid
from datetime import datetime, timezone
from sqlalchemy import (
    Column,
    String,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    JSON,
    Integer,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID

from .database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Parent/child links are plain foreign keys without ON DELETE behaviour;
# dependent rows are removed by services.cascade before their parents.


class Event(Base):
    __tablename__ = "events"
    event_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_name = Column(String, nullable=False)
    header_image_url = Column(String, default="")
    background_image_url = Column(String, default="")
    footer_image_url = Column(String, default="")
    header_height = Column(String, default="16rem")
    status = Column(String, default="active", nullable=False)
    created_at = Column(DateTime, default=_utcnow)


class EventDay(Base):
    __tablename__ = "event_days"
    day_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.event_id"), nullable=False, index=True)
    day_number = Column(Integer, nullable=False, default=1)
    day_name = Column(String, nullable=False)
    day_date = Column(Date, nullable=True)


class AgendaSlot(Base):
    __tablename__ = "agenda_slots"
    slot_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    day_id = Column(UUID(as_uuid=True), ForeignKey("event_days.day_id"), nullable=False, index=True)
    start_time = Column(String(5), nullable=True)
    end_time = Column(String(5), nullable=True)
    slot_title = Column(String, nullable=False)
    presenter_name = Column(String, default="")
    show_presenter = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=999, nullable=False)


class Expert(Base):
    __tablename__ = "experts"
    expert_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.event_id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    title = Column(String, default="")
    bio = Column(Text, default="")
    linkedin_url = Column(String, default="")
    photo_url = Column(String, nullable=True)
    company = Column(String, nullable=True)
    additional_data = Column(JSON, default=dict)
    created_at = Column(DateTime, default=_utcnow)


class Company(Base):
    __tablename__ = "companies"
    company_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.event_id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    founder = Column(String, default="")
    location = Column(String, default="")
    industry = Column(String, default="")
    logo_url = Column(String, nullable=True)
    website = Column(String, nullable=True)
    additional_data = Column(JSON, default=dict)
    created_at = Column(DateTime, default=_utcnow)


class CompanySubmission(Base):
    __tablename__ = "company_submissions"
    submission_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.event_id"), nullable=False, index=True)
    startup_name = Column(String, nullable=False)
    logo_url = Column(String, nullable=True)
    industry = Column(String, nullable=True)
    location = Column(String, nullable=True)
    additional_data = Column(JSON, default=dict)
    status = Column(String, default="pending", nullable=False)
    rejection_reason = Column(Text, nullable=True)
    submitted_at = Column(DateTime, default=_utcnow)
    reviewed_at = Column(DateTime, nullable=True)


class ExpertSubmission(Base):
    __tablename__ = "expert_submissions"
    submission_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.event_id"), nullable=False, index=True)
    expert_name = Column(String, nullable=False)
    photo_url = Column(String, nullable=True)
    title = Column(String, nullable=True)
    company = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    additional_data = Column(JSON, default=dict)
    status = Column(String, default="pending", nullable=False)
    rejection_reason = Column(Text, nullable=True)
    submitted_at = Column(DateTime, default=_utcnow)
    reviewed_at = Column(DateTime, nullable=True)


class FormFieldConfig(Base):
    __tablename__ = "form_field_configs"
    config_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.event_id"), nullable=False, index=True)
    entity_type = Column(String, nullable=False)
    field_name = Column(String, nullable=False)
    field_label = Column(String, nullable=False)
    field_type = Column(String, nullable=False, default="text")
    is_required = Column(Boolean, default=False, nullable=False)
    show_in_card = Column(Boolean, default=True, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    placeholder = Column(String, nullable=True)
    help_text = Column(String, nullable=True)
    field_options = Column(JSON, nullable=True)
    validation_rules = Column(JSON, default=dict)
