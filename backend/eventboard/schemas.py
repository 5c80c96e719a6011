from datetime import date, datetime, time
from typing import Annotated, Optional, Any, Dict, Literal, List
import re
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from uuid import UUID


EntityType = Literal["company", "expert"]
FieldType = Literal[
    "text",
    "email",
    "url",
    "tel",
    "number",
    "textarea",
    "select",
    "multiselect",
    "file",
    "date",
]
SubmissionStatus = Literal["pending", "approved", "rejected"]


def normalise_clock(value: Any) -> Optional[str]:
    """Return a time-of-day as an ``HH:MM`` string."""

    if value is None:
        return None
    if isinstance(value, (datetime, time)):
        return f"{value.hour:02d}:{value.minute:02d}"
    text = str(value).strip()
    if not text:
        return None
    parts = text.split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid time '{text}', expected HH:MM")
    hours, minutes = int(parts[0]), int(parts[1])
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid time '{text}', expected HH:MM")
    return f"{hours:02d}:{minutes:02d}"


ClockTime = Annotated[Optional[str], BeforeValidator(normalise_clock)]


def reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("may not be null")
    return value


# Optional in partial updates, but an explicit null is refused for NOT NULL columns.
NotNull = AfterValidator(reject_null)


class EventCreate(BaseModel):
    event_name: str
    header_image_url: str = ""
    background_image_url: str = ""
    footer_image_url: str = ""
    header_height: str = "16rem"


class EventUpdate(BaseModel):
    event_name: Annotated[Optional[str], NotNull] = None
    header_image_url: Optional[str] = None
    background_image_url: Optional[str] = None
    footer_image_url: Optional[str] = None
    header_height: Optional[str] = None
    status: Annotated[Optional[str], NotNull] = None


class EventOut(BaseModel):
    event_id: UUID
    event_name: str
    header_image_url: Optional[str] = ""
    background_image_url: Optional[str] = ""
    footer_image_url: Optional[str] = ""
    header_height: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class DayCreate(BaseModel):
    day_name: str
    day_date: Optional[date] = None
    day_number: Optional[int] = None


class DayUpdate(BaseModel):
    day_name: Annotated[Optional[str], NotNull] = None
    day_date: Optional[date] = None
    day_number: Annotated[Optional[int], NotNull] = None


class DayOut(BaseModel):
    day_id: UUID
    event_id: UUID
    day_number: int
    day_name: str
    day_date: Optional[date] = None
    model_config = ConfigDict(from_attributes=True)


class SlotCreate(BaseModel):
    slot_title: str
    start_time: ClockTime = None
    end_time: ClockTime = None
    presenter_name: str = ""
    show_presenter: Optional[bool] = None
    sort_order: Optional[int] = None


class SlotUpdate(BaseModel):
    slot_title: Annotated[Optional[str], NotNull] = None
    start_time: ClockTime = None
    end_time: ClockTime = None
    presenter_name: Optional[str] = None
    show_presenter: Annotated[Optional[bool], NotNull] = None
    sort_order: Annotated[Optional[int], NotNull] = None


class SlotOut(BaseModel):
    slot_id: UUID
    day_id: UUID
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    slot_title: str
    presenter_name: Optional[str] = ""
    show_presenter: bool
    sort_order: int
    model_config = ConfigDict(from_attributes=True)


class DayWithSlots(DayOut):
    slots: List[SlotOut] = Field(default_factory=list)


class ExpertCreate(BaseModel):
    name: str
    title: str = ""
    bio: str = ""
    linkedin_url: str = ""
    photo_url: Optional[str] = None
    company: Optional[str] = None
    additional_data: Dict[str, Any] = Field(default_factory=dict)


class ExpertUpdate(BaseModel):
    name: Annotated[Optional[str], NotNull] = None
    title: Optional[str] = None
    bio: Optional[str] = None
    linkedin_url: Optional[str] = None
    photo_url: Optional[str] = None
    company: Optional[str] = None
    additional_data: Optional[Dict[str, Any]] = None


class ExpertOut(BaseModel):
    expert_id: UUID
    event_id: UUID
    name: str
    title: Optional[str] = ""
    bio: Optional[str] = ""
    linkedin_url: Optional[str] = ""
    photo_url: Optional[str] = None
    company: Optional[str] = None
    additional_data: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class CompanyCreate(BaseModel):
    name: str
    founder: str = ""
    location: str = ""
    industry: str = ""
    logo_url: Optional[str] = None
    website: Optional[str] = None
    additional_data: Dict[str, Any] = Field(default_factory=dict)


class CompanyUpdate(BaseModel):
    name: Annotated[Optional[str], NotNull] = None
    founder: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None
    logo_url: Optional[str] = None
    website: Optional[str] = None
    additional_data: Optional[Dict[str, Any]] = None


class CompanyOut(BaseModel):
    company_id: UUID
    event_id: UUID
    name: str
    founder: Optional[str] = ""
    location: Optional[str] = ""
    industry: Optional[str] = ""
    logo_url: Optional[str] = None
    website: Optional[str] = None
    additional_data: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class FullAgendaOut(BaseModel):
    event: EventOut
    days: List[DayWithSlots]
    experts: List[ExpertOut]
    companies: List[CompanyOut]


# Spreadsheet import payloads


class ParsedDayRow(BaseModel):
    day_name: str
    day_date: date


class ParsedSlotRow(BaseModel):
    day_name: str
    slot_title: str
    start_time: ClockTime = None
    end_time: ClockTime = None
    presenter_name: str = ""
    show_presenter: bool = True


class ParsedExpertRow(BaseModel):
    name: str
    title: str = ""
    bio: str = ""
    linkedin_url: str = ""


class ParsedCompanyRow(BaseModel):
    name: str
    founder: str = ""
    location: str = ""
    industry: str = ""


class AgendaImportPayload(BaseModel):
    days: List[ParsedDayRow] = Field(default_factory=list)
    slots: List[ParsedSlotRow] = Field(default_factory=list)
    experts: List[ParsedExpertRow] = Field(default_factory=list)
    companies: List[ParsedCompanyRow] = Field(default_factory=list)


class ReconciliationCounts(BaseModel):
    added: int = 0
    updated: int = 0
    skipped: int = 0


class ReconciliationReport(BaseModel):
    days: ReconciliationCounts = Field(default_factory=ReconciliationCounts)
    slots: ReconciliationCounts = Field(default_factory=ReconciliationCounts)
    experts: ReconciliationCounts = Field(default_factory=ReconciliationCounts)
    companies: ReconciliationCounts = Field(default_factory=ReconciliationCounts)


class ReconciliationResult(BaseModel):
    success: bool = True
    stats: ReconciliationReport


class GoogleSheetImportRequest(BaseModel):
    url: str


# Registration forms and submissions


class FormFieldConfigIn(BaseModel):
    field_name: str
    field_label: str
    field_type: FieldType = "text"
    is_required: bool = False
    show_in_card: bool = True
    display_order: int = 0
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    field_options: Optional[List[str]] = None
    validation_rules: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("validation_rules")
    @classmethod
    def check_validation_rules(cls, rules):
        """Coerce numeric limits and compile ``pattern`` so bad rules fail on save."""
        if rules is None:
            return rules
        checked = dict(rules)
        for key in ("minLength", "maxLength"):
            if key in checked:
                try:
                    checked[key] = int(checked[key])
                except (TypeError, ValueError) as exc:
                    raise ValueError(f"{key} must be an integer") from exc
        for key in ("min", "max"):
            if key in checked:
                try:
                    checked[key] = float(checked[key])
                except (TypeError, ValueError) as exc:
                    raise ValueError(f"{key} must be a number") from exc
        if checked.get("pattern"):
            try:
                re.compile(checked["pattern"])
            except (re.error, TypeError) as exc:
                raise ValueError(f"pattern is not a valid regular expression: {exc}") from exc
        return checked


class FormFieldConfigOut(FormFieldConfigIn):
    config_id: Optional[UUID] = None
    event_id: Optional[UUID] = None
    entity_type: Optional[EntityType] = None
    validation_rules: Optional[Dict[str, Any]] = None
    model_config = ConfigDict(from_attributes=True)


class CompanySubmissionOut(BaseModel):
    submission_id: UUID
    event_id: UUID
    startup_name: str
    logo_url: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    additional_data: Dict[str, Any] = Field(default_factory=dict)
    status: SubmissionStatus
    rejection_reason: Optional[str] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class ExpertSubmissionOut(BaseModel):
    submission_id: UUID
    event_id: UUID
    expert_name: str
    photo_url: Optional[str] = None
    title: Optional[str] = None
    company: Optional[str] = None
    bio: Optional[str] = None
    additional_data: Dict[str, Any] = Field(default_factory=dict)
    status: SubmissionStatus
    rejection_reason: Optional[str] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class SubmissionReject(BaseModel):
    reason: Optional[str] = None


class ImageUploadOut(BaseModel):
    url: str
    storage_path: str
    size: int
