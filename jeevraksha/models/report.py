from enum import Enum

from pydantic import BaseModel, Field

from jeevraksha.models.common import Latitude, Longitude


class ReportStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    RESCUED = "rescued"
    CLOSED = "closed"


class UrgencyLevel(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ReportCreate(BaseModel):
    animal_type: str = ""
    condition: str = ""
    location: str = ""
    description: str | None = None
    latitude: Latitude | None = None
    longitude: Longitude | None = None
    landmark: str | None = None
    image_url: str | None = None
    reporter_name: str | None = None
    reporter_phone: str | None = None
    reporter_email: str | None = None
    urgency_level: UrgencyLevel | None = None


class ReportStatusUpdate(BaseModel):
    status: ReportStatus
    notes: str | None = None


class AssignNGO(BaseModel):
    ngo_id: str


class AssignVolunteer(BaseModel):
    volunteer_id: str


class Report(BaseModel):
    id: str
    animal_type: str
    condition: str
    description: str | None = ""
    location: str
    latitude: float | None = None
    longitude: float | None = None
    landmark: str | None = ""
    image_url: str | None = None
    reporter_name: str | None = None
    reporter_phone: str | None = None
    reporter_email: str | None = None
    urgency_level: str
    status: str
    assigned_ngo_id: str | None = None
    assigned_volunteer_id: str | None = None
    user_id: str | None = None
    created_at: str
    updated_at: str | None = None


class ReportUpdateEntry(BaseModel):
    id: str
    report_id: str
    status: str
    notes: str | None = None
    updated_by: str | None = None
    created_at: str


class ContactRef(BaseModel):
    id: str
    name: str
    phone: str | None = None


class ReportDetail(Report):
    assigned_ngo: ContactRef | None = None
    assigned_volunteer: ContactRef | None = None
    updates: list[ReportUpdateEntry] = Field(default_factory=list)


class TrackedLocation(BaseModel):
    address: str
    landmark: str | None = None


class TrackedAssignee(BaseModel):
    name: str
    phone: str | None = None


class TrackedReport(BaseModel):
    """Public view of a report, safe to show to anyone holding its ID."""

    report_id: str
    animal_type: str
    animal_condition: str
    description: str | None = None
    status: str
    urgency: str
    location: TrackedLocation
    reporter_name: str | None = None
    created_at: str
    updated_at: str | None = None
    assigned_to: TrackedAssignee | None = None
    volunteer: TrackedAssignee | None = None
