from pydantic import BaseModel, Field

from jeevraksha.models.common import CsvList, FormBool, JsonList


class VolunteerRegister(BaseModel):
    name: str = Field(..., min_length=1)
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    skills: CsvList = Field(default_factory=list)
    availability: str | None = None
    has_vehicle: FormBool = False
    vehicle_type: str | None = None
    experience: str | None = None
    motivation: str | None = None


class AvailabilityUpdate(BaseModel):
    is_active: bool
    availability: str | None = None


class VolunteerVerify(BaseModel):
    is_verified: bool


class Volunteer(BaseModel):
    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    skills: JsonList = Field(default_factory=list)
    availability: str | None = None
    has_vehicle: bool = False
    vehicle_type: str | None = None
    experience: str | None = None
    motivation: str | None = None
    is_active: bool = True
    is_verified: bool = False
    total_rescues: int = 0
    verified_at: str | None = None
    created_at: str
    updated_at: str | None = None


class VolunteerDetail(Volunteer):
    rescue_count: int = 0


class LeaderboardEntry(BaseModel):
    id: str
    name: str
    city: str | None = None
    total_rescues: int
    is_verified: bool
