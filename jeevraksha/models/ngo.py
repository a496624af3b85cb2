from pydantic import BaseModel, Field

from jeevraksha.models.common import CsvList, JsonList, Latitude, Longitude


class NGORegister(BaseModel):
    name: str = Field(..., min_length=1)
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    registration_number: str | None = None
    description: str | None = None
    services: CsvList = Field(default_factory=list)
    latitude: Latitude | None = None
    longitude: Longitude | None = None


class NGOUpdate(BaseModel):
    """Fields an NGO may change about itself. Verification is admin-only."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    description: str | None = None
    services: CsvList | None = None
    latitude: Latitude | None = None
    longitude: Longitude | None = None


class NGOVerify(BaseModel):
    is_verified: bool


class NGO(BaseModel):
    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    registration_number: str | None = None
    description: str | None = None
    services: JsonList = Field(default_factory=list)
    latitude: float | None = None
    longitude: float | None = None
    is_verified: bool = False
    status: str = "pending"
    verified_at: str | None = None
    created_at: str
    updated_at: str | None = None


class NearbyNGO(NGO):
    distance_km: float


class NGODetail(NGO):
    report_count: int = 0
