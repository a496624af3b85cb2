from pydantic import BaseModel, Field


class SponsorshipCreate(BaseModel):
    animal_id: str | None = None
    animal_name: str | None = None
    animal_type: str | None = None
    amount_per_month: float = Field(..., gt=0)
    duration_months: int = Field(..., ge=1, le=120)
    sponsor_name: str | None = None
    sponsor_email: str | None = None
    sponsor_phone: str | None = None
    message: str | None = None


class Sponsorship(BaseModel):
    id: str
    animal_id: str | None = None
    animal_name: str | None = None
    animal_type: str | None = None
    amount_per_month: float
    duration_months: int
    total_amount: float
    sponsor_name: str | None = None
    sponsor_email: str | None = None
    sponsor_phone: str | None = None
    message: str | None = None
    status: str
    user_id: str | None = None
    start_date: str
    end_date: str
    created_at: str
