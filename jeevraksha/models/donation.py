from enum import Enum

from pydantic import BaseModel, Field

from jeevraksha.models.common import FormBool, JsonObject


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class DonationCreate(BaseModel):
    amount: float = Field(..., gt=0)
    currency: str = "INR"
    donor_name: str | None = None
    donor_email: str | None = None
    donor_phone: str | None = None
    message: str | None = None
    is_anonymous: FormBool = False
    donation_type: str | None = None
    ngo_id: str | None = None
    payment_method: str | None = None


class PaymentWebhook(BaseModel):
    donation_id: str
    payment_status: PaymentStatus
    transaction_id: str | None = None
    payment_details: dict | None = None


class Donation(BaseModel):
    id: str
    amount: float
    currency: str
    donor_name: str | None = None
    donor_email: str | None = None
    donor_phone: str | None = None
    message: str | None = None
    is_anonymous: bool = False
    donation_type: str
    ngo_id: str | None = None
    payment_method: str | None = None
    payment_status: str
    transaction_id: str | None = None
    payment_details: JsonObject = None
    paid_at: str | None = None
    user_id: str | None = None
    created_at: str
    updated_at: str | None = None


class PublicDonation(BaseModel):
    """Donation as listed publicly: no contact details."""

    id: str
    amount: float
    currency: str
    donor_name: str | None = None
    message: str | None = None
    donation_type: str
    created_at: str


class DonationStats(BaseModel):
    total_amount: float
    total_donations: int
    average_donation: float
