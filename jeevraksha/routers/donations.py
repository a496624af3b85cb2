import hmac
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from jeevraksha.config import PAYMENT_BASE_URL, PAYMENT_WEBHOOK_SECRET
from jeevraksha.database import count_rows, get_db, insert_row, update_row, utc_now
from jeevraksha.dependencies import get_current_user, get_optional_user
from jeevraksha.models.common import paginate
from jeevraksha.models.donation import (
    Donation,
    DonationCreate,
    DonationStats,
    PaymentStatus,
    PaymentWebhook,
    PublicDonation,
)
from jeevraksha.models.profile import AuthUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/donations", tags=["donations"])


@router.post("", status_code=201)
async def create_donation(body: DonationCreate, user: AuthUser | None = Depends(get_optional_user)):
    """Record a pending donation and hand back a checkout link."""
    db = await get_db()
    donation = await insert_row(db, "donations", {
        "amount": body.amount,
        "currency": body.currency,
        "donor_name": "Anonymous" if body.is_anonymous else body.donor_name,
        "donor_email": body.donor_email,
        "donor_phone": body.donor_phone,
        "message": body.message,
        "is_anonymous": body.is_anonymous,
        "donation_type": body.donation_type or "general",
        "ngo_id": body.ngo_id,
        "payment_method": body.payment_method,
        "payment_status": PaymentStatus.PENDING.value,
        "user_id": user.id if user else None,
        "created_at": utc_now(),
    })
    logger.info("Donation initiated: %s %.2f %s", donation["id"], donation["amount"], donation["currency"])
    return {
        "success": True,
        "message": "Donation initiated",
        "donation": Donation.model_validate(donation),
        "payment_url": f"{PAYMENT_BASE_URL}/{donation['id']}",
    }


@router.post("/webhook")
async def payment_webhook(body: PaymentWebhook, x_webhook_secret: str | None = Header(None)):
    """Payment gateway callback updating a donation's payment status."""
    if PAYMENT_WEBHOOK_SECRET and not hmac.compare_digest(
        (x_webhook_secret or "").encode(), PAYMENT_WEBHOOK_SECRET.encode()
    ):
        logger.warning("Rejected payment webhook for %s: bad secret", body.donation_id)
        raise HTTPException(status_code=401, detail="Invalid webhook secret")

    db = await get_db()
    now = utc_now()
    completed = body.payment_status == PaymentStatus.COMPLETED
    donation = await update_row(db, "donations", body.donation_id, {
        "payment_status": body.payment_status.value,
        "transaction_id": body.transaction_id,
        "payment_details": body.payment_details,
        "paid_at": now if completed else None,
        "updated_at": now,
    })
    if not donation:
        raise HTTPException(status_code=404, detail="Donation not found")

    logger.info("Donation %s payment %s", body.donation_id, body.payment_status.value)
    return {"success": True, "donation": Donation.model_validate(donation)}


@router.get("")
async def list_donations(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    """Completed donations, newest first, without donor contact details."""
    db = await get_db()
    total = await count_rows(db, "donations", "payment_status = ?", (PaymentStatus.COMPLETED.value,))
    rows = await db.fetch_all(
        "SELECT id, amount, currency, donor_name, message, donation_type, created_at FROM donations "
        "WHERE payment_status = ? ORDER BY created_at DESC LIMIT ? OFFSET ?",
        (PaymentStatus.COMPLETED.value, limit, (page - 1) * limit),
    )
    return {
        "success": True,
        "donations": [PublicDonation.model_validate(dict(r)) for r in rows],
        "pagination": paginate(page, limit, total),
    }


async def completed_donation_total(db) -> tuple[float, int]:
    row = await db.fetch_one(
        "SELECT COALESCE(SUM(amount), 0) AS total, COUNT(*) AS count FROM donations WHERE payment_status = ?",
        (PaymentStatus.COMPLETED.value,),
    )
    return float(row["total"]), int(row["count"])


@router.get("/stats")
async def donation_stats():
    db = await get_db()
    total_amount, total_donations = await completed_donation_total(db)
    return {
        "success": True,
        "stats": DonationStats(
            total_amount=total_amount,
            total_donations=total_donations,
            average_donation=total_amount / total_donations if total_donations else 0,
        ),
    }


@router.get("/my")
async def my_donations(user: AuthUser = Depends(get_current_user)):
    db = await get_db()
    rows = await db.fetch_all(
        "SELECT * FROM donations WHERE user_id = ? ORDER BY created_at DESC", (user.id,)
    )
    return {"success": True, "donations": [Donation.model_validate(dict(r)) for r in rows]}
