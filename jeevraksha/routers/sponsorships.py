import calendar
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from jeevraksha.database import count_rows, get_db, insert_row
from jeevraksha.dependencies import get_current_user, get_optional_user
from jeevraksha.models.common import paginate
from jeevraksha.models.profile import AuthUser
from jeevraksha.models.sponsorship import Sponsorship, SponsorshipCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sponsorships", tags=["sponsorships"])


def add_months(start: datetime, months: int) -> datetime:
    """Same day-of-month ``months`` later, clamped to the end of shorter months."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


@router.post("", status_code=201)
async def create_sponsorship(body: SponsorshipCreate, user: AuthUser | None = Depends(get_optional_user)):
    db = await get_db()
    start = datetime.now(timezone.utc)
    sponsorship = await insert_row(db, "sponsorships", {
        **body.model_dump(),
        "total_amount": body.amount_per_month * body.duration_months,
        "status": "active",
        "user_id": user.id if user else None,
        "start_date": start.isoformat(),
        "end_date": add_months(start, body.duration_months).isoformat(),
        "created_at": start.isoformat(),
    })
    logger.info("Sponsorship created: %s for %d months", sponsorship["id"], body.duration_months)
    return {
        "success": True,
        "message": "Sponsorship created successfully!",
        "sponsorship": Sponsorship.model_validate(sponsorship),
    }


@router.get("")
async def list_sponsorships(
    status: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    db = await get_db()
    where, params = ("status = ?", [status]) if status else ("", [])
    total = await count_rows(db, "sponsorships", where, params)
    query = "SELECT * FROM sponsorships"
    if where:
        query += f" WHERE {where}"
    query += " ORDER BY created_at DESC LIMIT ? OFFSET ?"
    rows = await db.fetch_all(query, [*params, limit, (page - 1) * limit])
    return {
        "success": True,
        "sponsorships": [Sponsorship.model_validate(dict(r)) for r in rows],
        "pagination": paginate(page, limit, total),
    }


@router.get("/my")
async def my_sponsorships(user: AuthUser = Depends(get_current_user)):
    db = await get_db()
    rows = await db.fetch_all(
        "SELECT * FROM sponsorships WHERE user_id = ? ORDER BY created_at DESC", (user.id,)
    )
    return {"success": True, "sponsorships": [Sponsorship.model_validate(dict(r)) for r in rows]}
