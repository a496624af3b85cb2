import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from jeevraksha.database import count_rows, fetch_row, get_db, insert_row, update_row, utc_now
from jeevraksha.dependencies import get_current_user, require_role
from jeevraksha.models.common import Role
from jeevraksha.models.profile import AuthUser
from jeevraksha.models.volunteer import (
    AvailabilityUpdate,
    LeaderboardEntry,
    Volunteer,
    VolunteerDetail,
    VolunteerRegister,
    VolunteerVerify,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/volunteers", tags=["volunteers"])


@router.post("/register", status_code=201)
async def register_volunteer(body: VolunteerRegister):
    db = await get_db()
    volunteer = await insert_row(db, "volunteers", {
        **body.model_dump(),
        "is_active": True,
        "is_verified": False,
        "total_rescues": 0,
        "created_at": utc_now(),
    })
    logger.info("Volunteer registered: %s (%s)", volunteer["id"], volunteer["city"] or "no city")
    return {
        "success": True,
        "message": "Volunteer registration successful!",
        "volunteer": Volunteer.model_validate(volunteer),
    }


@router.get("")
async def list_volunteers(
    city: str | None = None,
    is_active: bool | None = None,
    has_vehicle: bool | None = None,
):
    db = await get_db()
    clauses, params = [], []
    if city:
        clauses.append("LOWER(city) LIKE ?")
        params.append(f"%{city.lower()}%")
    if is_active is not None:
        clauses.append("is_active = ?")
        params.append(int(is_active))
    if has_vehicle is not None:
        clauses.append("has_vehicle = ?")
        params.append(int(has_vehicle))

    query = "SELECT * FROM volunteers"
    if clauses:
        query += " WHERE " + " AND ".join(clauses)
    query += " ORDER BY total_rescues DESC"
    rows = await db.fetch_all(query, params)
    return {"success": True, "volunteers": [Volunteer.model_validate(dict(r)) for r in rows]}


@router.get("/stats/leaderboard")
async def leaderboard(limit: int = Query(10, ge=1, le=100)):
    db = await get_db()
    rows = await db.fetch_all(
        "SELECT id, name, city, total_rescues, is_verified FROM volunteers "
        "WHERE is_active = 1 ORDER BY total_rescues DESC LIMIT ?",
        (limit,),
    )
    return {"success": True, "leaderboard": [LeaderboardEntry.model_validate(dict(r)) for r in rows]}


@router.get("/{volunteer_id}")
async def get_volunteer(volunteer_id: str):
    db = await get_db()
    volunteer = await fetch_row(db, "volunteers", volunteer_id)
    if not volunteer:
        raise HTTPException(status_code=404, detail="Volunteer not found")
    rescue_count = await count_rows(db, "reports", "assigned_volunteer_id = ?", (volunteer_id,))
    return {"success": True, "volunteer": VolunteerDetail(**volunteer, rescue_count=rescue_count)}


@router.put("/{volunteer_id}/availability")
async def update_availability(
    volunteer_id: str,
    body: AvailabilityUpdate,
    user: AuthUser = Depends(get_current_user),
):
    db = await get_db()
    volunteer = await update_row(db, "volunteers", volunteer_id, {
        "is_active": body.is_active,
        "availability": body.availability,
        "updated_at": utc_now(),
    })
    if not volunteer:
        raise HTTPException(status_code=404, detail="Volunteer not found")
    return {"success": True, "message": "Availability updated", "volunteer": Volunteer.model_validate(volunteer)}


@router.put("/{volunteer_id}/verify")
async def verify_volunteer(
    volunteer_id: str,
    body: VolunteerVerify,
    user: AuthUser = Depends(require_role(Role.NGO, Role.ADMIN)),
):
    db = await get_db()
    now = utc_now()
    volunteer = await update_row(db, "volunteers", volunteer_id, {
        "is_verified": body.is_verified,
        "verified_at": now if body.is_verified else None,
        "updated_at": now,
    })
    if not volunteer:
        raise HTTPException(status_code=404, detail="Volunteer not found")

    outcome = "verified" if body.is_verified else "unverified"
    return {"success": True, "message": f"Volunteer {outcome}", "volunteer": Volunteer.model_validate(volunteer)}


@router.post("/{volunteer_id}/complete-rescue")
async def complete_rescue(
    volunteer_id: str,
    user: AuthUser = Depends(require_role(Role.NGO, Role.ADMIN)),
):
    db = await get_db()
    if not await fetch_row(db, "volunteers", volunteer_id):
        raise HTTPException(status_code=404, detail="Volunteer not found")

    # Atomic increment
    await db.execute(
        "UPDATE volunteers SET total_rescues = total_rescues + 1, updated_at = ? WHERE id = ?",
        (utc_now(), volunteer_id),
    )
    await db.commit()
    volunteer = await fetch_row(db, "volunteers", volunteer_id)
    return {"success": True, "message": "Rescue count updated", "volunteer": Volunteer.model_validate(volunteer)}
