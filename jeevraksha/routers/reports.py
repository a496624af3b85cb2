import logging
import re

from fastapi import APIRouter, Depends, HTTPException, Query

from jeevraksha.database import count_rows, fetch_row, get_db, insert_row, update_row, utc_now
from jeevraksha.dependencies import get_current_user, get_optional_user, require_role
from jeevraksha.models.common import Role, paginate
from jeevraksha.models.profile import AuthUser
from jeevraksha.models.report import (
    AssignNGO,
    AssignVolunteer,
    ContactRef,
    Report,
    ReportCreate,
    ReportDetail,
    ReportStatus,
    ReportStatusUpdate,
    ReportUpdateEntry,
    TrackedAssignee,
    TrackedLocation,
    TrackedReport,
    UrgencyLevel,
)
from jeevraksha.services.event_bus import event_bus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["reports"])

# Printed receipts show IDs as "#JR-XXXXXXXX"
_TRACKING_PREFIX = re.compile(r"^#?(JR-)?", re.IGNORECASE)
_LIKE_SPECIAL = re.compile(r"[\\%_]")


def _escape_like(value: str) -> str:
    """Make ``%``, ``_`` and ``\\`` match literally in a LIKE pattern."""
    return _LIKE_SPECIAL.sub(lambda m: "\\" + m.group(0), value)


@router.post("", status_code=201)
async def create_report(body: ReportCreate, user: AuthUser | None = Depends(get_optional_user)):
    """File a new rescue report. Anonymous reports are allowed."""
    if not body.animal_type or not body.condition or not body.location:
        raise HTTPException(status_code=400, detail="Animal type, condition, and location are required")

    db = await get_db()
    report = await insert_row(db, "reports", {
        "animal_type": body.animal_type,
        "condition": body.condition,
        "description": body.description or "",
        "location": body.location,
        "latitude": body.latitude,
        "longitude": body.longitude,
        "landmark": body.landmark or "",
        "image_url": body.image_url,
        "reporter_name": body.reporter_name or "Anonymous",
        "reporter_phone": body.reporter_phone or "",
        "reporter_email": body.reporter_email or "",
        "urgency_level": (body.urgency_level or UrgencyLevel.MEDIUM).value,
        "status": ReportStatus.PENDING.value,
        "user_id": user.id if user else None,
        "created_at": utc_now(),
    })
    logger.info("Report created: %s (%s, %s)", report["id"], report["animal_type"], report["urgency_level"])

    await event_bus.publish(report["id"], {
        "type": "report_created",
        "status": report["status"],
        "urgency_level": report["urgency_level"],
        "animal_type": report["animal_type"],
    })

    return {"success": True, "message": "Report submitted successfully!", "report": Report.model_validate(report)}


@router.get("")
async def list_reports(
    status: ReportStatus | None = None,
    animal_type: str | None = None,
    urgency_level: UrgencyLevel | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    db = await get_db()
    clauses, params = [], []
    if status:
        clauses.append("status = ?")
        params.append(status.value)
    if animal_type:
        clauses.append("animal_type = ?")
        params.append(animal_type)
    if urgency_level:
        clauses.append("urgency_level = ?")
        params.append(urgency_level.value)
    where = " AND ".join(clauses)

    total = await count_rows(db, "reports", where, params)
    query = "SELECT * FROM reports"
    if where:
        query += f" WHERE {where}"
    query += " ORDER BY created_at DESC LIMIT ? OFFSET ?"
    rows = await db.fetch_all(query, [*params, limit, (page - 1) * limit])

    return {
        "success": True,
        "reports": [Report.model_validate(dict(r)) for r in rows],
        "pagination": paginate(page, limit, total),
    }


@router.get("/my/reports")
async def my_reports(user: AuthUser = Depends(get_current_user)):
    db = await get_db()
    rows = await db.fetch_all(
        "SELECT * FROM reports WHERE user_id = ? ORDER BY created_at DESC", (user.id,)
    )
    return {"success": True, "reports": [Report.model_validate(dict(r)) for r in rows]}


async def _contact_ref(db, table: str, row_id: str | None) -> dict | None:
    if not row_id:
        return None
    return await db.fetch_one(f"SELECT id, name, phone FROM {table} WHERE id = ?", (row_id,))


@router.get("/track/{tracking_id}")
async def track_report(tracking_id: str):
    """Public status lookup by full report ID or a leading fragment of it."""
    report_id = _TRACKING_PREFIX.sub("", tracking_id.strip()).lower()
    if not report_id:
        raise HTTPException(status_code=404, detail="Report not found")

    db = await get_db()
    report = await fetch_row(db, "reports", report_id)
    if not report:
        row = await db.fetch_one(
            "SELECT * FROM reports WHERE LOWER(id) LIKE ? ESCAPE '\\' ORDER BY created_at DESC LIMIT 1",
            (_escape_like(report_id) + "%",),
        )
        report = dict(row) if row else None
    if not report:
        raise HTTPException(
            status_code=404, detail="Report not found. Please check the Report ID and try again."
        )

    ngo = await _contact_ref(db, "ngos", report["assigned_ngo_id"])
    volunteer = await _contact_ref(db, "volunteers", report["assigned_volunteer_id"])
    tracked = TrackedReport(
        report_id=report["id"],
        animal_type=report["animal_type"],
        animal_condition=report["condition"],
        description=report["description"],
        status=report["status"],
        urgency=report["urgency_level"],
        location=TrackedLocation(address=report["location"], landmark=report["landmark"]),
        reporter_name=report["reporter_name"],
        created_at=report["created_at"],
        updated_at=report["updated_at"],
        assigned_to=TrackedAssignee(name=ngo["name"], phone=ngo["phone"]) if ngo else None,
        volunteer=TrackedAssignee(name=volunteer["name"], phone=volunteer["phone"]) if volunteer else None,
    )
    return {"success": True, "data": tracked}


@router.get("/{report_id}")
async def get_report(report_id: str):
    db = await get_db()
    report = await fetch_row(db, "reports", report_id)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")

    ngo = await _contact_ref(db, "ngos", report["assigned_ngo_id"])
    volunteer = await _contact_ref(db, "volunteers", report["assigned_volunteer_id"])
    updates = await db.fetch_all(
        "SELECT * FROM report_updates WHERE report_id = ? ORDER BY created_at ASC", (report_id,)
    )
    detail = ReportDetail(
        **report,
        assigned_ngo=ContactRef.model_validate(dict(ngo)) if ngo else None,
        assigned_volunteer=ContactRef.model_validate(dict(volunteer)) if volunteer else None,
        updates=[ReportUpdateEntry.model_validate(dict(u)) for u in updates],
    )
    return {"success": True, "report": detail}


@router.put("/{report_id}/status")
async def update_report_status(
    report_id: str,
    body: ReportStatusUpdate,
    user: AuthUser = Depends(require_role(Role.NGO, Role.ADMIN)),
):
    db = await get_db()
    now = utc_now()
    report = await update_row(db, "reports", report_id, {"status": body.status.value, "updated_at": now})
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")

    await insert_row(db, "report_updates", {
        "report_id": report_id,
        "status": body.status.value,
        "notes": body.notes,
        "updated_by": user.id,
        "created_at": now,
    })
    logger.info("Report %s status -> %s by %s", report_id, body.status.value, user.id)

    await event_bus.publish(report_id, {
        "type": "report_status_changed",
        "status": body.status.value,
        "notes": body.notes,
    })
    return {"success": True, "message": "Status updated", "report": Report.model_validate(report)}


@router.put("/{report_id}/assign-ngo")
async def assign_ngo(
    report_id: str,
    body: AssignNGO,
    user: AuthUser = Depends(require_role(Role.ADMIN)),
):
    db = await get_db()
    if not await fetch_row(db, "ngos", body.ngo_id):
        raise HTTPException(status_code=400, detail="NGO not found")

    report = await update_row(db, "reports", report_id, {
        "assigned_ngo_id": body.ngo_id,
        "status": ReportStatus.ASSIGNED.value,
        "updated_at": utc_now(),
    })
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")

    await event_bus.publish(report_id, {
        "type": "report_assigned",
        "status": report["status"],
        "ngo_id": body.ngo_id,
    })
    return {"success": True, "message": "NGO assigned", "report": Report.model_validate(report)}


@router.put("/{report_id}/assign-volunteer")
async def assign_volunteer(
    report_id: str,
    body: AssignVolunteer,
    user: AuthUser = Depends(require_role(Role.NGO, Role.ADMIN)),
):
    db = await get_db()
    if not await fetch_row(db, "volunteers", body.volunteer_id):
        raise HTTPException(status_code=400, detail="Volunteer not found")

    report = await update_row(db, "reports", report_id, {
        "assigned_volunteer_id": body.volunteer_id,
        "status": ReportStatus.IN_PROGRESS.value,
        "updated_at": utc_now(),
    })
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")

    await event_bus.publish(report_id, {
        "type": "report_assigned",
        "status": report["status"],
        "volunteer_id": body.volunteer_id,
    })
    return {"success": True, "message": "Volunteer assigned", "report": Report.model_validate(report)}
