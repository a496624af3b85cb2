import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Query

from jeevraksha.database import count_rows, get_db
from jeevraksha.dependencies import require_role
from jeevraksha.models.common import Role
from jeevraksha.models.dashboard import AdminStats, MonthlyTrend, PlatformStats, RecentReport, TopNGO
from jeevraksha.models.profile import AuthUser
from jeevraksha.models.report import ReportStatus, UrgencyLevel
from jeevraksha.routers.donations import completed_donation_total

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

TREND_WINDOW = timedelta(days=365)


@router.get("/stats")
@router.get("/overview")
async def platform_stats():
    """Headline numbers for the public landing page."""
    db = await get_db()

    async def reports_with(status: ReportStatus) -> int:
        return await count_rows(db, "reports", "status = ?", (status.value,))

    total_donations, _ = await completed_donation_total(db)
    return {
        "success": True,
        "stats": PlatformStats(
            total_reports=await count_rows(db, "reports"),
            rescued_animals=await reports_with(ReportStatus.RESCUED),
            active_ngos=await count_rows(db, "ngos", "is_verified = 1"),
            active_volunteers=await count_rows(db, "volunteers", "is_active = 1"),
            pending_reports=await reports_with(ReportStatus.PENDING),
            in_progress_reports=await reports_with(ReportStatus.IN_PROGRESS),
            animals_adopted=await count_rows(db, "adoption_animals", "status = 'adopted'"),
            total_donations=total_donations,
        ),
    }


@router.get("/reports-by-status")
async def reports_by_status():
    db = await get_db()
    rows = await db.fetch_all("SELECT status, COUNT(*) AS count FROM reports GROUP BY status")
    counts = {row["status"]: int(row["count"]) for row in rows}
    return {"success": True, "data": {s.value: counts.get(s.value, 0) for s in ReportStatus}}


@router.get("/reports-by-animal")
async def reports_by_animal():
    db = await get_db()
    rows = await db.fetch_all(
        "SELECT animal_type, COUNT(*) AS count FROM reports GROUP BY animal_type ORDER BY count DESC"
    )
    return {"success": True, "data": {row["animal_type"]: int(row["count"]) for row in rows}}


@router.get("/recent-reports")
async def recent_reports(limit: int = Query(10, ge=1, le=100)):
    db = await get_db()
    rows = await db.fetch_all(
        "SELECT id, animal_type, condition, location, status, urgency_level, created_at "
        "FROM reports ORDER BY created_at DESC LIMIT ?",
        (limit,),
    )
    return {"success": True, "reports": [RecentReport.model_validate(dict(r)) for r in rows]}


@router.get("/monthly-trends")
async def monthly_trends():
    """Reports filed and animals rescued per ``YYYY-MM`` over the last year."""
    cutoff = (datetime.now(timezone.utc) - TREND_WINDOW).isoformat()
    db = await get_db()
    rows = await db.fetch_all(
        "SELECT substr(created_at, 1, 7) AS month, COUNT(*) AS reports, "
        "SUM(CASE WHEN status = ? THEN 1 ELSE 0 END) AS rescued "
        "FROM reports WHERE created_at >= ? GROUP BY substr(created_at, 1, 7) ORDER BY month",
        (ReportStatus.RESCUED.value, cutoff),
    )
    return {
        "success": True,
        "data": {
            row["month"]: MonthlyTrend(reports=int(row["reports"]), rescued=int(row["rescued"] or 0))
            for row in rows
        },
    }


@router.get("/top-ngos")
async def top_ngos(limit: int = Query(5, ge=1, le=50)):
    """Verified NGOs ranked by rescued reports."""
    db = await get_db()
    rows = await db.fetch_all(
        "SELECT n.id, n.name, n.city, COUNT(r.id) AS rescue_count FROM ngos n "
        "LEFT JOIN reports r ON r.assigned_ngo_id = n.id AND r.status = ? "
        "WHERE n.is_verified = 1 GROUP BY n.id, n.name, n.city "
        "ORDER BY rescue_count DESC, n.name LIMIT ?",
        (ReportStatus.RESCUED.value, limit),
    )
    return {"success": True, "ngos": [TopNGO.model_validate(dict(r)) for r in rows]}


@router.get("/urgency-distribution")
async def urgency_distribution():
    """Urgency mix of reports still waiting for a responder."""
    db = await get_db()
    rows = await db.fetch_all(
        "SELECT urgency_level, COUNT(*) AS count FROM reports WHERE status = ? GROUP BY urgency_level",
        (ReportStatus.PENDING.value,),
    )
    counts = {row["urgency_level"]: int(row["count"]) for row in rows}
    return {"success": True, "data": {level.value: counts.get(level.value, 0) for level in UrgencyLevel}}


@router.get("/admin")
async def admin_stats(user: AuthUser = Depends(require_role(Role.ADMIN))):
    db = await get_db()
    today = datetime.now(timezone.utc).date().isoformat()
    total_donations, donation_count = await completed_donation_total(db)
    return {
        "success": True,
        "stats": AdminStats(
            users={"total": await count_rows(db, "profiles")},
            reports={
                "total": await count_rows(db, "reports"),
                "today": await count_rows(db, "reports", "created_at >= ?", (today,)),
            },
            ngos={
                "total": await count_rows(db, "ngos"),
                "pending_verification": await count_rows(db, "ngos", "status = 'pending'"),
            },
            volunteers={
                "total": await count_rows(db, "volunteers"),
                "unverified": await count_rows(db, "volunteers", "is_verified = 0"),
            },
            donations={"total_amount": total_donations, "completed": donation_count},
        ),
    }
