import logging

from fastapi import APIRouter, Depends, HTTPException

from jeevraksha.config import NEARBY_DEFAULT_RADIUS_KM
from jeevraksha.database import DatabaseAdapter, count_rows, get_db, insert_row, utc_now
from jeevraksha.dependencies import get_optional_user
from jeevraksha.models.profile import AuthUser
from jeevraksha.models.triage import (
    RecommendedContact,
    TriageAssessment,
    TriageAssessRequest,
    TriageRecord,
    TriageStats,
)
from jeevraksha.services.proximity import GeoPoint, closest, find_nearby
from jeevraksha.services.triage import (
    BackendTriageStrategy,
    QuickFormTriageStrategy,
    TriageResult,
    UrgencyTier,
    score_triage,
    urgency_color,
    urgency_emoji,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/triage", tags=["triage"])

RECOMMENDED_CONTACT_LIMIT = 3


async def _recommended_contacts(db: DatabaseAdapter, body: TriageAssessRequest) -> list[RecommendedContact]:
    """Verified NGOs to call, nearest first when the caller shared a location."""
    if body.latitude is None or body.longitude is None:
        rows = await db.fetch_all(
            "SELECT id, name, phone, city FROM ngos WHERE is_verified = 1 ORDER BY name LIMIT ?",
            (RECOMMENDED_CONTACT_LIMIT,),
        )
        return [RecommendedContact.model_validate(dict(r)) for r in rows]

    rows = await db.fetch_all(
        "SELECT id, name, phone, city, latitude, longitude FROM ngos WHERE is_verified = 1"
    )
    candidates = [dict(r) for r in rows]
    origin = GeoPoint(body.latitude, body.longitude)
    ranked = find_nearby(origin, candidates, radius_km=NEARBY_DEFAULT_RADIUS_KM)
    if not ranked:
        ranked = closest(origin, candidates, limit=RECOMMENDED_CONTACT_LIMIT)
    return [RecommendedContact.model_validate(c) for c in ranked[:RECOMMENDED_CONTACT_LIMIT]]


def _assessment(result: TriageResult, **extra) -> TriageAssessment:
    return TriageAssessment(
        **result.model_dump(),
        emoji=urgency_emoji(result.urgency_tier),
        color=urgency_color(result.urgency_tier),
        **extra,
    )


@router.post("/assess")
async def assess(body: TriageAssessRequest, user: AuthUser | None = Depends(get_optional_user)):
    """Score a symptom checklist, store the assessment and suggest NGOs to call."""
    flags = body.flags()
    result = score_triage(flags, body.animal_type, strategy=BackendTriageStrategy.name)

    db = await get_db()
    contacts = await _recommended_contacts(db, body)

    triage_id = None
    try:
        record = await insert_row(db, "triage_results", {
            "animal_type": body.animal_type,
            "symptoms": flags.model_dump(),
            "description": body.description,
            "image_url": body.image_url,
            "strategy": result.strategy,
            "urgency_level": result.urgency_tier.value,
            "risk_score": result.risk_score,
            "advice": result.advice,
            "first_aid": result.first_aid,
            "user_id": user.id if user else None,
            "created_at": utc_now(),
        })
        triage_id = record["id"]
    except Exception:
        # Advice is returned even when the log row fails to save
        logger.exception("Failed to save triage result")

    logger.info(
        "Triage assessed: %s score=%d tier=%s",
        body.animal_type or "animal", result.risk_score, result.urgency_tier.value,
    )
    return {
        "success": True,
        "triage": _assessment(result, id=triage_id, recommended_contacts=contacts),
    }


@router.post("/quick-assess")
async def quick_assess(body: TriageAssessRequest):
    """Instant self-check with the quick-form rubric. Nothing is stored."""
    result = score_triage(body.flags(), body.animal_type, strategy=QuickFormTriageStrategy.name)
    return {"success": True, "triage": _assessment(result)}


@router.get("/history")
async def history(user: AuthUser | None = Depends(get_optional_user)):
    if user is None:
        raise HTTPException(status_code=401, detail="Login required")

    db = await get_db()
    rows = await db.fetch_all(
        "SELECT * FROM triage_results WHERE user_id = ? ORDER BY created_at DESC LIMIT 20",
        (user.id,),
    )
    return {"success": True, "history": [TriageRecord.model_validate(dict(r)) for r in rows]}


@router.get("/stats")
async def stats():
    db = await get_db()
    return {
        "success": True,
        "stats": TriageStats(
            total_assessments=await count_rows(db, "triage_results"),
            critical_cases=await count_rows(
                db, "triage_results", "urgency_level = ?", (UrgencyTier.CRITICAL.value,)
            ),
            urgent_cases=await count_rows(
                db, "triage_results", "urgency_level = ?", (UrgencyTier.URGENT.value,)
            ),
        ),
    }
