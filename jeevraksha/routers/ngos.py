import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from jeevraksha.config import NEARBY_DEFAULT_RADIUS_KM, NEARBY_FALLBACK_LIMIT
from jeevraksha.database import count_rows, fetch_row, get_db, insert_row, update_row, utc_now
from jeevraksha.dependencies import require_role
from jeevraksha.models.common import Role
from jeevraksha.models.ngo import NGO, NearbyNGO, NGODetail, NGORegister, NGOUpdate, NGOVerify
from jeevraksha.models.profile import AuthUser
from jeevraksha.services.proximity import GeoPoint, closest, find_nearby

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ngos", tags=["ngos"])


@router.post("/register", status_code=201)
async def register_ngo(body: NGORegister):
    """Submit an NGO for verification. It stays hidden until an admin verifies it."""
    db = await get_db()
    ngo = await insert_row(db, "ngos", {
        **body.model_dump(),
        "is_verified": False,
        "status": "pending",
        "created_at": utc_now(),
    })
    logger.info("NGO registration submitted: %s (%s)", ngo["id"], ngo["name"])
    return {
        "success": True,
        "message": "NGO registration submitted for verification",
        "ngo": NGO.model_validate(ngo),
    }


@router.get("")
async def list_ngos(
    city: str | None = None,
    state: str | None = None,
    verified_only: bool = True,
):
    db = await get_db()
    clauses, params = [], []
    if verified_only:
        clauses.append("is_verified = 1")
    if city:
        clauses.append("LOWER(city) LIKE ?")
        params.append(f"%{city.lower()}%")
    if state:
        clauses.append("LOWER(state) LIKE ?")
        params.append(f"%{state.lower()}%")

    query = "SELECT * FROM ngos"
    if clauses:
        query += " WHERE " + " AND ".join(clauses)
    query += " ORDER BY name"
    rows = await db.fetch_all(query, params)
    return {"success": True, "ngos": [NGO.model_validate(dict(r)) for r in rows]}


@router.get("/nearby")
async def nearby_ngos(
    latitude: float | None = Query(None, ge=-90, le=90),
    longitude: float | None = Query(None, ge=-180, le=180),
    radius: float = Query(NEARBY_DEFAULT_RADIUS_KM, ge=0),
    fallback: bool = False,
    limit: int = Query(NEARBY_FALLBACK_LIMIT, ge=1, le=100),
):
    """Verified NGOs within ``radius`` km, nearest first.

    With ``fallback=true`` an empty radius search returns the ``limit``
    closest verified NGOs instead, flagged with ``"fallback": true``.
    """
    if latitude is None or longitude is None:
        raise HTTPException(status_code=400, detail="Latitude and longitude required")

    db = await get_db()
    rows = await db.fetch_all("SELECT * FROM ngos WHERE is_verified = 1")
    candidates = [dict(r) for r in rows]
    origin = GeoPoint(latitude, longitude)

    nearby = find_nearby(origin, candidates, radius_km=radius)
    used_fallback = False
    if not nearby and fallback:
        nearby = closest(origin, candidates, limit=limit)
        used_fallback = True
        logger.info(
            "No NGOs within %.1f km of (%.4f, %.4f); returning %d closest",
            radius, latitude, longitude, len(nearby),
        )

    return {
        "success": True,
        "ngos": [NearbyNGO.model_validate(n) for n in nearby],
        "radius_km": radius,
        "fallback": used_fallback,
    }


@router.get("/{ngo_id}")
async def get_ngo(ngo_id: str):
    db = await get_db()
    ngo = await fetch_row(db, "ngos", ngo_id)
    if not ngo:
        raise HTTPException(status_code=404, detail="NGO not found")
    report_count = await count_rows(db, "reports", "assigned_ngo_id = ?", (ngo_id,))
    return {"success": True, "ngo": NGODetail(**ngo, report_count=report_count)}


@router.put("/{ngo_id}/verify")
async def verify_ngo(
    ngo_id: str,
    body: NGOVerify,
    user: AuthUser = Depends(require_role(Role.ADMIN)),
):
    db = await get_db()
    now = utc_now()
    ngo = await update_row(db, "ngos", ngo_id, {
        "is_verified": body.is_verified,
        "status": "active" if body.is_verified else "rejected",
        "verified_at": now if body.is_verified else None,
        "updated_at": now,
    })
    if not ngo:
        raise HTTPException(status_code=404, detail="NGO not found")

    outcome = "verified" if body.is_verified else "rejected"
    logger.info("NGO %s %s by %s", ngo_id, outcome, user.id)
    return {"success": True, "message": f"NGO {outcome}", "ngo": NGO.model_validate(ngo)}


@router.put("/{ngo_id}")
async def update_ngo(
    ngo_id: str,
    body: NGOUpdate,
    user: AuthUser = Depends(require_role(Role.NGO, Role.ADMIN)),
):
    db = await get_db()
    changes = body.model_dump(exclude_unset=True)
    changes["updated_at"] = utc_now()
    ngo = await update_row(db, "ngos", ngo_id, changes)
    if not ngo:
        raise HTTPException(status_code=404, detail="NGO not found")
    return {"success": True, "message": "NGO updated", "ngo": NGO.model_validate(ngo)}
