import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from jeevraksha.database import count_rows, fetch_row, get_db, insert_row, update_row, utc_now
from jeevraksha.dependencies import get_current_user, get_optional_user, require_role
from jeevraksha.models.adoption import (
    AdoptionAnimal,
    AdoptionAnimalCreate,
    AdoptionAnimalDetail,
    AdoptionApplication,
    ApplicationCreate,
    ApplicationStatus,
    ApplicationStatusUpdate,
    ApplicationWithAnimal,
    NGORef,
)
from jeevraksha.models.common import Role, paginate
from jeevraksha.models.profile import AuthUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/adoptions", tags=["adoptions"])

ANIMAL_AVAILABLE = "available"
ANIMAL_ADOPTED = "adopted"


@router.post("/animals", status_code=201)
async def list_animal(
    body: AdoptionAnimalCreate,
    user: AuthUser = Depends(require_role(Role.NGO, Role.ADMIN)),
):
    """Put an animal up for adoption."""
    db = await get_db()
    animal = await insert_row(db, "adoption_animals", {
        **body.model_dump(),
        "status": ANIMAL_AVAILABLE,
        "created_at": utc_now(),
    })
    logger.info("Adoption listing created: %s (%s) by %s", animal["id"], animal["name"], user.id)
    return {
        "success": True,
        "message": "Animal listed for adoption",
        "animal": AdoptionAnimal.model_validate(animal),
    }


@router.get("/animals")
async def list_animals(
    animal_type: str | None = None,
    breed: str | None = None,
    gender: str | None = None,
    size: str | None = None,
    age_min: int | None = Query(None, ge=0),
    age_max: int | None = Query(None, ge=0),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
):
    """Animals still available for adoption, newest first."""
    clauses, params = ["status = ?"], [ANIMAL_AVAILABLE]
    if animal_type:
        clauses.append("animal_type = ?")
        params.append(animal_type)
    if breed:
        clauses.append("LOWER(breed) LIKE ?")
        params.append(f"%{breed.lower()}%")
    if gender:
        clauses.append("gender = ?")
        params.append(gender)
    if size:
        clauses.append("size = ?")
        params.append(size)
    if age_min is not None:
        clauses.append("age >= ?")
        params.append(age_min)
    if age_max is not None:
        clauses.append("age <= ?")
        params.append(age_max)

    where = " AND ".join(clauses)
    db = await get_db()
    total = await count_rows(db, "adoption_animals", where, params)
    rows = await db.fetch_all(
        f"SELECT * FROM adoption_animals WHERE {where} ORDER BY created_at DESC LIMIT ? OFFSET ?",
        [*params, limit, (page - 1) * limit],
    )
    return {
        "success": True,
        "animals": [AdoptionAnimal.model_validate(dict(r)) for r in rows],
        "pagination": paginate(page, limit, total),
    }


@router.get("/animals/{animal_id}")
async def get_animal(animal_id: str):
    db = await get_db()
    animal = await fetch_row(db, "adoption_animals", animal_id)
    if not animal:
        raise HTTPException(status_code=404, detail="Animal not found")

    ngo = None
    if animal.get("ngo_id"):
        row = await db.fetch_one(
            "SELECT id, name, city, phone FROM ngos WHERE id = ?", (animal["ngo_id"],)
        )
        if row:
            ngo = NGORef.model_validate(dict(row))
    return {"success": True, "animal": AdoptionAnimalDetail(**animal, ngo=ngo)}


@router.post("/applications", status_code=201)
async def apply_for_adoption(body: ApplicationCreate, user: AuthUser | None = Depends(get_optional_user)):
    """Submit an adoption application.

    Applications may name a listed animal by ``animal_id`` or describe one
    seen elsewhere. A listed animal must still be available, and its NGO
    becomes the reviewer of the application.
    """
    db = await get_db()
    values = body.model_dump()
    if body.animal_id:
        animal = await fetch_row(db, "adoption_animals", body.animal_id)
        if not animal or animal["status"] != ANIMAL_AVAILABLE:
            raise HTTPException(status_code=400, detail="Animal not available for adoption")
        values.update({
            "animal_name": body.animal_name or animal["name"],
            "animal_type": body.animal_type or animal["animal_type"],
            "animal_breed": body.animal_breed or animal["breed"],
            "ngo_id": animal["ngo_id"],
        })

    application = await insert_row(db, "adoption_applications", {
        **values,
        "status": ApplicationStatus.PENDING.value,
        "user_id": user.id if user else None,
        "created_at": utc_now(),
    })
    logger.info("Adoption application %s for %s", application["id"], application["animal_name"] or "unlisted animal")
    return {
        "success": True,
        "message": "Application submitted successfully",
        "application": AdoptionApplication.model_validate(application),
    }


@router.get("/animals/{animal_id}/applications")
async def animal_applications(
    animal_id: str,
    user: AuthUser = Depends(require_role(Role.NGO, Role.ADMIN)),
):
    db = await get_db()
    rows = await db.fetch_all(
        "SELECT * FROM adoption_applications WHERE animal_id = ? ORDER BY created_at DESC",
        (animal_id,),
    )
    return {"success": True, "applications": [AdoptionApplication.model_validate(dict(r)) for r in rows]}


@router.put("/applications/{application_id}/status")
async def review_application(
    application_id: str,
    body: ApplicationStatusUpdate,
    user: AuthUser = Depends(require_role(Role.NGO, Role.ADMIN)),
):
    """Approve or reject an application. Approval marks the animal adopted."""
    db = await get_db()
    now = utc_now()
    application = await update_row(db, "adoption_applications", application_id, {
        "status": body.status.value,
        "review_notes": body.notes,
        "reviewed_at": now,
        "reviewed_by": user.id,
        "updated_at": now,
    })
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    if body.status == ApplicationStatus.APPROVED and application["animal_id"]:
        await update_row(db, "adoption_animals", application["animal_id"], {
            "status": ANIMAL_ADOPTED,
            "adopted_at": now,
        })
        logger.info("Animal %s adopted via application %s", application["animal_id"], application_id)

    return {
        "success": True,
        "message": f"Application {body.status.value}",
        "application": AdoptionApplication.model_validate(application),
    }


@router.get("/my-applications")
async def my_applications(user: AuthUser = Depends(get_current_user)):
    db = await get_db()
    rows = await db.fetch_all(
        "SELECT * FROM adoption_applications WHERE user_id = ? ORDER BY created_at DESC",
        (user.id,),
    )
    applications = []
    for row in rows:
        application = dict(row)
        animal = None
        if application["animal_id"]:
            animal_row = await fetch_row(db, "adoption_animals", application["animal_id"])
            animal = AdoptionAnimal.model_validate(animal_row) if animal_row else None
        applications.append(ApplicationWithAnimal(**application, animal=animal))
    return {"success": True, "applications": applications}
