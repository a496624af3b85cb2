"""Tests for adoption listings and applications."""

from conftest import make_ngo

from jeevraksha.models.common import Role

ANIMAL = {
    "name": "Bholu",
    "animal_type": "dog",
    "breed": "Indie",
    "age": 2,
    "gender": "male",
    "size": "medium",
    "is_vaccinated": True,
    "images": ["https://cdn.example.org/bholu.jpg"],
}

APPLICATION = {
    "applicant_name": "Neha Sharma",
    "applicant_email": "neha@example.org",
    "home_type": "apartment",
    "has_pets": "no",
    "references": "Dr. Rao",
}


async def list_animal(async_client, **overrides):
    resp = await async_client.post("/api/adoptions/animals", json={**ANIMAL, **overrides})
    assert resp.status_code == 201
    return resp.json()["animal"]


async def test_list_animal_requires_ngo(async_client, login_as):
    login_as(Role.CITIZEN)
    resp = await async_client.post("/api/adoptions/animals", json=ANIMAL)
    assert resp.status_code == 403


async def test_list_animal(async_client, login_as):
    login_as(Role.NGO)
    animal = await list_animal(async_client)
    assert animal["status"] == "available"
    assert animal["images"] == ANIMAL["images"]
    assert animal["is_vaccinated"] is True


async def test_list_animal_rejects_too_many_images(async_client, login_as):
    login_as(Role.NGO)
    resp = await async_client.post(
        "/api/adoptions/animals", json={**ANIMAL, "images": [f"https://x/{i}.jpg" for i in range(6)]}
    )
    assert resp.status_code == 422


async def test_browse_animals_with_filters(async_client, login_as):
    login_as(Role.NGO)
    await list_animal(async_client)
    await list_animal(async_client, name="Kitty", animal_type="cat", breed="Persian", age=5, gender="female")
    await list_animal(async_client, name="Tommy", breed="Indie Mix", age=8)

    dogs = (await async_client.get("/api/adoptions/animals", params={"animal_type": "dog"})).json()
    assert {a["name"] for a in dogs["animals"]} == {"Bholu", "Tommy"}
    assert dogs["pagination"]["limit"] == 12

    indie = (await async_client.get("/api/adoptions/animals", params={"breed": "indie"})).json()
    assert len(indie["animals"]) == 2

    young = (await async_client.get("/api/adoptions/animals", params={"age_min": 1, "age_max": 5})).json()
    assert {a["name"] for a in young["animals"]} == {"Bholu", "Kitty"}

    female = (await async_client.get("/api/adoptions/animals", params={"gender": "female"})).json()
    assert [a["name"] for a in female["animals"]] == ["Kitty"]


async def test_get_animal_with_ngo(async_client, db, login_as):
    ngo = await make_ngo(db)
    login_as(Role.NGO)
    animal = await list_animal(async_client, ngo_id=ngo["id"])

    resp = await async_client.get(f"/api/adoptions/animals/{animal['id']}")
    assert resp.json()["animal"]["ngo"]["name"] == ngo["name"]


async def test_get_animal_not_found(async_client):
    assert (await async_client.get("/api/adoptions/animals/missing")).status_code == 404


async def test_apply_for_listed_animal(async_client, db, login_as):
    ngo = await make_ngo(db)
    login_as(Role.NGO)
    animal = await list_animal(async_client, ngo_id=ngo["id"])

    login_as(Role.CITIZEN, user_id="adopter-1")
    resp = await async_client.post("/api/adoptions/applications", json={**APPLICATION, "animal_id": animal["id"]})
    assert resp.status_code == 201
    application = resp.json()["application"]
    assert application["status"] == "pending"
    assert application["ngo_id"] == ngo["id"]
    assert application["animal_name"] == "Bholu"
    assert application["references"] == "Dr. Rao"
    assert application["user_id"] == "adopter-1"


async def test_apply_for_unlisted_animal(async_client):
    resp = await async_client.post(
        "/api/adoptions/applications", json={**APPLICATION, "animal_name": "Street pup", "animal_type": "dog"}
    )
    assert resp.status_code == 201
    assert resp.json()["application"]["ngo_id"] is None


async def test_apply_for_unavailable_animal(async_client):
    resp = await async_client.post("/api/adoptions/applications", json={**APPLICATION, "animal_id": "missing"})
    assert resp.status_code == 400


async def test_approval_marks_animal_adopted(async_client, login_as):
    login_as(Role.NGO)
    animal = await list_animal(async_client)
    application = (
        await async_client.post("/api/adoptions/applications", json={**APPLICATION, "animal_id": animal["id"]})
    ).json()["application"]

    pending = await async_client.get(f"/api/adoptions/animals/{animal['id']}/applications")
    assert [a["id"] for a in pending.json()["applications"]] == [application["id"]]

    resp = await async_client.put(
        f"/api/adoptions/applications/{application['id']}/status",
        json={"status": "approved", "notes": "Home visit done"},
    )
    assert resp.status_code == 200
    assert resp.json()["application"]["status"] == "approved"
    assert resp.json()["application"]["review_notes"] == "Home visit done"

    adopted = (await async_client.get(f"/api/adoptions/animals/{animal['id']}")).json()["animal"]
    assert adopted["status"] == "adopted"
    assert adopted["adopted_at"]

    browse = (await async_client.get("/api/adoptions/animals")).json()
    assert browse["animals"] == []

    again = await async_client.post("/api/adoptions/applications", json={**APPLICATION, "animal_id": animal["id"]})
    assert again.status_code == 400


async def test_rejection_keeps_animal_available(async_client, login_as):
    login_as(Role.ADMIN)
    animal = await list_animal(async_client)
    application = (
        await async_client.post("/api/adoptions/applications", json={**APPLICATION, "animal_id": animal["id"]})
    ).json()["application"]

    await async_client.put(
        f"/api/adoptions/applications/{application['id']}/status", json={"status": "rejected"}
    )
    animal_now = (await async_client.get(f"/api/adoptions/animals/{animal['id']}")).json()["animal"]
    assert animal_now["status"] == "available"


async def test_review_unknown_application(async_client, login_as):
    login_as(Role.NGO)
    resp = await async_client.put("/api/adoptions/applications/missing/status", json={"status": "approved"})
    assert resp.status_code == 404


async def test_my_applications_include_animal(async_client, login_as):
    login_as(Role.NGO, user_id="ngo-staff")
    animal = await list_animal(async_client)

    login_as(Role.CITIZEN, user_id="adopter-2")
    await async_client.post("/api/adoptions/applications", json={**APPLICATION, "animal_id": animal["id"]})

    resp = await async_client.get("/api/adoptions/my-applications")
    applications = resp.json()["applications"]
    assert len(applications) == 1
    assert applications[0]["animal"]["name"] == "Bholu"
