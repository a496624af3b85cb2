"""Tests for the triage assessment endpoints."""

from conftest import make_ngo

from jeevraksha.models.common import Role


async def test_assess_scores_and_persists(async_client, db):
    resp = await async_client.post("/api/triage/assess", json={
        "animal_type": "dog",
        "bleeding": "yes",
        "vehicle": "yes",
        "description": "hit by a scooter",
    })
    assert resp.status_code == 200
    triage = resp.json()["triage"]
    assert triage["strategy"] == "backend"
    assert triage["risk_score"] == 65
    assert triage["urgency_tier"] == "critical"
    assert triage["emoji"] == "🔴"
    assert triage["color"] == "#dc2626"
    assert triage["contact_priority"] == "Call emergency vet/NGO immediately"
    assert triage["first_aid"]
    assert triage["id"]

    row = await db.fetch_one("SELECT * FROM triage_results WHERE id = ?", (triage["id"],))
    assert row["urgency_level"] == "critical"
    assert row["strategy"] == "backend"


async def test_assess_empty_form_is_non_emergency(async_client):
    resp = await async_client.post("/api/triage/assess", json={})
    triage = resp.json()["triage"]
    assert triage["risk_score"] == 0
    assert triage["urgency_tier"] == "non_emergency"


async def test_assess_recommends_verified_ngos_alphabetically(async_client, db):
    await make_ngo(db, name="Zeta Rescue")
    await make_ngo(db, name="Alpha Rescue")
    await make_ngo(db, name="Hidden Rescue", is_verified=False)

    resp = await async_client.post("/api/triage/assess", json={"bleeding": True})
    names = [c["name"] for c in resp.json()["triage"]["recommended_contacts"]]
    assert names == ["Alpha Rescue", "Zeta Rescue"]


async def test_assess_recommends_nearest_when_located(async_client, db):
    await make_ngo(db, name="Mumbai Stray Care", latitude=19.0760, longitude=72.8777)
    await make_ngo(db, name="Delhi Animal Rescue Trust")

    resp = await async_client.post(
        "/api/triage/assess", json={"bleeding": True, "latitude": 28.63, "longitude": 77.22}
    )
    contacts = resp.json()["triage"]["recommended_contacts"]
    assert [c["name"] for c in contacts] == ["Delhi Animal Rescue Trust"]
    assert contacts[0]["distance_km"] < 5


async def test_assess_falls_back_to_closest_outside_radius(async_client, db):
    await make_ngo(db, name="Mumbai Stray Care", latitude=19.0760, longitude=72.8777)
    await make_ngo(db, name="Delhi Animal Rescue Trust")

    resp = await async_client.post(
        "/api/triage/assess", json={"juvenile": True, "latitude": 12.97, "longitude": 77.59}
    )
    contacts = resp.json()["triage"]["recommended_contacts"]
    assert [c["name"] for c in contacts] == ["Mumbai Stray Care", "Delhi Animal Rescue Trust"]


async def test_quick_assess_uses_quick_form_and_is_not_stored(async_client, db):
    resp = await async_client.post("/api/triage/quick-assess", json={"bleeding": "yes"})
    triage = resp.json()["triage"]
    assert triage["strategy"] == "quick_form"
    assert triage["risk_score"] == 3
    assert triage["urgency_tier"] == "urgent"
    assert triage["emoji"] == "🟠"
    assert triage["id"] is None

    row = await db.fetch_one("SELECT COUNT(*) AS count FROM triage_results")
    assert row["count"] == 0


async def test_history_requires_login(async_client):
    resp = await async_client.get("/api/triage/history")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Login required"


async def test_history_lists_own_assessments(async_client, login_as):
    login_as(Role.CITIZEN, user_id="citizen-1")
    await async_client.post("/api/triage/assess", json={"bleeding": True, "animal_type": "cat"})

    resp = await async_client.get("/api/triage/history")
    history = resp.json()["history"]
    assert len(history) == 1
    assert history[0]["animal_type"] == "cat"
    assert history[0]["symptoms"]["bleeding"] is True
    assert history[0]["first_aid"]

    login_as(Role.CITIZEN, user_id="citizen-2")
    assert (await async_client.get("/api/triage/history")).json()["history"] == []


async def test_stats_counts_tiers(async_client):
    await async_client.post("/api/triage/assess", json={"vehicle": True, "bleeding": True})
    await async_client.post("/api/triage/assess", json={"bleeding": True, "juvenile": True})
    await async_client.post("/api/triage/assess", json={})

    stats = (await async_client.get("/api/triage/stats")).json()["stats"]
    assert stats == {"total_assessments": 3, "critical_cases": 1, "urgent_cases": 1}
