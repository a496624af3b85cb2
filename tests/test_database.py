"""Tests for database initialization and row helpers."""

import json

import jeevraksha.database as db_mod
from jeevraksha.database import PostgresAdapter, count_rows, fetch_row, init_db, insert_row, update_row


async def test_init_creates_tables(db):
    """Test that init_db creates the expected tables."""
    rows = await db.fetch_all("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
    tables = [row[0] for row in rows]
    for table in (
        "profiles",
        "ngos",
        "volunteers",
        "reports",
        "report_updates",
        "triage_results",
        "donations",
        "sponsorships",
        "adoption_animals",
        "adoption_applications",
        "contact_messages",
    ):
        assert table in tables


async def test_init_is_idempotent(db):
    await init_db()
    await init_db()
    assert await count_rows(db, "ngos") == 0


async def test_insert_row_generates_id_and_encodes_values(db):
    row = await insert_row(db, "volunteers", {
        "name": "Ravi",
        "skills": ["first aid", "driving"],
        "has_vehicle": True,
        "created_at": "2026-01-01T00:00:00+00:00",
    })
    assert row["id"]
    assert row["has_vehicle"] == 1
    assert json.loads(row["skills"]) == ["first aid", "driving"]
    # Column defaults apply to omitted fields
    assert row["is_active"] == 1
    assert row["total_rescues"] == 0


async def test_insert_row_keeps_given_id(db):
    row = await insert_row(db, "contact_messages", {
        "id": "msg-1",
        "name": "Meera",
        "email": "meera@example.org",
        "message": "Hello",
        "created_at": "2026-01-01T00:00:00+00:00",
    })
    assert row["id"] == "msg-1"
    assert await fetch_row(db, "contact_messages", "msg-1") == row


async def test_insert_row_quotes_reserved_columns(db):
    row = await insert_row(db, "adoption_applications", {
        "applicant_name": "Kiran",
        "applicant_email": "kiran@example.org",
        "references": "Dr. Rao, vet",
        "created_at": "2026-01-01T00:00:00+00:00",
    })
    assert row["references"] == "Dr. Rao, vet"

    updated = await update_row(db, "adoption_applications", row["id"], {"references": "none"})
    assert updated["references"] == "none"


async def test_update_row_missing_returns_none(db):
    assert await update_row(db, "ngos", "no-such-ngo", {"name": "x"}) is None


async def test_update_row_with_no_changes_returns_row(db):
    row = await insert_row(db, "ngos", {"name": "Paws", "created_at": "2026-01-01T00:00:00+00:00"})
    assert await update_row(db, "ngos", row["id"], {}) == row


async def test_fetch_row_missing(db):
    assert await fetch_row(db, "reports", "missing") is None


async def test_count_rows_with_filter(db):
    for city in ("Pune", "Pune", "Delhi"):
        await insert_row(db, "ngos", {"name": f"NGO {city}", "city": city, "created_at": "2026-01-01"})
    assert await count_rows(db, "ngos") == 3
    assert await count_rows(db, "ngos", "city = ?", ("Pune",)) == 2


async def test_seed_demo_ngos(db):
    db_mod.SEED_DEMO_DATA = True
    try:
        await init_db()
        await init_db()
    finally:
        db_mod.SEED_DEMO_DATA = False

    rows = await db.fetch_all("SELECT * FROM ngos WHERE id LIKE 'demo-ngo-%'")
    assert len(rows) == 4
    assert all(row["is_verified"] == 1 for row in rows)
    assert all(row["latitude"] is not None for row in rows)


def test_postgres_placeholder_translation():
    assert PostgresAdapter._translate_query("SELECT * FROM t WHERE a = ? AND b = ?") == (
        "SELECT * FROM t WHERE a = $1 AND b = $2"
    )
    assert PostgresAdapter._translate_query("SELECT $1") == "SELECT $1"
