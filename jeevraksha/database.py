from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Sequence
from urllib.parse import urlparse

import aiosqlite

from jeevraksha.config import DATABASE_MAX_CONNECTIONS, DATABASE_PATH, DATABASE_URL, SEED_DEMO_DATA

try:  # Optional: only required when DATABASE_URL points at Postgres
    import asyncpg  # type: ignore
except ImportError:  # pragma: no cover - optional dependency
    asyncpg = None

logger = logging.getLogger(__name__)


class DatabaseAdapter:
    engine: str

    async def execute(self, query: str, params: Sequence | None = None) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    async def executemany(self, query: str, seq_params: Iterable[Sequence]) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    async def fetch_one(self, query: str, params: Sequence | None = None):  # pragma: no cover - interface
        raise NotImplementedError

    async def fetch_all(self, query: str, params: Sequence | None = None):  # pragma: no cover - interface
        raise NotImplementedError

    async def commit(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    async def close(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError


@dataclass
class SQLiteAdapter(DatabaseAdapter):
    conn: aiosqlite.Connection
    engine: str = "sqlite"

    async def execute(self, query: str, params: Sequence | None = None) -> None:
        await self.conn.execute(query, params or ())

    async def executemany(self, query: str, seq_params: Iterable[Sequence]) -> None:
        await self.conn.executemany(query, seq_params)

    async def fetch_one(self, query: str, params: Sequence | None = None):
        cursor = await self.conn.execute(query, params or ())
        return await cursor.fetchone()

    async def fetch_all(self, query: str, params: Sequence | None = None):
        cursor = await self.conn.execute(query, params or ())
        return await cursor.fetchall()

    async def commit(self) -> None:
        await self.conn.commit()

    async def close(self) -> None:
        await self.conn.close()


@dataclass
class PostgresAdapter(DatabaseAdapter):
    pool: "asyncpg.Pool"  # type: ignore[name-defined]
    engine: str = "postgres"

    @staticmethod
    def _translate_query(query: str) -> str:
        # Convert SQLite-style ? placeholders to asyncpg-style $1, $2, ...
        if "$1" in query:
            return query
        idx = 1
        out = []
        for ch in query:
            if ch == "?":
                out.append(f"${idx}")
                idx += 1
            else:
                out.append(ch)
        return "".join(out)

    async def execute(self, query: str, params: Sequence | None = None) -> None:
        q = self._translate_query(query)
        async with self.pool.acquire() as conn:
            await conn.execute(q, *(params or ()))

    async def executemany(self, query: str, seq_params: Iterable[Sequence]) -> None:
        q = self._translate_query(query)
        async with self.pool.acquire() as conn:
            await conn.executemany(q, seq_params)

    async def fetch_one(self, query: str, params: Sequence | None = None):
        q = self._translate_query(query)
        async with self.pool.acquire() as conn:
            return await conn.fetchrow(q, *(params or ()))

    async def fetch_all(self, query: str, params: Sequence | None = None):
        q = self._translate_query(query)
        async with self.pool.acquire() as conn:
            return await conn.fetch(q, *(params or ()))

    async def commit(self) -> None:
        # asyncpg autocommits per statement unless an explicit transaction is used.
        return

    async def close(self) -> None:
        await self.pool.close()


_db: DatabaseAdapter | None = None


async def get_db() -> DatabaseAdapter:
    global _db
    if _db is None:
        if DATABASE_URL and not DATABASE_URL.startswith("sqlite"):
            if asyncpg is None:
                raise RuntimeError(
                    "DATABASE_URL is set but asyncpg is not installed. "
                    "Install asyncpg or unset DATABASE_URL."
                )
            pool = await asyncpg.create_pool(
                dsn=DATABASE_URL,
                min_size=1,
                max_size=DATABASE_MAX_CONNECTIONS,
            )
            _db = PostgresAdapter(pool)
            logger.info("Connected to Postgres database")
        else:
            sqlite_path = _sqlite_path_from_url(DATABASE_URL) if DATABASE_URL else ""
            sqlite_path = sqlite_path or DATABASE_PATH
            conn = await aiosqlite.connect(sqlite_path)
            conn.row_factory = aiosqlite.Row
            _db = SQLiteAdapter(conn)
            logger.info("Connected to SQLite database at %s", sqlite_path)
    return _db


def _sqlite_path_from_url(url: str) -> str:
    parsed = urlparse(url)
    path = parsed.path or ""
    if not path or path == "/":
        return ""
    # sqlite:////absolute/path.db -> keep absolute path
    if url.startswith("sqlite:////"):
        return path
    # sqlite:///relative.db -> strip leading slash
    if path.startswith("/"):
        return path[1:]
    return path


# Column types are chosen so the same DDL runs on SQLite and Postgres.
# Booleans are INTEGER 0/1, JSON payloads are TEXT, timestamps are ISO-8601 TEXT.
SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS profiles (
        id TEXT PRIMARY KEY,
        email TEXT NOT NULL,
        full_name TEXT,
        phone TEXT,
        address TEXT,
        avatar_url TEXT,
        role TEXT NOT NULL DEFAULT 'citizen',
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ngos (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT,
        phone TEXT,
        address TEXT,
        city TEXT,
        state TEXT,
        pincode TEXT,
        registration_number TEXT,
        description TEXT,
        services TEXT DEFAULT '[]',
        latitude DOUBLE PRECISION,
        longitude DOUBLE PRECISION,
        is_verified INTEGER NOT NULL DEFAULT 0,
        status TEXT NOT NULL DEFAULT 'pending',
        verified_at TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS volunteers (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT,
        phone TEXT,
        address TEXT,
        city TEXT,
        state TEXT,
        pincode TEXT,
        skills TEXT DEFAULT '[]',
        availability TEXT,
        has_vehicle INTEGER NOT NULL DEFAULT 0,
        vehicle_type TEXT,
        experience TEXT,
        motivation TEXT,
        is_active INTEGER NOT NULL DEFAULT 1,
        is_verified INTEGER NOT NULL DEFAULT 0,
        total_rescues INTEGER NOT NULL DEFAULT 0,
        verified_at TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS reports (
        id TEXT PRIMARY KEY,
        animal_type TEXT NOT NULL,
        condition TEXT NOT NULL,
        description TEXT DEFAULT '',
        location TEXT NOT NULL,
        latitude DOUBLE PRECISION,
        longitude DOUBLE PRECISION,
        landmark TEXT DEFAULT '',
        image_url TEXT,
        reporter_name TEXT DEFAULT 'Anonymous',
        reporter_phone TEXT DEFAULT '',
        reporter_email TEXT DEFAULT '',
        urgency_level TEXT NOT NULL DEFAULT 'medium',
        status TEXT NOT NULL DEFAULT 'pending',
        assigned_ngo_id TEXT REFERENCES ngos(id),
        assigned_volunteer_id TEXT REFERENCES volunteers(id),
        user_id TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS report_updates (
        id TEXT PRIMARY KEY,
        report_id TEXT NOT NULL REFERENCES reports(id),
        status TEXT NOT NULL,
        notes TEXT,
        updated_by TEXT,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS triage_results (
        id TEXT PRIMARY KEY,
        animal_type TEXT,
        symptoms TEXT DEFAULT '{}',
        description TEXT,
        image_url TEXT,
        strategy TEXT NOT NULL DEFAULT 'backend',
        urgency_level TEXT NOT NULL,
        risk_score INTEGER NOT NULL,
        advice TEXT,
        first_aid TEXT DEFAULT '[]',
        user_id TEXT,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS donations (
        id TEXT PRIMARY KEY,
        amount DOUBLE PRECISION NOT NULL,
        currency TEXT NOT NULL DEFAULT 'INR',
        donor_name TEXT,
        donor_email TEXT,
        donor_phone TEXT,
        message TEXT,
        is_anonymous INTEGER NOT NULL DEFAULT 0,
        donation_type TEXT NOT NULL DEFAULT 'general',
        ngo_id TEXT REFERENCES ngos(id),
        payment_method TEXT,
        payment_status TEXT NOT NULL DEFAULT 'pending',
        transaction_id TEXT,
        payment_details TEXT,
        paid_at TEXT,
        user_id TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS sponsorships (
        id TEXT PRIMARY KEY,
        animal_id TEXT,
        animal_name TEXT,
        animal_type TEXT,
        amount_per_month DOUBLE PRECISION NOT NULL,
        duration_months INTEGER NOT NULL,
        total_amount DOUBLE PRECISION NOT NULL,
        sponsor_name TEXT,
        sponsor_email TEXT,
        sponsor_phone TEXT,
        message TEXT,
        status TEXT NOT NULL DEFAULT 'active',
        user_id TEXT,
        start_date TEXT NOT NULL,
        end_date TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS adoption_animals (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        animal_type TEXT NOT NULL,
        breed TEXT,
        age INTEGER,
        age_unit TEXT DEFAULT 'years',
        gender TEXT,
        size TEXT,
        color TEXT,
        description TEXT,
        health_status TEXT,
        is_vaccinated INTEGER NOT NULL DEFAULT 0,
        is_neutered INTEGER NOT NULL DEFAULT 0,
        temperament TEXT,
        good_with_kids INTEGER NOT NULL DEFAULT 0,
        good_with_pets INTEGER NOT NULL DEFAULT 0,
        special_needs TEXT,
        images TEXT DEFAULT '[]',
        ngo_id TEXT REFERENCES ngos(id),
        status TEXT NOT NULL DEFAULT 'available',
        adopted_at TEXT,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS adoption_applications (
        id TEXT PRIMARY KEY,
        animal_id TEXT REFERENCES adoption_animals(id),
        animal_name TEXT,
        animal_type TEXT,
        animal_breed TEXT,
        applicant_name TEXT NOT NULL,
        applicant_email TEXT NOT NULL,
        applicant_phone TEXT,
        address TEXT,
        city TEXT,
        state TEXT,
        pincode TEXT,
        occupation TEXT,
        has_pets INTEGER NOT NULL DEFAULT 0,
        current_pets TEXT,
        has_kids INTEGER NOT NULL DEFAULT 0,
        kids_ages TEXT,
        home_type TEXT,
        has_yard INTEGER NOT NULL DEFAULT 0,
        experience TEXT,
        reason TEXT,
        "references" TEXT,
        ngo_id TEXT REFERENCES ngos(id),
        status TEXT NOT NULL DEFAULT 'pending',
        review_notes TEXT,
        reviewed_at TEXT,
        reviewed_by TEXT,
        user_id TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS contact_messages (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT NOT NULL,
        message TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
]

# Columns that are SQL keywords and must be quoted in generated statements
_RESERVED_COLUMNS = {"references"}


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


def _quote(column: str) -> str:
    return f'"{column}"' if column in _RESERVED_COLUMNS else column


def _encode(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return value


def row_to_dict(row) -> dict | None:
    if row is None:
        return None
    return dict(row)


async def fetch_row(db: DatabaseAdapter, table: str, row_id: str) -> dict | None:
    """Fetch a single row by primary key as a plain dict."""
    row = await db.fetch_one(f"SELECT * FROM {table} WHERE id = ?", (row_id,))
    return row_to_dict(row)


async def insert_row(db: DatabaseAdapter, table: str, values: dict[str, Any]) -> dict:
    """Insert a row and return it as stored.

    An ``id`` is generated when absent. Lists/dicts are stored as JSON text and
    booleans as 0/1 so the same call works against both engines.
    """
    values = dict(values)
    values.setdefault("id", new_id())
    columns = list(values)
    placeholders = ", ".join("?" for _ in columns)
    await db.execute(
        f"INSERT INTO {table} ({', '.join(_quote(c) for c in columns)}) VALUES ({placeholders})",
        [_encode(values[c]) for c in columns],
    )
    await db.commit()
    return await fetch_row(db, table, values["id"])


async def update_row(db: DatabaseAdapter, table: str, row_id: str, values: dict[str, Any]) -> dict | None:
    """Update a row by id. Returns the updated row, or None if it does not exist."""
    existing = await db.fetch_one(f"SELECT id FROM {table} WHERE id = ?", (row_id,))
    if not existing:
        return None
    if values:
        assignments = ", ".join(f"{_quote(c)} = ?" for c in values)
        await db.execute(
            f"UPDATE {table} SET {assignments} WHERE id = ?",
            [*(_encode(v) for v in values.values()), row_id],
        )
        await db.commit()
    return await fetch_row(db, table, row_id)


async def count_rows(db: DatabaseAdapter, table: str, where: str = "", params: Sequence | None = None) -> int:
    query = f"SELECT COUNT(*) AS count FROM {table}"
    if where:
        query += f" WHERE {where}"
    row = await db.fetch_one(query, params or ())
    return int(row["count"]) if row else 0


async def init_db() -> None:
    db = await get_db()
    for stmt in SCHEMA:
        await db.execute(stmt)
    await db.commit()

    if SEED_DEMO_DATA:
        await _seed_demo_ngos(db)


async def close_db() -> None:
    global _db
    if _db is not None:
        await _db.close()
        _db = None


# Verified rescue partners used for UI previews and local development
_DEMO_NGOS = [
    ("demo-ngo-delhi", "Delhi Animal Rescue Trust", "New Delhi", "Delhi", 28.6280, 77.2189, "+91-11-4000-1111"),
    ("demo-ngo-gurugram", "Gurugram Paws Shelter", "Gurugram", "Haryana", 28.4595, 77.0266, "+91-124-400-2222"),
    ("demo-ngo-mumbai", "Mumbai Stray Care Foundation", "Mumbai", "Maharashtra", 19.0760, 72.8777, "+91-22-4000-3333"),
    ("demo-ngo-bengaluru", "Bengaluru Animal Aid", "Bengaluru", "Karnataka", 12.9716, 77.5946, "+91-80-4000-4444"),
]


async def _seed_demo_ngos(db: DatabaseAdapter) -> None:
    """Seed a few verified NGOs so nearby search has something to show."""
    existing_rows = await db.fetch_all("SELECT id FROM ngos WHERE id LIKE 'demo-ngo-%'")
    existing = {row["id"] for row in existing_rows}
    now = utc_now()
    rows = [
        (ngo_id, name, phone, city, state, lat, lon, 1, "active", now, now)
        for ngo_id, name, city, state, lat, lon, phone in _DEMO_NGOS
        if ngo_id not in existing
    ]
    if not rows:
        return

    await db.executemany(
        """INSERT INTO ngos (
            id, name, phone, city, state, latitude, longitude,
            is_verified, status, verified_at, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        rows,
    )
    await db.commit()
    logger.info("Seeded %d demo NGOs", len(rows))
