import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jeevraksha.config import CORS_ORIGINS
from jeevraksha.database import close_db, init_db
from jeevraksha.routers import (
    adoptions,
    auth,
    contact,
    dashboard,
    donations,
    ngos,
    reports,
    sponsorships,
    stream,
    triage,
    volunteers,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting JeevRaksha...")
    await init_db()
    logger.info("Database initialized")
    yield
    await close_db()
    logger.info("JeevRaksha shut down")


app = FastAPI(
    title="JeevRaksha",
    description="Animal rescue platform - report, triage and coordinate rescues with NGOs and volunteers",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(stream.router)
app.include_router(auth.router)
app.include_router(reports.router)
app.include_router(ngos.router)
app.include_router(volunteers.router)
app.include_router(triage.router)
app.include_router(donations.router)
app.include_router(sponsorships.router)
app.include_router(adoptions.router)
app.include_router(dashboard.router)
app.include_router(contact.router)


@app.get("/api/health")
async def health():
    return {
        "status": "ok",
        "message": "JeevRaksha API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
