import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_PATH = os.getenv("DATABASE_PATH", "jeevraksha.db")

DATABASE_URL = os.getenv("DATABASE_URL", "")
DATABASE_MAX_CONNECTIONS = int(os.getenv("DATABASE_MAX_CONNECTIONS", "5"))
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "true").lower() in ("1", "true", "yes", "on")

# Hosted auth service (GoTrue-compatible REST API)
AUTH_URL = os.getenv("AUTH_URL", "").rstrip("/")
AUTH_ANON_KEY = os.getenv("AUTH_ANON_KEY", "")
AUTH_TIMEOUT_SECONDS = float(os.getenv("AUTH_TIMEOUT_SECONDS", "15"))

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5000").rstrip("/")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Payments are simulated until a gateway is wired in
PAYMENT_BASE_URL = os.getenv("PAYMENT_BASE_URL", "https://payment.example.com/pay").rstrip("/")
PAYMENT_WEBHOOK_SECRET = os.getenv("PAYMENT_WEBHOOK_SECRET", "")

# Proximity search
NEARBY_DEFAULT_RADIUS_KM = float(os.getenv("NEARBY_DEFAULT_RADIUS_KM", "50"))
NEARBY_FALLBACK_LIMIT = int(os.getenv("NEARBY_FALLBACK_LIMIT", "10"))
