# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")  # memory, database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://")

SESSION_BACKEND = os.getenv("SESSION_BACKEND", "memory")  # memory, redis
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
SESSION_CHECK_PERIOD_SECONDS = int(os.getenv("SESSION_CHECK_PERIOD_SECONDS", 24*60*60))
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", 24*60*60))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "sid")

SEED_SAMPLE_DATA = _flag("SEED_SAMPLE_DATA", "true")
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@shopelite.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

RECENT_ORDERS_LIMIT = int(os.getenv("RECENT_ORDERS_LIMIT", 5))
LOW_STOCK_THRESHOLD = int(os.getenv("LOW_STOCK_THRESHOLD", 10))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
