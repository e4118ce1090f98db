# config.py
import os
import logging
from dotenv import load_dotenv

# Load local .env file if running locally
load_dotenv()

logger = logging.getLogger("config")

# --- Database ---
DATABASE_URL = os.getenv("DATABASE_URL")

# If not set (local dev fallback), build manually
if not DATABASE_URL:
    DB_USER = os.getenv("DB_USER", "erp")
    DB_PASSWORD = os.getenv("DB_PASSWORD", "")
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_PORT = os.getenv("DB_PORT", "5432")
    DB_NAME = os.getenv("DB_NAME", "erpdb")
    DATABASE_URL = f"postgresql+psycopg2://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    logger.warning("Using local development database configuration")

# --- Storage ---
# "database" uses DATABASE_URL; "memory" is a process-local store for tests and demos
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "database").lower()
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "true").lower() in ("1", "true", "yes")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Server ---
PORT = int(os.getenv("PORT", "8080"))
