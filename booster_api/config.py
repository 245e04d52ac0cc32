import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./booster_api.db")

# Security - bearer tokens are HS256 JWTs signed with the shared secret
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only
JWT_ALGORITHM = "HS256"

# Set AUTH_ENABLED=false only for development/testing
AUTH_ENABLED = os.getenv("AUTH_ENABLED", "true").lower() == "true"

# Release endpoint is called directly from trusted front-end clients
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

# Claim ledger: how many replacement boosters get first refusal, and for how long
CLAIM_FANOUT_LIMIT = int(os.getenv("CLAIM_FANOUT_LIMIT", "5"))
CLAIM_TTL_HOURS = int(os.getenv("CLAIM_TTL_HOURS", "24"))

# "inline" runs notifications/claims/job pool in the request, "queue" hands them to the arq worker
RELEASE_FANOUT_MODE = os.getenv("RELEASE_FANOUT_MODE", "inline").lower()

# Database pool tuning (ignored for SQLite)
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "20"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "30"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "300"))
DB_LOG_SLOW_QUERIES = os.getenv("DB_LOG_SLOW_QUERIES", "true").lower() == "true"
DB_SLOW_QUERY_THRESHOLD = float(os.getenv("DB_SLOW_QUERY_THRESHOLD", "1.0"))
