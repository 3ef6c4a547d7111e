import os

# Detect environment (default to production)
ENV = os.getenv("APP_ENV", "production").lower()


def _database_url() -> str:
    url = os.getenv("DATABASE_URL") or "sqlite+aiosqlite:///./vuestagram.db"
    # Hosted Postgres hands out postgresql:// but the async engine needs asyncpg
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


DATABASE_URL = _database_url()

SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_TTL_MINUTES = int(os.getenv("ACCESS_TOKEN_TTL_MINUTES", "60"))
REFRESH_TOKEN_TTL_MINUTES = int(os.getenv("REFRESH_TOKEN_TTL_MINUTES", "20160"))

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "").split(",")
    if origin.strip()
]
DEV_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
