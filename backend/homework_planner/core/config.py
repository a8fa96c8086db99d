import os
from dotenv import load_dotenv

# Load .env from the backend directory
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "..", ".env"))

SECRET_KEY: str = os.getenv("SECRET_KEY", "homework-planner-dev-secret-change-in-prod")
ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))  # 24h

# Storage, under backend/data/ by default
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.abspath(os.path.join(BASE_DIR, "..", ".."))

DATA_DIR: str = os.getenv("DATA_DIR", os.path.join(BACKEND_DIR, "data"))
DATABASE_PATH: str = os.getenv("DATABASE_PATH", os.path.join(DATA_DIR, "homework.db"))
STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "sqlite").lower()  # sqlite | json
UPLOADS_DIR: str = os.getenv("UPLOADS_DIR", os.path.join(DATA_DIR, "uploads"))

# Uploads
MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))  # 5MB
ALLOWED_UPLOAD_TYPES: frozenset = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/png",
    "text/plain",
})

# Engine
DEFAULT_PAGE_LIMIT: int = int(os.getenv("DEFAULT_PAGE_LIMIT", "50"))
RECURRENCE_OCCURRENCES: int = 4

# HTTP
CORS_ORIGINS: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Outbound email
EMAIL_HOST: str = os.getenv("EMAIL_HOST", "smtp.example.com")
EMAIL_PORT: int = int(os.getenv("EMAIL_PORT", "587"))
EMAIL_USER: str = os.getenv("EMAIL_USER", "")
EMAIL_PASS: str = os.getenv("EMAIL_PASS", "")
EMAIL_FROM: str = os.getenv("EMAIL_FROM", "noreply@example.com")
EMAIL_USE_TLS: bool = os.getenv("EMAIL_USE_TLS", "true").lower() == "true"

# Seeded on first start when the users table is empty
DEFAULT_ADMIN_EMAIL: str = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@school.example")
DEFAULT_ADMIN_PASSWORD: str = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin")
DEFAULT_ADMIN_NAME: str = os.getenv("DEFAULT_ADMIN_NAME", "Administrator")
