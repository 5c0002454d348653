"""
Application settings and configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _multiline_key(name: str) -> str:
    """Private keys are stored in .env files with literal \\n escapes"""
    return (os.getenv(name) or "").replace("\\n", "\n")


class Settings:
    # Application
    APP_NAME = "Store Audit Forms"
    VERSION = "1.0.0"
    DEBUG = os.getenv("DEBUG", "False") == "True"

    # Security
    SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key-change-in-production")
    ALGORITHM = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24 * 30  # 30 days

    # CORS
    ALLOWED_ORIGINS = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # MongoDB
    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DATABASE_NAME = os.getenv("DATABASE_NAME", "auditforms_db")

    # Google Sheets (reference data + submission rows)
    GOOGLE_SHEETS_CLIENT_EMAIL = os.getenv("GOOGLE_SHEETS_CLIENT_EMAIL", "")
    GOOGLE_SHEETS_PRIVATE_KEY = _multiline_key("GOOGLE_SHEETS_PRIVATE_KEY")
    GOOGLE_SPREADSHEET_ID = os.getenv("GOOGLE_SPREADSHEET_ID") or os.getenv("GOOGLE_SHEETS_ID", "")
    SHEETS_TIMEZONE = os.getenv("SHEETS_TIMEZONE", "Asia/Jakarta")

    # Google Cloud Storage (image uploads)
    GCS_PROJECT_ID = os.getenv("GCS_PROJECT_ID", "")
    GCS_CLIENT_EMAIL = os.getenv("GCS_CLIENT_EMAIL", "")
    GCS_PRIVATE_KEY = _multiline_key("GCS_PRIVATE_KEY")
    GCS_BUCKET_NAME = os.getenv("GCS_BUCKET_NAME", "")
    GCS_PUBLIC_HOST = "https://storage.googleapis.com"

    # Submissions
    SUBMISSION_TIMEOUT_SECONDS = float(os.getenv("SUBMISSION_TIMEOUT_SECONDS", "50"))
    UPSTREAM_TIMEOUT_SECONDS = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "30"))
    NOTES_MAX_LENGTH = 200

    # Pagination
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100

settings = Settings()
