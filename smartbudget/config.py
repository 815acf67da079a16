import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")


def _split_csv(value):
    return [item.strip().lower() for item in (value or "").split(",") if item.strip()]


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'smartbudget.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Users API used by the session-based budget workflows
    USERS_API_URL = os.getenv("USERS_API_URL")
    USERS_API_TIMEOUT = float(os.getenv("USERS_API_TIMEOUT", "5"))
    USERS_API_TRANSPORT = None

    # Mobile sign-in handoff
    MOBILE_JWT_SECRET = os.getenv("MOBILE_JWT_SECRET", "dev-secret-change-me")
    MOBILE_REDIRECT_PREFIX = os.getenv("MOBILE_REDIRECT_PREFIX", "budgetingmobile://")
    MOBILE_CODE_TTL = int(os.getenv("MOBILE_CODE_TTL", "60"))
    MOBILE_TOKEN_DAYS = int(os.getenv("MOBILE_TOKEN_DAYS", "7"))

    ADMIN_EMAILS = _split_csv(os.getenv("ADMIN_EMAILS"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
