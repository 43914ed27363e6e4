import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./database/troop_events.db")
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-key-change-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 8))
    ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
    FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")
    LOG_FILE = os.environ.get("LOG_FILE")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    REMINDER_WEBHOOK_URL = os.environ.get("REMINDER_WEBHOOK_URL")
    DB_LOCK_TIMEOUT = float(os.environ.get("DB_LOCK_TIMEOUT", 30))
