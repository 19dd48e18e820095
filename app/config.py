"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./event_vehicles.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "0.0.0.0"
    BACKEND_PORT: int = 8080
    PUBLIC_BASE_URL: Optional[str] = None   # Base of verification links; falls back to request URL

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to require X-API-Key on admin endpoints

    # ── Event ─────────────────────────────────────────────────────────────
    EVENT_NAME: str = "Event Vehicle Registry"

    # ── QR codes ──────────────────────────────────────────────────────────
    QR_SCALE: int = 6       # Pixels per module
    QR_BORDER: int = 2      # Quiet zone, in modules

    # ── Export ────────────────────────────────────────────────────────────
    CSV_DATE_FORMAT: str = "%d/%m/%Y"

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None       # Defaults to <repo>/logs
    LOG_FILE: str = "registry.log"
    LOG_TO_FILE: bool = True            # Off for read-only deployments; console only
    LOG_MAX_BYTES: int = 5 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 10

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
