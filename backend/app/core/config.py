# backend/app/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):

    PROJECT_NAME: str = "Team Pulse"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ── Database ─────────────────────────────────────────────
    DATABASE_URL: str = "postgresql+asyncpg://localhost:5432/teampulse"
    DB_ECHO: bool = False

    # ── Auth (JWT de session émis par Clerk) ─────────────────
    # Clé publique PEM de l'instance Clerk (RS256), ou secret partagé en dev (HS256)
    AUTH_JWT_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    AUTH_ISSUER: Optional[str] = None

    # ── Règles produit ───────────────────────────────────────
    MIN_RESPONSES_FOR_SYNTHESIS: int = 3
    PULSE_HISTORY_DAYS: int = 120
    TEAM_TIMEZONE: str = "Europe/Amsterdam"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding='utf-8',
        extra='ignore'
        )

settings = Settings()
