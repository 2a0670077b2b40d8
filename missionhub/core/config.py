# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration: all env-driven, read once at import.
"""

import os


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "mission-participation")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")

    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./missionhub.db")
    POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))

    NOTIFICATION_SERVICE_URL: str = os.getenv(
        "NOTIFICATION_SERVICE_URL", "http://notification-service:8004"
    )
    MAILER_SERVICE_URL: str = os.getenv("MAILER_SERVICE_URL", "http://mailer-service:8005")
    HTTP_TIMEOUT: float = float(os.getenv("HTTP_TIMEOUT", "3.0"))

    # Ordered; drives role rotation and which role names are assignable.
    PUBLIC_ROLES: tuple[str, ...] = tuple(
        r.strip() for r in os.getenv("PUBLIC_ROLES", "captain,sidekick").split(",") if r.strip()
    )

    LOCALE_PATH: str = os.getenv("LOCALE_PATH", "")
    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
