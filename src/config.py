"""
Application configuration
"""
import os
from typing import Optional


def _split_csv(value: str) -> list:
    return [item.strip() for item in value.split(",") if item.strip()]


def _bounded_int(value: str, low: int, high: int) -> int:
    """Parse an integer setting and clamp it into [low, high]"""
    return max(low, min(int(value), high))


class Settings:
    """Application settings"""

    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL", "")
    SUPABASE_SSLMODE: Optional[str] = os.getenv("SUPABASE_SSLMODE")

    # Auth settings (Supabase issues HS256 access tokens signed with the project JWT secret)
    SUPABASE_JWT_SECRET: Optional[str] = os.getenv("SUPABASE_JWT_SECRET")
    SUPABASE_JWT_AUDIENCE: str = os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated")

    # Number of past sessions kept in a user's history; also the default page
    # size of /getPredictionHistory, whose limit is capped at 100
    HISTORY_LIMIT: int = _bounded_int(os.getenv("HISTORY_LIMIT", "10"), 1, 100)

    # CORS settings
    CORS_ORIGINS: list = _split_csv(os.getenv("CORS_ORIGINS", "*"))
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list = ["*"]
    CORS_ALLOW_HEADERS: list = ["*"]


settings = Settings()
