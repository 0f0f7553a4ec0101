# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string, or sqlite:// for local runs)
      - JWT_SECRET (signing secret shared with the auth provider)

    Optional:
      - SEED_DEMO_DATA (load the demo laundry catalog + promotions on startup)
      - CART_SESSION_TTL_MINUTES (idle time before a cashier cart is dropped)
    """

    PROJECT_NAME: str = "Laundry Cashier API"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str

    # JWT verification (backend-side)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    # Role given to identities seen for the first time
    DEFAULT_STAFF_ROLE: str = "cashier"

    SEED_DEMO_DATA: bool = False

    # Idle cashier carts older than this are dropped
    CART_SESSION_TTL_MINUTES: int = 720

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
