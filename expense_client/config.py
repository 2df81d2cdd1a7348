from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore"}

    # Backend
    API_URL: str = "http://localhost:3000"
    REQUEST_TIMEOUT_SECONDS: float = 15.0

    # Auth
    GOOGLE_CLIENT_ID: str = ""

    # Persisted client storage (token, preferences)
    STORAGE_URL: str = "sqlite:///~/.expense-tracker/storage.db"

    # Listing
    DEFAULT_PAGE_SIZE: int = 10
    RECENT_EXPENSES_LIMIT: int = 5

    # Logging
    LOG_LEVEL: str = "WARNING"


settings = Settings()
