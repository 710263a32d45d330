from __future__ import annotations

import os
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allow selecting which .env to read (host vs docker)
ENV_FILE = os.environ.get(
    "ENV_FILE",
    str(Path(__file__).resolve().parent.parent / ".env"),
)


class Settings(BaseSettings):
    # ---- App ----
    app_name: str = "Accounts"
    env: str = "development"
    debug: bool = True
    api_v1_str: str = "/api/v1"

    # ---- DB ----
    database_url: str = "sqlite:///./dev.db"

    # ---- Users ----
    password_min_length: int = 8
    default_page_size: int = 10
    max_page_size: int = 100

    # ---- Other ----
    log_level: str = "info"

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # "INFO", "info", " Info " -> "INFO"
    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, v: object) -> str:
        s = str(v).strip().upper() if v is not None else ""
        return s or "INFO"


settings = Settings()
