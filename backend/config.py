import json
from typing import Annotated

from pydantic_settings import BaseSettings, NoDecode
from pydantic import field_validator
from pathlib import Path


class Settings(BaseSettings):
    countries_url: str = "https://xcountries-backend.azurewebsites.net/all"
    request_timeout_seconds: float = 10.0
    session_ttl_seconds: int = 300
    refresh_interval_seconds: int = 1
    page_rate_limit: str = "30/minute"
    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    log_level: str = "INFO"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            # Accept JSON array or comma-separated string
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()

    model_config = {
        "env_file": str(Path(__file__).resolve().parent.parent / ".env"),
        "env_file_encoding": "utf-8",
    }


settings = Settings()
