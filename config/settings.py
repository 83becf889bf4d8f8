# config/settings.py
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ROOT_DIR = Path(__file__).resolve().parents[1]
DEFAULT_SAMPLE_CSV = ROOT_DIR / "data" / "sample" / "song_list.csv"


class Environment(str, Enum):
    LOCAL = "local"
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    project_name: str = "Song List API"
    version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Supabase
    supabase_url: str = Field(..., min_length=1)
    supabase_key: str = Field(..., min_length=1)
    songs_table: str = "songs"

    # Ingestion
    sample_csv_path: Path = DEFAULT_SAMPLE_CSV
    max_upload_bytes: int = 5 * 1024 * 1024

    # Comma separated
    cors_origins: str = "*"

    rate_limit_enabled: bool = True
    rate_limit_per_minute: int = 60
    metrics_enabled: bool = True
    sentry_dsn: Optional[str] = None

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError("SUPABASE_URL must be an http(s) URL")
        return v.rstrip("/")

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip().rstrip("/") for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION


class ClientSettings(BaseSettings):
    """Settings for the command-line client. Never needs Supabase credentials."""

    model_config = SettingsConfigDict(
        env_prefix="SONGLIST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: str = "http://localhost:8000"
    timeout: float = 10.0
    preferences_path: Path = Path.home() / ".songlist" / "preferences.json"
    health_interval: float = 30.0


@lru_cache
def get_settings() -> Settings:
    """
    Load server settings once.

    Fails fast: a missing SUPABASE_URL / SUPABASE_KEY stops startup.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise RuntimeError(
            f"Invalid configuration, SUPABASE_URL and SUPABASE_KEY must be provided: {e}"
        ) from e


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
