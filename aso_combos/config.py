"""Application configuration using pydantic-settings."""

import json
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "ASO Combo Engine"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"
    cors_origins: Annotated[list[str], NoDecode] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Combo generation
    combo_min_length: int = 2
    combo_max_length: int = 4
    combo_max_per_source: int = 500
    combo_max_total: int = 2500
    recommended_limit: int = 10
    top_combo_limit: int = 500

    # Optional JSON rule file (brand/category/benefit/verb/time keyword lists)
    combo_rules_path: str | None = None

    @field_validator("api_v1_prefix")
    @classmethod
    def _normalize_api_prefix(cls, value: str) -> str:
        """Normalize route prefix values to `/segment` form."""
        stripped = value.strip().strip("/")
        return f"/{stripped}" if stripped else ""

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, value: object) -> object:
        """Accept a JSON array or a comma-separated string for CORS_ORIGINS."""
        if isinstance(value, str):
            raw = value.strip()
            if raw.startswith("["):
                try:
                    value = json.loads(raw)
                except json.JSONDecodeError as exc:
                    raise ValueError("CORS_ORIGINS is not a valid JSON array.") from exc
            else:
                value = raw.split(",")
        if isinstance(value, list | tuple):
            return [str(origin).strip() for origin in value if str(origin).strip()]
        return value

    @field_validator(
        "combo_min_length",
        "combo_max_per_source",
        "combo_max_total",
        "recommended_limit",
        "top_combo_limit",
    )
    @classmethod
    def _validate_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Combo limits must be positive.")
        return value

    @model_validator(mode="after")
    def _validate_combo_lengths(self) -> "Settings":
        if self.combo_max_length < 2:
            raise ValueError("COMBO_MAX_LENGTH must be at least 2.")
        if self.combo_min_length > self.combo_max_length:
            raise ValueError("COMBO_MIN_LENGTH must not exceed COMBO_MAX_LENGTH.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
