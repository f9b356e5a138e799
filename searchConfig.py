"""Service configuration loaded from environment variables or defaults."""

import logging
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the storage search service."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Multi Vehicle Storage Search"
    listings_path: Path = Field(
        default=Path("listings.json"),
        description="JSON catalog of listings, loaded once at startup.",
    )
    max_listings_per_location: int = Field(
        default=20,
        ge=0,
        description="Locations with more listings are not enumerated (2^n combinations each).",
    )
    max_vehicle_quantity: int = Field(
        default=1000,
        ge=0,
        description="Largest quantity accepted for a single vehicle query.",
    )
    strict_listing_limit: bool = Field(
        default=False,
        description="Fail startup instead of skipping a location over the listing limit.",
    )
    log_level: str = Field(default="INFO")

    @field_validator("listings_path", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def _check_log_level(cls, value: Any) -> str:
        level = str(value).strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level


settings = Settings()
