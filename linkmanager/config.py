"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_UPLOAD_BYTES = 5 * 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    environment: Literal["development", "staging", "production"] = "development"
    host: str = "0.0.0.0"
    port: int = 3000

    # Storage
    data_file: Path = Field(
        default=Path("siteData.json"),
        description="JSON file holding the site configuration record.",
    )
    public_dir: Path = Field(
        default=Path("public"),
        description="Static front-end served at / when present.",
    )
    upload_dir: Path | None = Field(
        default=None,
        description="Upload directory. Defaults to <public_dir>/uploads.",
    )
    max_upload_bytes: int = Field(default=MAX_UPLOAD_BYTES, gt=0)

    # HTTP
    cors_origins: list[str] = ["*"]
    rate_limit_enabled: bool = True
    rate_limit_default: str = "120/minute"

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "console"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, v: str) -> str:
        """Accept lowercase level names from the environment."""
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def default_upload_dir(self) -> "Settings":
        """Place uploads under the public directory unless told otherwise."""
        if self.upload_dir is None:
            self.upload_dir = self.public_dir / "uploads"
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
