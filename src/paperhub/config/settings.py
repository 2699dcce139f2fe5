"""Configuration management using Pydantic Settings."""

from pathlib import Path
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_prefix="PAPERHUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote paper/auth service
    api_base_url: str = Field("http://localhost:8080", description="Base URL of the paper service")
    request_timeout: float = Field(10.0, gt=0, description="Seconds before a remote call is abandoned")

    # Retry configuration (read-only calls only)
    max_retries: int = Field(3, ge=1, le=10)
    retry_backoff_factor: float = Field(0.5, gt=0)
    retry_max_wait: float = Field(5.0, gt=0)

    # Session persistence
    session_dir: Path = Field(Path.home() / ".paperhub")
    session_key: str = Field("currentUser", min_length=1)

    # Service
    seed_demo_data: bool = Field(True, description="Create demo users and papers on startup")

    # Logging
    log_level: str = Field("INFO")
    log_format: str = Field("json", pattern="^(json|text)$")

    @field_validator("session_dir")
    @classmethod
    def _create_dirs(cls, v: Path) -> Path:
        v.mkdir(parents=True, exist_ok=True)
        return v

    @property
    def session_db_path(self) -> Path:
        return self.session_dir / "session.db"


# Instantiate global settings
settings = Settings()
