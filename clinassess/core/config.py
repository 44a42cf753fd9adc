"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application environment
    env: Literal["dev", "test", "staging", "prod"] = "dev"

    # Logging
    log_level: str = "INFO"

    # Local key-value storage (single device)
    storage_path: Path = Path("./storage/assessment.json")
    storage_key: str = "assessmentData"
    persist_responses: bool = True

    # Instrument definitions (YAML); None uses the packaged definitions
    instruments_dir: Path | None = None

    # Default patient profile for a new session
    default_age_group: Literal["child", "teen"] = "child"
    default_sex: Literal["male", "female", "nonbinary"] = "male"
    default_diagnosis: str = "none"

    # Substituted for the name placeholder in diagnosis narratives
    default_patient_name: str = "Patienten"

    @property
    def is_dev(self) -> bool:
        """Check if running in development mode."""
        return self.env == "dev"

    @property
    def is_prod(self) -> bool:
        """Check if running in production mode."""
        return self.env == "prod"

    @property
    def is_test(self) -> bool:
        """Check if running in test mode."""
        return self.env == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
