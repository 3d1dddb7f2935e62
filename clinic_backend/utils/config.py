"""Application configuration utilities."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = Field(
        default="Vira Ayurveda Clinic",
    )
    app_version: str = Field(
        default="0.1.0",
    )
    clinic_name: str = Field(
        default="Dr. Rachitha's Clinic",
    )
    doctor_name: str = Field(
        default="Dr. Rachitha",
    )
    log_level: str = Field(
        default="INFO",
    )

    store_backend: Literal["redis", "memory"] = Field(
        default="redis",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
    )
    patients_key: str = Field(
        default="ayurvedic_patients",
    )
    appointments_key: str = Field(
        default="ayurvedic_appointments",
    )
    seed_sample_data: bool = Field(
        default=True,
    )

    gemini_api_key: str = Field(
        default="",
    )
    gemini_model: str = Field(
        default="gemini-3-flash-preview",
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
    )
    gemini_use_stub: bool = Field(
        default=False,
    )
    gemini_timeout_seconds: Optional[float] = Field(
        default=None,
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
