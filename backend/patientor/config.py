"""Application settings via pydantic-settings."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

APP_VERSION = "0.1.0"


class Settings(BaseSettings):
    """Patientor service configuration.

    All settings can be overridden via environment variables or .env file.
    """

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # API
    api_key: str = "dev-key-change-me"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Patient store
    patient_store_backend: Literal["mock", "http"] = "mock"
    patient_store_url: str = "http://localhost:3001/api"
    patient_store_timeout: float = 10.0
    store_error_prefix: str = "Something went wrong. Error: "
    mock_extra_patients: int = 0

    # Entry submission
    submission_lock_ttl_seconds: int = 30

    # Logging
    log_level: str = "INFO"
    hipaa_audit_log: bool = True

    model_config = {
        "env_file": str(Path(__file__).resolve().parent.parent.parent / ".env"),
        "env_file_encoding": "utf-8",
        "env_prefix": "PATIENTOR_",
    }


settings = Settings()
