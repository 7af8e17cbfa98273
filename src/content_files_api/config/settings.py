# src/content_files_api/config/settings.py
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

STORAGE_BACKENDS = ("local", "s3", "azure")


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from content_files_api.config.settings import get_settings
        settings = get_settings()
        backend = settings.storage_backend
    """

    # Application Settings
    app_name: str = Field(
        default="content-files-api",
        description="Application name"
    )

    # Storage Backend
    storage_backend: str = Field(
        default="local",
        description="Blob storage backend: local, s3, or azure"
    )

    storage_connection_string: Optional[str] = Field(
        default=None,
        description="Connection string for the blob storage account (required for azure)"
    )

    storage_dir: str = Field(
        default="storage",
        description="Root directory used by the local storage backend"
    )

    # AWS Core Settings
    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_DEFAULT_REGION"
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL"
    )

    # HTTP
    cors_allow_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed by the CORS middleware"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("storage_backend", mode="before")
    @classmethod
    def normalize_storage_backend(cls, v):
        """Accept backend names in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v):
        """Validate storage backend is one of the allowed values."""
        if v not in STORAGE_BACKENDS:
            raise ValueError(f"Invalid storage_backend: {v}. Must be one of {list(STORAGE_BACKENDS)}")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper()

    @model_validator(mode="after")
    def check_connection_string_for_azure(self) -> Self:
        if self.storage_backend == "azure" and not self.storage_connection_string:
            raise ValueError("storage_connection_string is required when storage_backend is 'azure'")
        return self

    def describe(self) -> dict:
        """Settings as a printable dictionary, with secrets masked."""
        return {
            "App Name": self.app_name,
            "Storage Backend": self.storage_backend,
            "Storage Connection String": "***" if self.storage_connection_string else None,
            "Storage Dir": self.storage_dir,
            "AWS Region": self.aws_region,
            "AWS Endpoint": self.aws_endpoint_url,
            "CORS Origins": ", ".join(self.cors_allow_origins),
            "Log Level": self.log_level,
        }

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
