"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


MB = 1024 * 1024


class Settings(BaseSettings):
    # PostgreSQL (accounts)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "hirehub_user"
    postgres_password: str = "password"
    postgres_db: str = "hirehub_db"

    # MongoDB (profile aggregates)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "hirehub_docs"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Object store
    upload_dir: str = "./uploads"
    public_base_url: str = "http://localhost:8000"
    uploads_url_prefix: str = "/uploads"

    # Upload limits
    cv_max_bytes: int = Field(default=10 * MB, gt=0)
    photo_max_bytes: int = Field(default=5 * MB, gt=0)
    project_file_max_bytes: int = Field(default=10 * MB, gt=0)
    max_project_files: int = Field(default=10, gt=0)
    cv_allowed_mime_types: List[str] = [
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ]
    project_allowed_mime_types: List[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ]

    # Aggregate writes
    profile_write_attempts: int = Field(default=3, ge=1)

    # App
    debug: bool = True
    log_level: str = "INFO"

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def uploads_base_url(self) -> str:
        """Absolute URL prefix under which stored objects are served"""
        return self.public_base_url.rstrip("/") + "/" + self.uploads_url_prefix.strip("/")

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
