"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://catalog:catalog_dev_password@db:5432/catalog"
    create_tables_on_startup: bool = True

    # Authentication (empty disables the check)
    catalog_api_key: str = ""

    # HTTP boundary
    cors_allow_origins: list[str] = ["*"]
    request_timestamp_enabled: bool = True

    # Media store (S3 compatible)
    media_endpoint: str = "http://minio:9000"
    media_access_key: str = "admin"
    media_secret_key: str = "adminadmin"
    media_bucket: str = "catalog-media"
    media_secure: bool = False
    media_public_url: str = ""
    uploads_root: str = "Uploads"

    # Identifiers
    short_id_length: int = 4

    # Uploads
    allowed_image_extensions: list[str] = [".jpg", ".jpeg", ".png", ".gif", ".webp"]

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
