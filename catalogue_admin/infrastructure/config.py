"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Storage
    storage_backend: Literal["memory", "database"] = "memory"
    database_url: str = "postgresql+asyncpg://catalogue:catalogue_dev_password@db:5432/catalogue"

    # Authentication
    catalogue_api_key: str = "dev-api-key-change-in-production"
    admin_member_ids: list[int] = [1]

    # Catalogue
    auto_stock_id: bool = True
    stock_id_separator: str = "-"
    breadcrumb_max_depth: int = 20

    # Links
    base_url: str = "/"
    absolute_base_url: str = "http://localhost:8000"

    # Images
    default_product_image_name: str | None = None
    default_product_image_url: str | None = None
    placeholder_image_name: str = "no-image.png"
    placeholder_image_url: str = "/static/images/no-image.png"

    # Site access
    site_can_view_type: Literal["Anyone", "LoggedInUsers", "OnlyTheseUsers"] = "Anyone"
    site_viewer_groups: list[str] = []

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
