"""Application configuration."""
from typing import Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./bistro.db"

    # Admin dashboard
    admin_password: str

    # Restaurant
    restaurant_name: str = "Restaurant"

    # Menu documents
    menu_backend: Literal["sql", "yaml"] = "sql"
    menu_collection: str = "menu"
    menu_seed_file: Optional[str] = None

    # Cart sessions
    cart_session_ttl_hours: int = 24

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def check_menu_file(self) -> "Settings":
        if self.menu_backend == "yaml" and not self.menu_seed_file:
            raise ValueError("menu_seed_file is required when menu_backend is 'yaml'")
        return self


settings = Settings()
