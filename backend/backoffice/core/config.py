from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: str = "dev"
    database_url: str = "sqlite:///./backoffice.db"
    log_level: str = "INFO"

    # Create tables on startup (tests and local dev); production runs alembic.
    db_auto_migrate: bool = False

    # Seeded once at startup when set
    bootstrap_admin_email: str = ""
    bootstrap_admin_name: str = "Back Office Admin"

    cors_origins: str = ""

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
