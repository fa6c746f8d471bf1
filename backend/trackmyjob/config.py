"""
Application Configuration
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "TrackMyJob API"
    debug: bool = False
    sql_echo: bool = False  # Set to True to log all SQL queries (verbose)
    api_port: int = 8000

    # Database (PostgreSQL unless an explicit URL is given)
    database_url_override: str = ""
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "trackmyjob"
    db_user: str = "postgres"
    db_password: str = "postgres"

    # Managed auth service
    auth_mode: str = "remote"  # remote, jwt
    auth_url: str = "http://localhost:54321"
    auth_api_key: str = ""
    auth_timeout_seconds: float = 10.0
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"

    # Storage
    storage_path: str = "./storage"
    storage_public_url: str = "/storage"
    max_upload_size_mb: int = 10
    max_avatar_size_mb: int = 2

    # Comma-separated list, "*" allows everything
    cors_origins_raw: str = "*"

    @property
    def database_url(self) -> str:
        """Get async database URL."""
        if self.database_url_override:
            return self.database_url_override
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def max_avatar_bytes(self) -> int:
        return self.max_avatar_size_mb * 1024 * 1024

    @property
    def cors_origins(self) -> list[str]:
        """Get allowed CORS origins."""
        origins = [o.strip() for o in self.cors_origins_raw.split(",") if o.strip()]
        return origins or ["*"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
