from functools import lru_cache
from typing import List, Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global settings for the job portal API.
    Values are read from the environment and from a local .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Project
    project_name: str = "Job Portal API"
    api_prefix: str = "/api"
    debug: bool = False

    # Staff authentication (JWT)
    secret_key: str = "changeme"
    access_token_expire_minutes: int = 60
    algorithm: str = "HS256"

    # Database
    database_url: str = "sqlite:///./dev.db"

    # CORS
    allowed_origins: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Public URLs (shareable portal links)
    public_app_url: str = "http://localhost:5173"

    # Portal tokens
    portal_token_ttl_days: int = 7

    # Portal sessions
    portal_session_ttl_minutes: int = 1440
    portal_session_cookie: str = "portal_session"
    portal_session_cookie_secure: bool = False
    portal_session_backend: Literal["memory", "database"] = "memory"

    # Live updates
    live_updates_path: str = "/ws"
    live_updates_require_access: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def portal_url_for(self, token: str) -> str:
        """Shareable link sent to clients for token based portal access."""
        base = (self.public_app_url or "").strip().rstrip("/")
        return f"{base}/portal/{token}"


@lru_cache
def get_settings() -> Settings:
    """Return the cached global settings instance."""
    return Settings()


settings = get_settings()
