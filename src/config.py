"""Application configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite+aiosqlite:///./tameeni_data.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # App
    log_level: str = "INFO"
    environment: str = "development"
    cors_origins: list[str] = ["*"]

    # Dashboard
    public_dir: str = "public"
    dashboard_path: str = "/dashboard.html"
    submissions_list_limit: int = Field(100, ge=1, le=100)

    # Report zero-row step updates as 404 instead of {"success": true, "updated": 0}
    strict_step_outcomes: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
