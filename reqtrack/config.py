from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str
    database_url_direct: str | None = None

    # JWT
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # App
    app_name: str = "ReqTrack"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Request tracking
    tracking_flush_policy: Literal["immediate", "batched"] = "immediate"
    tracking_batch_size: int = Field(default=10, ge=1)
    tracking_path_prefix: str = "/api"


settings = Settings()
