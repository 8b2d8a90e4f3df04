from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["critical", "error", "warning", "info", "debug"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 3000
    # Shared by structlog and uvicorn, so only names both accept.
    log_level: LogLevel = "info"

    github_username: str = ""
    github_token: str | None = None
    github_api_url: str = "https://api.github.com"
    github_api_version: str = "2022-11-28"
    # None keeps the httpx client default.
    github_timeout_seconds: float | None = None

    @field_validator("log_level", mode="before")
    @classmethod
    def _lowercase_log_level(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value
