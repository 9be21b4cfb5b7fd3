from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    log_level: str = "INFO"
    environment: str = "dev"
    # Push provider: logging | fcm_v1 | firebase_admin
    messaging_provider: Literal["logging", "fcm_v1", "firebase_admin"] = "logging"
    fcm_project_id: str | None = None
    fcm_service_account_json: SecretStr | None = None  # Service Account JSON (HTTP v1)
    fcm_service_account_file: str | None = None  # Path or inline JSON
    fcm_timeout_seconds: float = 10.0
    fcm_max_concurrency: int = 20
    fcm_dry_run: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("fcm_max_concurrency")
    @classmethod
    def ensure_positive_concurrency(cls, value: int) -> int:
        if value < 1:
            raise ValueError("fcm_max_concurrency must be at least 1")
        return value

    def get_fcm_service_account_json(self) -> str | None:
        """
        Return the Service Account JSON string from either
        fcm_service_account_json (direct JSON) or fcm_service_account_file.
        If fcm_service_account_file starts with '{', treat as inline JSON; otherwise read file.
        """
        if self.fcm_service_account_json:
            return self.fcm_service_account_json.get_secret_value()
        if self.fcm_service_account_file:
            content = self.fcm_service_account_file.strip()
            if content.startswith("{"):
                return content
            # treat as path
            try:
                with open(content, encoding="utf-8") as f:
                    return f.read()
            except OSError:
                return None
        return None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
