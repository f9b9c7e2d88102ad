from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from core.exceptions import ConfigurationError

# Load .env file from project root
_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


def _require_env(name: str, purpose: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigurationError(
            f"Environment variable '{name}' is required for {purpose}",
            {"variable": name},
        )
    return value


class StorageSettings(BaseModel):
    """Backup store the mirror writes to."""

    backend: Literal["datalake", "s3", "local"] = "datalake"
    file_system: str = "backup"
    connection_string_env: str = "AzureWebJobsStorageOutput"
    bucket: str | None = None
    prefix: str = ""
    region: str | None = None
    root: Path = Path("data") / "backup"

    @field_validator("prefix", mode="before")
    @classmethod
    def _strip_prefix(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip("/")

    @property
    def connection_string(self) -> str:
        return _require_env(self.connection_string_env, "the backup storage account")


class SourceSettings(BaseModel):
    """Source account the FileCreated content is read from."""

    backend: Literal["datalake", "local"] = "datalake"
    connection_string_env: str = "AzureWebJobsStorageInput"
    root: Path = Path("data") / "source"

    @property
    def connection_string(self) -> str:
        return _require_env(self.connection_string_env, "the source storage account")


class DispatchSettings(BaseModel):
    mode: Literal["inline", "queue"] = "inline"


class QueueSettings(BaseModel):
    broker_url_env: str = "CELERY_BROKER_URL"
    result_backend_env: str | None = "CELERY_RESULT_BACKEND"

    @property
    def broker_url(self) -> str:
        return _require_env(self.broker_url_env, "the Celery broker")

    @property
    def result_backend(self) -> str | None:
        if not self.result_backend_env:
            return None
        return os.getenv(self.result_backend_env)


class Settings(BaseModel):
    storage: StorageSettings = Field(default_factory=StorageSettings)
    source: SourceSettings = Field(default_factory=SourceSettings)
    dispatch: DispatchSettings = Field(default_factory=DispatchSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from YAML configuration file.

        Args:
            path: Optional path to configuration file. If not provided, uses
                LAKEMIRROR_CONFIG environment variable or defaults to config/default.yaml.

        Returns:
            Settings instance with loaded configuration.

        Raises:
            ConfigurationError: If the file does not exist or its content is invalid.
        """
        config_path = path or Path(os.getenv("LAKEMIRROR_CONFIG", "config/default.yaml"))
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                {"path": str(config_path)},
            )
        with config_path.open("r", encoding="utf-8") as fp:
            payload = yaml.safe_load(fp) or {}
        try:
            return cls(**payload)
        except Exception as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}", {"path": str(config_path)}) from exc


@lru_cache(maxsize=1)
def get_settings(path: str | None = None) -> Settings:
    return Settings.load(Path(path) if path else None)


__all__ = [
    "Settings",
    "StorageSettings",
    "SourceSettings",
    "DispatchSettings",
    "QueueSettings",
    "get_settings",
]
