from __future__ import annotations

from pathlib import Path

import pytest

from core.exceptions import ConfigurationError
from core.settings import Settings, get_settings


def test_default_config_file_loads():
    settings = Settings.load(Path(__file__).parent.parent / "config" / "default.yaml")

    assert settings.storage.backend == "datalake"
    assert settings.storage.file_system == "backup"
    assert settings.storage.connection_string_env == "AzureWebJobsStorageOutput"
    assert settings.source.connection_string_env == "AzureWebJobsStorageInput"
    assert settings.dispatch.mode == "inline"


def test_env_override_of_config_path(tmp_path, monkeypatch):
    config = tmp_path / "mirror.yaml"
    config.write_text("storage:\n  backend: s3\n  bucket: backups\n  prefix: /mirror/\n", encoding="utf-8")
    monkeypatch.setenv("LAKEMIRROR_CONFIG", str(config))

    settings = get_settings()

    assert settings.storage.backend == "s3"
    assert settings.storage.prefix == "mirror"
    assert settings.source.backend == "datalake"


def test_missing_file_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        Settings.load(tmp_path / "absent.yaml")


def test_invalid_content_is_configuration_error(tmp_path):
    config = tmp_path / "bad.yaml"
    config.write_text("storage:\n  backend: ftp\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        Settings.load(config)


def test_connection_string_is_read_from_environment(monkeypatch):
    settings = Settings()
    monkeypatch.setenv("AzureWebJobsStorageOutput", "DefaultEndpointsProtocol=https;AccountName=backup")

    assert settings.storage.connection_string.endswith("AccountName=backup")

    monkeypatch.delenv("AzureWebJobsStorageOutput")
    with pytest.raises(ConfigurationError):
        settings.storage.connection_string
