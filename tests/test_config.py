from __future__ import annotations

import base64
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from btsync.config import (
    CONFIG_FILE_NAME,
    ClientConfig,
    ClientSettings,
    build_auth_header,
    generate_config,
    resolve_client_config,
)
from btsync.errors import ConfigError


def _basic(login: str, password: str) -> str:
    return "Basic " + base64.b64encode(f"{login}:{password}".encode()).decode()


def test_mapping_source_builds_url_and_auth() -> None:
    config = resolve_client_config({"host": "127.0.0.1:8888", "login": "api", "password": "pw"})
    assert config.base_url == "http://127.0.0.1:8888"
    assert config.auth_header == _basic("api", "pw")
    assert config.headers() == {"Authorization": _basic("api", "pw")}


def test_mapping_without_password_is_unauthenticated() -> None:
    config = resolve_client_config({"host": "127.0.0.1:8888", "login": "api"})
    assert config.auth_header is None
    assert config.headers() == {}


def test_empty_credentials_still_build_a_header() -> None:
    assert build_auth_header("", "") == _basic("", "")
    assert build_auth_header(None, "pw") is None


def test_file_source_reads_webui_section(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILE_NAME
    path.write_text(
        json.dumps({"webui": {"listen": "0.0.0.0:9999", "login": "u", "password": "p"}}),
        encoding="utf-8",
    )
    config = resolve_client_config(str(path))
    assert config.base_url == "http://0.0.0.0:9999"
    assert config.auth_header == _basic("u", "p")
    assert resolve_client_config(path) == config


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found or has bad format"):
        resolve_client_config(str(tmp_path / "missing.json"))


@pytest.mark.parametrize("content", ["{", "[]", '{"webui": {}}', '{"other": 1}'])
def test_malformed_file_raises_config_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / CONFIG_FILE_NAME
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        resolve_client_config(str(path))


@pytest.mark.parametrize("source", [42, None, ["host"], 1.5])
def test_other_sources_raise_config_error(source) -> None:
    with pytest.raises(ConfigError, match="mapping or a path"):
        resolve_client_config(source)


def test_client_config_is_immutable() -> None:
    config = ClientConfig(base_url="http://x")
    with pytest.raises(ValidationError):
        config.base_url = "http://y"  # type: ignore[misc]
    assert resolve_client_config(config) is config


def test_generate_config_round_trips_through_resolver(tmp_path: Path) -> None:
    path = generate_config(tmp_path)
    assert path == tmp_path / CONFIG_FILE_NAME
    config = resolve_client_config(path)
    assert config.base_url == "http://127.0.0.1:8888"
    assert config.auth_header == _basic("api", "secret")


def test_settings_prefer_config_path(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("BTSYNC_CONFIG_PATH", str(tmp_path / CONFIG_FILE_NAME))
    settings = ClientSettings(_env_file=None)
    assert settings.to_source() == str(tmp_path / CONFIG_FILE_NAME)


def test_settings_fall_back_to_inline_credentials(monkeypatch) -> None:
    monkeypatch.delenv("BTSYNC_CONFIG_PATH", raising=False)
    monkeypatch.setenv("BTSYNC_HOST", "nas:8888")
    monkeypatch.setenv("BTSYNC_LOGIN", "admin")
    monkeypatch.setenv("BTSYNC_PASSWORD", "hunter2")
    settings = ClientSettings(_env_file=None)
    assert settings.to_source() == {"host": "nas:8888", "login": "admin", "password": "hunter2"}
    assert "hunter2" not in str(settings.export_safe())
