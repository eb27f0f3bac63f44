"""Resolve where the Sync daemon lives and how to authenticate against it.

Three sources are accepted:

- an inline mapping with ``host``, ``login`` and ``password``;
- a path to the daemon's own JSON config file, whose ``webui`` section holds
  ``listen``, ``login`` and ``password``;
- environment settings (``BTSYNC_*``), see :class:`ClientSettings`.
"""

from __future__ import annotations

import base64
import json
import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from btsync.errors import ConfigError

__all__ = [
    "CONFIG_FILE_NAME",
    "ClientConfig",
    "ClientSettings",
    "build_auth_header",
    "generate_config",
    "get_settings",
    "resolve_client_config",
]

log = logger.bind(module="btsync.config")

CONFIG_FILE_NAME: str = "bts_config.json"
DEFAULT_LISTEN: str = "127.0.0.1:8888"

_BAD_FILE_MESSAGE = "Config file not found or has bad format."
_BAD_ARGUMENT_MESSAGE = "Config argument should be a mapping or a path to the Sync config file."

# Template of the daemon config written by generate_config(). Only the
# webui section is read back by this library.
_CONFIG_TEMPLATE: dict[str, Any] = {
    "device_name": "Sync Server",
    "listening_port": 0,
    "storage_path": ".sync",
    "check_for_updates": False,
    "use_upnp": True,
    "download_limit": 0,
    "upload_limit": 0,
    "webui": {
        "listen": DEFAULT_LISTEN,
        "login": "api",
        "password": "secret",
        "api_key": "",
    },
}


class ClientConfig(BaseModel):
    """Connection details for one daemon; immutable once built."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    auth_header: str | None = None

    def headers(self) -> dict[str, str]:
        if self.auth_header is None:
            return {}
        return {"Authorization": self.auth_header}


def build_auth_header(login: str | None, password: str | None) -> str | None:
    """Return a Basic-Auth header value, or None unless both parts are given."""
    if login is None or password is None:
        return None
    token = base64.b64encode(f"{login}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def _from_mapping(source: Mapping[str, Any]) -> ClientConfig:
    host = source.get("host") or ""
    return ClientConfig(
        base_url=f"http://{host}",
        auth_header=build_auth_header(source.get("login"), source.get("password")),
    )


def _from_file(path: str | os.PathLike[str]) -> ClientConfig:
    try:
        document = json.loads(Path(path).read_text(encoding="utf-8"))
        webui = document["webui"]
        host = webui["listen"]
        login = webui.get("login")
        password = webui.get("password")
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
        raise ConfigError(_BAD_FILE_MESSAGE) from exc
    log.debug("Loaded Sync config from {}", path)
    return ClientConfig(
        base_url=f"http://{host}",
        auth_header=build_auth_header(login, password),
    )


def resolve_client_config(source: Any) -> ClientConfig:
    """Build a :class:`ClientConfig` from a mapping, a config path or a ClientConfig.

    Raises:
        ConfigError: When the file cannot be read or parsed, or when ``source``
            is of any other type.
    """
    if isinstance(source, ClientConfig):
        return source
    if isinstance(source, Mapping):
        return _from_mapping(source)
    if isinstance(source, (str, os.PathLike)):
        return _from_file(source)
    raise ConfigError(_BAD_ARGUMENT_MESSAGE)


def generate_config(directory: str | os.PathLike[str]) -> Path:
    """Write a default daemon config file into ``directory`` and return its path."""
    target = Path(directory) / CONFIG_FILE_NAME
    target.write_text(json.dumps(_CONFIG_TEMPLATE, indent=2) + "\n", encoding="utf-8")
    log.debug("Wrote default Sync config to {}", target)
    return target


class ClientSettings(BaseSettings):
    """Client configuration read from the environment (or a ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default=DEFAULT_LISTEN, alias="BTSYNC_HOST")
    login: str | None = Field(default=None, alias="BTSYNC_LOGIN")
    password: str | None = Field(default=None, alias="BTSYNC_PASSWORD")
    config_path: str | None = Field(default=None, alias="BTSYNC_CONFIG_PATH")

    def to_source(self) -> str | dict[str, Any]:
        """Return the argument to hand to :func:`resolve_client_config`."""
        if self.config_path:
            return self.config_path
        return {"host": self.host, "login": self.login, "password": self.password}

    def export_safe(self) -> dict[str, Any]:
        """Return non-sensitive settings for debugging/logging."""
        return {
            "host": self.host,
            "login": self.login,
            "config_path": self.config_path,
            "has_password": self.password is not None,
        }


@lru_cache
def get_settings() -> ClientSettings:
    """Load and cache client settings."""
    settings = ClientSettings()
    log.debug("Client settings initialised: {}", settings.export_safe())
    return settings
