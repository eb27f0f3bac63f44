"""Client for the BitTorrent Sync daemon's HTTP control API.

Each method maps to one RPC-style ``method`` of the daemon's ``/api``
endpoint. Hard failures (bad config, non-200 status, invalid JSON) raise;
failures reported by the daemon itself are only recorded and must be checked
with :meth:`BitTorrentSyncAPI.has_errors` / :meth:`BitTorrentSyncAPI.is_successful`
after the call.

Example::

    sync = BitTorrentSyncAPI({"host": "127.0.0.1:8888", "login": "api", "password": "secret"})
    if sync.add_folder("/home/music"):
        secret = sync.folder_by_dir("/home/music")["secret"]
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from loguru import logger

from btsync._version import __version__
from btsync.config import ClientConfig, resolve_client_config
from btsync.net.http import HttpClient, build_api_path
from btsync.params import (
    ADD_FOLDER_PARAMS,
    FOLDER_PREFS_PARAMS,
    GLOBAL_PREFS_PARAMS,
    keep_only,
)
from btsync.response import ErrorSet, parse_response
from btsync.schemas import FileEntry, Folder, Peer, Secrets
from btsync.tracing import Tracer, tracing_hooks

if TYPE_CHECKING:
    import httpx

__all__ = ["USER_AGENT", "BitTorrentSyncAPI"]

log = logger.bind(module="btsync.api")

USER_AGENT = f"Python client library v{__version__}"


class BitTorrentSyncAPI:
    """Synchronous client for one Sync daemon.

    Not safe for concurrent use: the error set is replaced by every request.
    """

    def __init__(
        self,
        config: Any,
        *,
        tracer: Tracer | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config_source: ClientConfig = resolve_client_config(config)
        self._errors: ErrorSet = {}
        headers = {"Content-Type": "application/json", "User-Agent": USER_AGENT}
        headers.update(self.config_source.headers())
        self._http = HttpClient(
            base_url=self.config_source.base_url,
            headers=headers,
            transport=transport,
            event_hooks=tracing_hooks(tracer) if tracer is not None else None,
        )

    # ------------------------------------------------------------------
    # Error set
    # ------------------------------------------------------------------

    @property
    def errors(self) -> ErrorSet:
        """Failures reported by the daemon for the last request."""
        return self._errors

    def has_errors(self) -> bool:
        return bool(self._errors)

    def is_successful(self) -> bool:
        return not self._errors

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def send_request(self, method: str, params: Mapping[str, Any] | None = None) -> Any:
        """Call ``method`` on the daemon and return the decoded JSON body.

        Raises:
            RequestError: When the daemon answers with a status other than 200
                or cannot be reached.
            FormatError: When the body is not valid JSON.
        """
        params = dict(params or {})
        log.debug("Calling {} with params {}", method, sorted(params))
        response = self._http.get(build_api_path(method, params))
        return self._parse_response(response.content)

    def _parse_response(self, body: bytes) -> Any:
        self._errors = {}
        data, errors = parse_response(body)
        self._errors = errors
        if errors:
            log.debug("Daemon reported errors: {}", errors)
        return data

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def folders(self, secret: str = "") -> list[Folder]:
        """Return all synced folders, or only the one identified by ``secret``."""
        params = {}
        if secret:
            params["secret"] = secret
        return self.send_request("get_folders", params)

    def folder_by_dir(self, directory: str) -> Folder:
        """Return the folder synced at ``directory``, or ``{}`` if there is none."""
        for folder in self.folders():
            if isinstance(folder, dict) and folder.get("dir") == directory:
                return folder
        return {}

    def add_folder(self, directory: str, params: Mapping[str, Any] | None = None) -> bool:
        """Add ``directory`` to Sync.

        Options: ``secret`` to join an existing folder, ``selective`` to enable
        selective sync. Other keys are dropped.
        """
        options = keep_only(params, ADD_FOLDER_PARAMS)
        options["selective_sync"] = 1 if options.pop("selective", False) else 0
        options["dir"] = directory
        self.send_request("add_folder", options)
        return self.is_successful()

    def remove_folder(self, secret: str) -> bool:
        """Stop syncing a folder; its files stay on disk."""
        self.send_request("remove_folder", {"secret": secret})
        return self.is_successful()

    def folder_peers(self, secret: str) -> list[Peer]:
        return self.send_request("get_folder_peers", {"secret": secret})

    def secrets(self, secret: str, encrypted: bool = False) -> Secrets:
        """Return the read-only/read-write secrets for a folder.

        With ``encrypted`` the daemon also generates a secret for encrypted peers.
        """
        params = {"secret": secret}
        if encrypted:
            params["type"] = "encryption"
        return self.send_request("get_secrets", params)

    def get_preferences(self, secret: str) -> dict[str, Any]:
        return self.send_request("get_folder_prefs", {"secret": secret})

    def set_preferences(self, secret: str, params: Mapping[str, Any]) -> dict[str, Any]:
        options = keep_only(params, FOLDER_PREFS_PARAMS)
        options["secret"] = secret
        return self.send_request("set_folder_prefs", options)

    def preferences(self, secret: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Get folder preferences, or update them when ``params`` is non-empty."""
        if params:
            return self.set_preferences(secret, params)
        return self.get_preferences(secret)

    def get_hosts(self, secret: str) -> list[str] | None:
        data = self.send_request("get_folder_hosts", {"secret": secret})
        return _field(data, "hosts")

    def set_hosts(self, secret: str, hosts: str | Iterable[str]) -> list[str] | None:
        data = self.send_request(
            "set_folder_hosts",
            {"secret": secret, "hosts": ",".join(_host_list(hosts))},
        )
        return _field(data, "hosts")

    def hosts(
        self,
        secret: str,
        hosts: str | Iterable[str] = (),
        force: bool = False,
    ) -> list[str] | None:
        """Get the predefined hosts of a folder, or replace them.

        An empty ``hosts`` only triggers an update when ``force`` is set, which
        is how the host list gets cleared.
        """
        hosts = _host_list(hosts)
        if hosts or force:
            return self.set_hosts(secret, hosts)
        return self.get_hosts(secret)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def files(self, secret: str, path: str | None = None) -> list[FileEntry]:
        """List files of a folder, at its root or under ``path``."""
        params = {"secret": secret}
        if path is not None:
            params["path"] = path
        return self.send_request("get_files", params)

    def file_download(
        self,
        secret: str,
        path: str,
        download: bool = True,
    ) -> FileEntry | list[FileEntry]:
        """Select (or deselect) a file for download in a selective sync folder.

        Returns the file entry when the daemon answers with exactly one,
        otherwise the full list.
        """
        data = self.send_request(
            "set_file_prefs",
            {"secret": secret, "path": path, "download": 1 if download else 0},
        )
        if isinstance(data, list) and len(data) == 1:
            return data[0]
        return data

    # ------------------------------------------------------------------
    # Daemon
    # ------------------------------------------------------------------

    def get_config(self) -> dict[str, Any]:
        return self.send_request("get_prefs")

    def set_config(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return self.send_request("set_prefs", keep_only(params, GLOBAL_PREFS_PARAMS))

    def config(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Get the daemon preferences, or update them when ``params`` is non-empty."""
        if params:
            return self.set_config(params)
        return self.get_config()

    def os(self) -> str | None:
        return _field(self.send_request("get_os"), "os")

    def version(self) -> str | None:
        return _field(self.send_request("get_version"), "version")

    def speed(self) -> dict[str, Any]:
        return self.send_request("get_speed")

    def off(self) -> bool:
        """Shut the daemon down."""
        self.send_request("shutdown")
        return self.is_successful()


def _host_list(hosts: str | Iterable[str]) -> list[str]:
    if isinstance(hosts, str):
        return [hosts]
    return list(hosts)


def _field(data: Any, name: str) -> Any:
    if isinstance(data, dict):
        return data.get(name)
    return None
