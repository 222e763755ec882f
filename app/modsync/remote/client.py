"""HTTP client for the mod server.

Every read of server metadata (manifest, config list, platform version,
admin status) swallows network and parse errors and returns an empty
result, so an offline server simply looks like a server with nothing to
offer. Binary downloads are different: their errors are raised as
RemoteError and handled by the caller.
"""

import json
import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import requests
from pydantic import TypeAdapter, ValidationError

from modsync.configs.models import ConfigFileRecord
from modsync.models.package import PackageDescriptor, package_key
from modsync.remote.models import AdminStatus

logger = logging.getLogger(__name__)

# Status checks stay snappy; archives may be very large.
MANIFEST_TIMEOUT = 5.0
DOWNLOAD_TIMEOUT = 6 * 60 * 60.0
CONNECT_TIMEOUT = 10.0

CONFIG_LIST_PATH = "ConfigFiles.json"
DEFAULT_PLATFORM = "spt"

_manifest_adapter = TypeAdapter(list[PackageDescriptor])
_config_list_adapter = TypeAdapter(list[ConfigFileRecord])


class RemoteError(Exception):
    """Raised when a download from the server fails."""


class ServerClient:
    """Client for one mod server.

    Args:
        base_url: Server base URL, e.g. ``http://127.0.0.1:25569``.
        session: Optional requests session (a new one is created if None).
        platform: Path segment of the platform endpoints.
        manifest_timeout: Timeout in seconds for metadata requests.
        download_timeout: Read timeout in seconds for archive downloads.
    """

    def __init__(
        self,
        base_url: str,
        *,
        session: requests.Session | None = None,
        platform: str = DEFAULT_PLATFORM,
        manifest_timeout: float = MANIFEST_TIMEOUT,
        download_timeout: float = DOWNLOAD_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.platform = platform.strip("/")
        self.manifest_timeout = manifest_timeout
        self.download_timeout = download_timeout

    def url_for(self, path: str) -> str:
        """Build an absolute URL; absolute inputs are returned unchanged."""
        if "://" in path:
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    # -- metadata ---------------------------------------------------------

    def _get(self, path: str, params: dict[str, str] | None = None) -> requests.Response | None:
        """GET a metadata endpoint, returning None on any network error."""
        url = self.url_for(path)
        try:
            response = self.session.get(url, params=params, timeout=self.manifest_timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            logger.info("GET %s failed: HTTP %s", url, status)
            return None
        except requests.RequestException as e:
            logger.info("GET %s failed: %s", url, e)
            return None
        return response

    def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET a JSON endpoint, returning None on network or parse errors."""
        response = self._get(path, params)
        if response is None:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.info("Malformed JSON from %s: %s", self.url_for(path), e)
            return None

    def fetch_manifest(self, candidates: Sequence[str]) -> tuple[PackageDescriptor, ...]:
        """Fetch the package manifest from the first usable candidate.

        Candidates are tried in order. The first one that answers with a
        non-empty, well-formed list wins; results are never merged across
        candidates. Duplicate names keep their first occurrence.

        Args:
            candidates: Manifest paths under the base URL, or absolute URLs.

        Returns:
            Manifest entries, or an empty tuple when no candidate works.
        """
        for candidate in candidates:
            data = self._get_json(candidate)
            if not isinstance(data, list) or not data:
                continue
            try:
                descriptors = _manifest_adapter.validate_python(data)
            except ValidationError as e:
                logger.info("Invalid manifest at %s: %s", self.url_for(candidate), e)
                continue

            unique: dict[str, PackageDescriptor] = {}
            for descriptor in descriptors:
                if descriptor.name.strip():
                    unique.setdefault(descriptor.key, descriptor)
            if unique:
                return tuple(unique.values())

        return ()

    def find_descriptor(self, name: str, candidates: Sequence[str]) -> PackageDescriptor | None:
        """Re-fetch the manifest and look up one package by name."""
        key = package_key(name)
        for descriptor in self.fetch_manifest(candidates):
            if descriptor.key == key:
                return descriptor
        return None

    def fetch_config_list(self) -> tuple[ConfigFileRecord, ...]:
        """Fetch the list of server-side configuration files.

        Returns:
            Config records, or an empty tuple on any failure.
        """
        data = self._get_json(CONFIG_LIST_PATH)
        if not isinstance(data, list):
            return ()
        try:
            return tuple(_config_list_adapter.validate_python(data))
        except ValidationError as e:
            logger.info("Invalid config list: %s", e)
            return ()

    def fetch_platform_version(self) -> str | None:
        """Fetch the platform version the server runs.

        Returns:
            Version text such as ``3.9.8``, or None on any failure.
        """
        data = self._get_json(f"{self.platform}/version")
        if isinstance(data, str) and data.strip():
            return data.strip()
        if isinstance(data, int | float) and not isinstance(data, bool):
            return str(data)
        return None

    def check_reachable(self) -> bool:
        """Check whether the server answers HTTP requests at all."""
        try:
            self.session.head(self.base_url, timeout=self.manifest_timeout)
        except requests.RequestException:
            return False
        return True

    # -- admin ------------------------------------------------------------

    def validate_secret(self, secret: str) -> AdminStatus:
        """Validate the admin secret.

        Accepts both the JSON object answer and the legacy boolean text.

        Args:
            secret: Opaque credential.

        Returns:
            AdminStatus; disabled on any failure.
        """
        response = self._get("admin/validate", {"secret": secret})
        if response is None:
            return AdminStatus.disabled()

        text = response.text.strip()
        try:
            data = json.loads(text)
        except ValueError:
            return AdminStatus(is_enabled=_parse_bool(text))

        if isinstance(data, dict):
            try:
                return AdminStatus.model_validate(data)
            except ValidationError as e:
                logger.info("Invalid admin status: %s", e)
                return AdminStatus.disabled()
        if isinstance(data, bool):
            return AdminStatus(is_enabled=data)
        if isinstance(data, str):
            return AdminStatus(is_enabled=_parse_bool(data))
        return AdminStatus.disabled()

    def is_resource_running(self, resource: str, secret: str) -> bool:
        """Ask whether a privileged resource (e.g. the game server) is running."""
        return self._get_bool(f"admin/{quote(resource)}/running", secret)

    def close_resource(self, resource: str, secret: str) -> bool:
        """Ask the server to close a privileged resource."""
        return self._get_bool(f"admin/{quote(resource)}/close", secret)

    def _get_bool(self, path: str, secret: str) -> bool:
        response = self._get(path, {"secret": secret})
        if response is None:
            return False
        return _parse_bool(response.text)

    # -- downloads --------------------------------------------------------

    def resolve_archive_url(self, descriptor: PackageDescriptor) -> str:
        """Build the download URL of a package archive.

        An explicit ``downloadUrl`` wins; otherwise ``{base}/mods/{name}``.
        """
        if descriptor.download_url:
            return self.url_for(descriptor.download_url)
        return self.url_for(f"mods/{quote(descriptor.name)}")

    def platform_update_url(self) -> str:
        """URL of the full platform update archive."""
        return self.url_for(f"{self.platform}/update")

    def open_stream(self, url: str) -> requests.Response:
        """Open a streamed download.

        The caller must close the returned response.

        Raises:
            RemoteError: On connection failure or a non-success status.
        """
        try:
            response = self.session.get(
                url,
                stream=True,
                timeout=(CONNECT_TIMEOUT, self.download_timeout),
            )
        except requests.RequestException as e:
            raise RemoteError(f"Download failed for {url}: {e}") from e

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            response.close()
            raise RemoteError(f"Download failed for {url}: HTTP {response.status_code}") from e
        return response

    def download_config(self, file_name: str) -> bytes:
        """Download one configuration file.

        The endpoint is keyed by the file name without its extension.

        Raises:
            RemoteError: On any failure.
        """
        stem = file_name.rsplit(".", 1)[0] if "." in file_name else file_name
        url = self.url_for(f"configs/{quote(stem)}")
        try:
            response = self.session.get(url, timeout=(CONNECT_TIMEOUT, self.download_timeout))
            response.raise_for_status()
        except requests.RequestException as e:
            raise RemoteError(f"Config download failed for {file_name}: {e}") from e
        return response.content

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()


def _parse_bool(text: str) -> bool:
    return text.strip().strip('"').lower() == "true"
