"""
Uploads plugin artifacts to a local server installation and restarts it.

Requires the server to run in development mode (`sonar.dev=true` in
`conf/sonar.properties`) so that the restart web service is enabled.

The upload is two phases that are not rolled back together: artifacts are
copied into `extensions/downloads/` first, then the server is asked to
restart. A failed restart leaves the copied artifacts in place.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from sonar_dev.checks import require_dir, require_file
from sonar_dev.errors import ConfigurationError, FileIOError, RemoteError

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "http://localhost:9000"

CONF_FILE = Path("conf") / "sonar.properties"
DOWNLOADS_DIR = Path("extensions") / "downloads"
RESTART_PATH = "/api/system/restart"


@dataclass
class UploadResult:
    copied: list[Path] = field(default_factory=list)
    restarted: bool = False


def check_server_home(server_home: Path) -> Path:
    """Check that `server_home` looks like a server installation."""
    require_dir(server_home, "Server home directory does not exist")
    require_file(server_home / CONF_FILE, "Not a valid server home directory")
    return server_home


def check_artifact(artifact: Path) -> Path:
    return require_file(artifact, "Plugin artifact does not exist")


def check_server_url(server_url: str) -> httpx.URL:
    """Parse `server_url`, which must be an absolute http(s) URL."""
    try:
        url = httpx.URL(server_url)
    except httpx.InvalidURL as e:
        raise ConfigurationError(f"Invalid server URL {server_url!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"Invalid server URL {server_url!r}: expected http(s)://host[:port]")
    return url


def restart_url(server_url: str) -> str:
    """
    The restart web service URL, keeping any context path of `server_url`.
    Query and fragment are dropped. Raises `httpx.InvalidURL` for a malformed URL.
    """
    url = httpx.URL(server_url)
    path = url.path.rstrip("/") + RESTART_PATH
    return str(url.copy_with(path=path, query=None, fragment=None))


def copy_artifacts(server_home: Path, artifacts: Sequence[Path]) -> list[Path]:
    """
    Phase one: copy each artifact into `<server_home>/extensions/downloads/`,
    creating that directory if needed. Returns the destination paths.
    """
    downloads_dir = server_home / DOWNLOADS_DIR
    copied: list[Path] = []
    for artifact in artifacts:
        logger.info("Copying %s", artifact.absolute())
        try:
            downloads_dir.mkdir(parents=True, exist_ok=True)
            copied.append(Path(shutil.copy2(artifact, downloads_dir)))
        except OSError as e:
            raise FileIOError(
                f"Fail to copy {artifact.absolute()} to {downloads_dir}: {e}", str(artifact)
            ) from e
    return copied


def restart_server(
    server_url: str,
    client: httpx.Client | None = None,
    timeout: float | None = None,
) -> None:
    """
    Phase two: ask the server to restart. Success is `204 No Content`.

    Raises `RemoteError` on any other status or on a transport failure. A
    `client` may be passed in; otherwise one is created for this request,
    using `timeout` if set and the httpx default otherwise.
    """
    logger.info("Restarting server")
    try:
        url = restart_url(server_url)
    except httpx.InvalidURL as e:
        raise RemoteError(f"Fail to restart server {server_url}: {e}") from e
    if client is None:
        client_kwargs = {} if timeout is None else {"timeout": timeout}
        with httpx.Client(**client_kwargs) as own_client:
            response = _post_restart(own_client, server_url, url)
    else:
        response = _post_restart(client, server_url, url)

    if response.status_code != httpx.codes.NO_CONTENT:
        raise RemoteError(
            f"Fail to restart server {server_url}: {response.status_code} {response.reason_phrase}",
            status_code=response.status_code,
        )
    logger.info("Server restarted")


def _post_restart(client: httpx.Client, server_url: str, url: str) -> httpx.Response:
    try:
        return client.post(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise RemoteError(f"Fail to restart server {server_url}: {e}") from e


def upload(
    server_home: Path,
    artifacts: Sequence[Path],
    server_url: str = DEFAULT_SERVER_URL,
    client: httpx.Client | None = None,
    timeout: float | None = None,
) -> UploadResult:
    """
    Validate everything, copy the artifacts, then restart the server once.

    All checks run before the first copy, so a `ConfigurationError` means
    nothing was changed. With no artifacts nothing is copied and the server
    is not restarted.
    """
    check_server_home(server_home)
    check_server_url(server_url)
    for artifact in artifacts:
        check_artifact(artifact)

    result = UploadResult()
    if not artifacts:
        logger.info("No plugins to be uploaded")
        return result

    result.copied = copy_artifacts(server_home, artifacts)
    restart_server(server_url, client=client, timeout=timeout)
    result.restarted = True
    return result
