"""
Optional update check.

Tells users on stderr when a newer statecraft release is on PyPI. Runs in a
daemon thread after a command finishes, caches the latest version in the
temp directory for a day and never raises.

Skipped when:
- CI is "true" or "1"
- STATECRAFT_NO_UPDATE_CHECK is "1" or "true"
- the running version is a development build
"""

import json
import logging
import os
import re
import tempfile
import threading
import time
from pathlib import Path

import httpx
from rich.console import Console

from statecraft.core.constants import ENV_NO_UPDATE_CHECK

logger = logging.getLogger(__name__)

PYPI_URL = "https://pypi.org/pypi/statecraft/json"
CACHE_TTL_SECONDS = 24 * 60 * 60
FETCH_TIMEOUT_SECONDS = 3.0
CACHE_FILENAME = "statecraft-update-check.json"

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)")

err_console = Console(stderr=True)


def get_cache_path() -> Path:
    """Cache file in the system temp directory."""
    return Path(tempfile.gettempdir()) / CACHE_FILENAME


def parse_version(version: str) -> tuple[int, int, int] | None:
    """
    Parse the leading ``X.Y.Z`` of a version string.

    Example:
        >>> parse_version("1.4.2")
        (1, 4, 2)
        >>> parse_version("garbage") is None
        True
    """
    match = _VERSION_RE.match(version.strip())
    if not match:
        return None
    major, minor, patch = (int(part) for part in match.groups())
    return major, minor, patch


def is_newer(latest: str, current: str) -> bool:
    """Whether ``latest`` is a higher release than ``current``; False if either is unparseable."""
    latest_parts = parse_version(latest)
    current_parts = parse_version(current)
    if latest_parts is None or current_parts is None:
        return False
    return latest_parts > current_parts


def is_dev_version(version: str) -> bool:
    """Development builds carry a ``dev`` marker or a local ``+`` segment."""
    return "dev" in version or "+" in version


def should_skip(current_version: str) -> bool:
    """Whether the update check is disabled for this run."""
    if os.environ.get("CI") in ("true", "1"):
        return True
    if os.environ.get(ENV_NO_UPDATE_CHECK) in ("1", "true"):
        return True
    return is_dev_version(current_version)


def read_cache(now: float | None = None) -> str | None:
    """Return the cached latest version if the cache is fresh."""
    if now is None:
        now = time.time()
    try:
        data = json.loads(get_cache_path().read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    last_check = data.get("lastCheck")
    latest = data.get("latestVersion")
    if not isinstance(last_check, (int, float)) or not isinstance(latest, str):
        return None
    if now - last_check >= CACHE_TTL_SECONDS:
        return None
    return latest


def write_cache(latest_version: str) -> None:
    """Best-effort cache write; a read-only temp dir is not an error."""
    try:
        get_cache_path().write_text(
            json.dumps({"lastCheck": time.time(), "latestVersion": latest_version}),
            encoding="utf-8",
        )
    except OSError as e:
        logger.debug("Could not write update cache: %s", e)


def fetch_latest_version(client: httpx.Client | None = None) -> str | None:
    """
    Ask PyPI for the latest released version.

    Args:
        client: Optional httpx client (tests pass one with a mock transport)

    Returns:
        The version string, or None on any network or format problem
    """
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=FETCH_TIMEOUT_SECONDS)
    try:
        response = client.get(PYPI_URL)
        response.raise_for_status()
        version = response.json().get("info", {}).get("version")
        return version if isinstance(version, str) else None
    except (httpx.HTTPError, ValueError, AttributeError) as e:
        logger.debug("Update check failed: %s", e)
        return None
    finally:
        if owns_client:
            client.close()


def check_for_update(current_version: str, client: httpx.Client | None = None) -> str | None:
    """
    Return the newer version available, if any.

    Uses the cache when fresh, otherwise fetches and refreshes the cache.
    """
    latest = read_cache()
    if latest is None:
        latest = fetch_latest_version(client)
        if latest is not None:
            write_cache(latest)
    if latest is not None and is_newer(latest, current_version):
        return latest
    return None


def _notify(current_version: str) -> None:
    latest = check_for_update(current_version)
    if latest:
        err_console.print(
            f"[yellow]A new version of Statecraft is available: {latest} "
            f"(you have {current_version}).[/yellow] "
            "Upgrade: [cyan]pip install -U statecraft[/cyan]"
        )


def run_update_check(current_version: str) -> threading.Thread | None:
    """
    Start the update check in a daemon thread.

    Returns:
        The started thread, or None when the check is skipped
    """
    if should_skip(current_version):
        return None
    thread = threading.Thread(target=_notify, args=(current_version,), daemon=True)
    thread.start()
    return thread
