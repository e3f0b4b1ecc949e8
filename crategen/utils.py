"""Loading of botocore-style service definitions.

Definitions come from a local ``service-2.json`` style file or from a URL
(for example a raw file in the botocore repository). Either way the result
is the parsed JSON object; structural validation happens later, when the
definition is converted into a Service.
"""

import json
from pathlib import Path
from typing import Any, NoReturn, Optional
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)

# Top-level sections every usable definition carries
EXPECTED_SECTIONS = ("metadata", "operations", "shapes")


class DefinitionLoaderError(Exception):
    """A service definition could not be read or parsed."""

    pass


def _fail(message: str, cause: Optional[BaseException] = None) -> NoReturn:
    logger.error(message)
    raise DefinitionLoaderError(message) from cause


def _as_definition(data: Any, source: str) -> dict[str, Any]:
    """Accept parsed JSON as a definition, warning about missing sections."""
    if not isinstance(data, dict):
        _fail(f"Service definition must be a JSON object: {source}")

    missing = [section for section in EXPECTED_SECTIONS if section not in data]
    if missing:
        logger.warning(f"{source} has no {', '.join(missing)} section(s)")

    protocol = data.get("metadata", {}).get("protocol")
    logger.debug(f"{source}: protocol={protocol!r}, {len(data.get('shapes', {}))} shapes")
    return data


def load_definition_from_file(file_path: str | Path) -> tuple[str, dict[str, Any]]:
    """Read a service definition from disk.

    Args:
        file_path: Path to the definition.

    Returns:
        Tuple of (source description, parsed definition).

    Raises:
        FileNotFoundError: If the file doesn't exist.
        DefinitionLoaderError: If the file cannot be read or is not a JSON object.
    """
    path = Path(file_path)
    source = str(path)

    if not path.is_file():
        logger.error(f"Definition file not found: {source}")
        raise FileNotFoundError(f"File not found: {source}")

    # botocore also ships definitions as *.normal and *.json.gz siblings
    if path.suffix.lower() != ".json":
        logger.info(f"Reading {source} as JSON despite its suffix")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        _fail(f"Error reading file {source}: {e}", e)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        _fail(f"Invalid JSON in file {source}: {e}", e)

    logger.info(f"Loaded definition from {source}")
    return source, _as_definition(data, source)


def load_definition_from_url(url: str, timeout: int = 30) -> tuple[str, dict[str, Any]]:
    """Download a service definition.

    Args:
        url: Absolute http(s) URL of the definition.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, parsed definition).

    Raises:
        DefinitionLoaderError: If the URL is malformed, the request fails,
            or the body is not a JSON object.
    """
    parsed = urlparse(url)
    if not (parsed.scheme and parsed.netloc):
        _fail(f"Invalid URL: {url!r}")

    logger.debug(f"Fetching definition from {url} (timeout {timeout}s)")
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        _fail(f"Request timeout after {timeout}s for URL: {url}", e)
    except requests.exceptions.ConnectionError as e:
        _fail(f"Connection error for URL: {url}", e)
    except requests.exceptions.HTTPError as e:
        _fail(f"HTTP error {e.response.status_code} for URL: {url}", e)
    except requests.exceptions.RequestException as e:
        _fail(f"Request error for URL {url}: {e}", e)

    content_type = response.headers.get("content-type", "").lower()
    if "json" not in content_type and not parsed.path.endswith(".json"):
        # raw.githubusercontent.com serves definitions as text/plain
        logger.info(f"{url} served as {content_type or 'unknown type'}, parsing as JSON")

    try:
        data = response.json()
    except ValueError as e:
        _fail(f"Invalid JSON response from URL {url}: {e}", e)

    logger.info(f"Loaded definition from {url}")
    return url, _as_definition(data, url)


def load_definition(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> tuple[str, dict[str, Any]]:
    """Load a service definition from exactly one of a file or a URL.

    Raises:
        DefinitionLoaderError: If neither or both sources are given, or loading fails.
        FileNotFoundError: If the file doesn't exist.
    """
    if bool(file_path) == bool(url):
        if file_path:
            _fail("Cannot load from both file_path and url")
        _fail("Either file_path or url must be provided")

    if file_path:
        return load_definition_from_file(file_path)
    return load_definition_from_url(url, timeout)
