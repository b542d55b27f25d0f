"""Utility functions for loading module schemas and writing bindings.

This module provides functions for loading a module schema from files and
URLs with proper error handling, and for writing generated files to disk.
"""

import json
from pathlib import Path
from typing import Any, Iterable
from urllib.parse import urlparse

import requests

from .codegen.core.generator import OutputFile
from .codegen.core.schema import ModuleDef, SchemaError, module_from_dict
from .logging_config import get_logger

logger = get_logger(__name__)


class SchemaLoadError(Exception):
    """Custom exception for schema loading errors."""

    pass


def load_json_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load JSON data from a local file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        FileNotFoundError: If file doesn't exist.
        SchemaLoadError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug("Attempting to load JSON from file: %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise FileNotFoundError(f"File not found: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info("Loaded JSON from %s", file_path)
        return str(file_path), data
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in file %s: %s", file_path, e)
        raise SchemaLoadError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise SchemaLoadError(f"Error reading file {file_path}: {e}") from e


def load_json_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Load JSON data from a URL.

    Args:
        url: URL to fetch JSON from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        SchemaLoadError: If URL is invalid, request fails, or response isn't valid JSON.
    """
    logger.debug("Attempting to load JSON from URL: %s", url)

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error("Invalid URL format: %s", url)
        raise SchemaLoadError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        data = response.json()
        logger.info("Loaded JSON from %s", url)
        return url, data

    except requests.exceptions.Timeout as e:
        logger.error("Request timeout for URL: %s", url)
        raise SchemaLoadError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error("Connection error for URL %s: %s", url, e)
        raise SchemaLoadError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error("HTTP error %s for URL: %s", e.response.status_code, url)
        raise SchemaLoadError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except ValueError as e:
        logger.error("Invalid JSON response from URL %s: %s", url, e)
        raise SchemaLoadError(f"Invalid JSON response from URL {url}: {e}") from e
    except requests.exceptions.RequestException as e:
        logger.error("Request error for URL %s: %s", url, e)
        raise SchemaLoadError(f"Request error for URL {url}: {e}") from e


def load_module_schema(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> tuple[str, ModuleDef]:
    """Load a module schema from either a file or URL.

    Args:
        file_path: Path to local JSON file (mutually exclusive with url).
        url: URL to fetch JSON from (mutually exclusive with file_path).
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, decoded module schema).

    Raises:
        SchemaLoadError: If neither or both sources are given, loading fails,
            or the document is not a valid module schema.
        FileNotFoundError: If file doesn't exist.
    """
    if not file_path and not url:
        raise SchemaLoadError("Either file_path or url must be provided")

    if file_path and url:
        raise SchemaLoadError("Cannot specify both file_path and url")

    if file_path:
        source, data = load_json_from_file(file_path)
    else:
        source, data = load_json_from_url(url, timeout)

    try:
        module = module_from_dict(data)
    except SchemaError as e:
        logger.error("Invalid module schema in %s: %s", source, e)
        raise SchemaLoadError(f"Invalid module schema in {source}: {e}") from e

    logger.info(
        "Decoded schema from %s: %d table(s), %d type(s), %d reducer(s), %d procedure(s)",
        source,
        len(module.tables),
        len(module.types),
        len(module.reducers),
        len(module.procedures),
    )
    return source, module


def write_output_files(files: Iterable[OutputFile], out_dir: str | Path) -> list[Path]:
    """Write generated files into a directory, overwriting existing ones.

    Args:
        files: Generated files.
        out_dir: Destination directory, created if missing.

    Returns:
        Written paths in emission order.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for output in files:
        path = out_dir / output.filename
        path.write_text(output.code, encoding="utf-8", newline="\n")
        logger.debug("Wrote %s", path)
        written.append(path)

    logger.info("Wrote %d file(s) to %s", len(written), out_dir)
    return written
