"""
Shared download helpers for the fetch step.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from urllib.parse import unquote, urlparse
from urllib.request import urlretrieve

from storm_impact.config_paths import RAW_DATA_DIR
from storm_impact.logging_config import setup_logger

logger = setup_logger("fetch.utils")


def filename_from_url(url: str) -> str:
    """Extract a clean filename from a URL, stripping query params."""
    parsed = urlparse(url)
    name = os.path.basename(unquote(parsed.path))
    if name:
        return name
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:10]
    return f"download_{digest}.bin"


def download_file(
    url: str,
    dest_dir: Path | None = None,
    filename: str | None = None,
    force: bool = False,
) -> Path | None:
    """
    Download a file from *url* into *dest_dir* (default: data/raw/).
    Skips download if the file already exists and *force* is False.
    Returns the local Path on success, None on failure.
    """
    dest_dir = dest_dir or RAW_DATA_DIR
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest_path = dest_dir / (filename or filename_from_url(url))

    if dest_path.exists() and not force:
        logger.info("Already cached: %s", dest_path.name)
        return dest_path

    logger.info("Downloading %s ...", dest_path.name)
    partial = dest_path.with_name(dest_path.name + ".part")
    try:
        urlretrieve(url, partial)
        partial.replace(dest_path)
        logger.info("Saved: %s (%d bytes)", dest_path.name, dest_path.stat().st_size)
        return dest_path
    except OSError as exc:
        logger.error("Failed to download %s: %s", url, exc, exc_info=True)
        partial.unlink(missing_ok=True)
        return None
