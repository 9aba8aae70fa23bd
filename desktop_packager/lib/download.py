from __future__ import annotations

import logging
from pathlib import Path

import requests

from ..errors import PackagingError
from .binaries import BinaryReference
from .hashing import verify_sha256

logger = logging.getLogger(__name__)


def download_file(url: str, dest: Path, *, timeout_s: float = 60, chunk_size: int = 1024 * 1024) -> Path:
    logger.info("Downloading %s", url)
    dest.parent.mkdir(parents=True, exist_ok=True)
    partial = dest.with_name(dest.name + ".part")
    try:
        with requests.get(url, stream=True, timeout=timeout_s) as resp:
            resp.raise_for_status()
            with partial.open("wb") as out:
                for chunk in resp.iter_content(chunk_size=chunk_size):
                    if chunk:
                        out.write(chunk)
    except requests.RequestException as exc:
        partial.unlink(missing_ok=True)
        raise PackagingError(f"Failed to download {url}: {exc}") from exc
    partial.replace(dest)
    logger.info("Download saved to %s", dest)
    return dest


def download_and_verify(
    ref: BinaryReference,
    dest_dir: Path,
    *,
    timeout_s: float = 60,
    chunk_size: int = 1024 * 1024,
) -> Path:
    """Fetch the archive for ref and refuse to continue unless its SHA-256 matches."""

    archive = download_file(ref.url, dest_dir / ref.archive_name, timeout_s=timeout_s, chunk_size=chunk_size)
    logger.info("Verifying checksum for downloaded binary ...")
    verify_sha256(archive, ref.sha256)
    logger.info("Checksum verified")
    return archive
