from __future__ import annotations

import logging
import os
import tarfile
import zipfile
from pathlib import Path
from typing import List

from ..errors import MissingArtifact

logger = logging.getLogger(__name__)


def extract_tar_gz(archive: Path, dest: Path) -> None:
    logger.info("Extracting tar.gz %s", archive)
    dest.mkdir(parents=True, exist_ok=True)
    with tarfile.open(archive, "r:gz") as tf:
        # "tar" filter keeps permission bits (jpackage must stay executable);
        # interpreters without extraction filters keep them anyway
        if hasattr(tarfile, "data_filter"):
            tf.extractall(dest, filter="tar")
        else:
            tf.extractall(dest)
    logger.info("Extracted to %s", dest)


def extract_zip(archive: Path, dest: Path) -> None:
    logger.info("Extracting zip %s", archive)
    dest.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive) as zf:
        for info in zf.infolist():
            out = Path(zf.extract(info, dest))
            mode = (info.external_attr >> 16) & 0o777
            if mode and not info.is_dir():
                os.chmod(out, mode)
    logger.info("Extracted to %s", dest)


def extract_archive(archive: Path, dest: Path, kind: str) -> None:
    if kind == "zip":
        extract_zip(archive, dest)
    elif kind == "tar.gz":
        extract_tar_gz(archive, dest)
    else:
        raise ValueError(f"Unsupported archive kind: {kind}")


def find_executable(root: Path, filename: str) -> Path:
    """Find filename anywhere below root, preferring a hit inside a bin/ dir.

    The layout differs per JDK vendor/version/platform so no fixed path is assumed.
    """

    hits: List[Path] = sorted(p for p in root.rglob(filename) if p.is_file())
    if not hits:
        raise MissingArtifact(f"{filename} not found under {root}")
    in_bin = [p for p in hits if p.parent.name == "bin"]
    chosen = (in_bin or hits)[0]
    logger.info("Using %s binary from %s", filename, chosen)
    return chosen
