from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


def reset_dir(path: Path, *, dry_run: bool = False) -> None:
    """Delete and recreate path (jpackage wants an empty --temp/--input dir)."""
    if dry_run:
        logger.info("Would reset directory %s", path)
        return
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


def copy_files(src: Path, dst: Path, *, dry_run: bool = False) -> List[Path]:
    """Copy the regular files of src (non-recursive) into dst."""
    if not src.exists():
        raise FileNotFoundError(str(src))

    files = sorted(p for p in src.iterdir() if p.is_file())
    if dry_run:
        logger.info("Would copy %d file(s) %s -> %s", len(files), src, dst)
        return []

    dst.mkdir(parents=True, exist_ok=True)
    copied: List[Path] = []
    for item in files:
        out = dst / item.name
        shutil.copy2(item, out)
        copied.append(out)
    logger.info("Copied %d file(s) %s -> %s", len(copied), src, dst)
    return copied
