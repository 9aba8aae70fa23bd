from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

from ..errors import ChecksumMismatch

logger = logging.getLogger(__name__)

CHECKSUM_SUFFIX = ".SHA256"


@dataclass(frozen=True)
class Artifact:
    path: Path
    sha256: str

    @property
    def checksum_path(self) -> Path:
        return self.path.with_name(self.path.name + CHECKSUM_SUFFIX)


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as source:
        for chunk in iter(lambda: source.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def verify_sha256(path: Path, expected: str) -> str:
    actual = sha256_file(path)
    if actual.lower() != expected.strip().lower():
        raise ChecksumMismatch(
            f"Checksum mismatch for {path.name}: expected {expected.strip().lower()}, got {actual}"
        )
    return actual


def write_checksums(folder: Path) -> List[Artifact]:
    """Write <file>.SHA256 next to every regular file in folder."""

    artifacts: List[Artifact] = []
    for p in sorted(folder.iterdir()):
        if not p.is_file() or p.name.endswith(CHECKSUM_SUFFIX):
            continue
        art = Artifact(path=p, sha256=sha256_file(p))
        art.checksum_path.write_text(art.sha256 + "\n", encoding="utf-8")
        logger.info("SHA-256 %s  %s", art.sha256, p.name)
        artifacts.append(art)
    return artifacts
