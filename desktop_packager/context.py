from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from .config import PackagerConfig
from .errors import MissingStepOutput
from .lib.binaries import BinaryReference
from .lib.hashing import Artifact
from .lib.prompt import Confirm, ask_yes_no
from .release import ReleaseDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkDirs:
    root: Path

    @property
    def binaries(self) -> Path:
        return self.root / "binaries"

    @property
    def jpackage_temp(self) -> Path:
        return self.root / "jpackage-temp"

    @property
    def jdk(self) -> Path:
        return self.root / "jdk-jpackage"

    @property
    def dylibs_to_sign(self) -> Path:
        return self.root / "dylibs-to-sign"

    @property
    def run_record(self) -> Path:
        return self.root / "run.json"


def temp_root_name(now: datetime) -> str:
    return "temp-" + now.strftime("%Y.%m.%d-%H%M%S") + f"{now.microsecond // 1000:03d}"


def create_work_dirs(build_root: Path, *, now: Optional[datetime] = None) -> WorkDirs:
    """Create a fresh temp root under the build dir. It is never cleaned automatically."""

    dirs = WorkDirs(root=build_root / temp_root_name(now or datetime.now()))
    for p in (dirs.root, dirs.binaries, dirs.jpackage_temp, dirs.jdk):
        p.mkdir(parents=True, exist_ok=True)
    logger.info("Created temp root folder %s", dirs.root)
    return dirs


@dataclass(frozen=True)
class PackagingContext:
    config: PackagerConfig
    release: ReleaseDescriptor
    os_family: str
    confirm: Confirm = ask_yes_no
    dry_run: bool = False

    dirs: Optional[WorkDirs] = None
    jdk: Optional[BinaryReference] = None
    jpackage_path: Optional[Path] = None
    staged_jar: Optional[Path] = None
    artifacts: Tuple[Artifact, ...] = field(default_factory=tuple)

    def require_dirs(self) -> WorkDirs:
        if self.dirs is None:
            raise MissingStepOutput("Working directories not created yet (run 20_resolve_jdk first)")
        return self.dirs

    def require_jpackage(self) -> Path:
        if self.jpackage_path is None:
            raise MissingStepOutput("jpackage location unknown (run 30_fetch_jdk first)")
        return self.jpackage_path

    def require_staged_jar(self) -> Path:
        if self.staged_jar is None:
            raise MissingStepOutput("Main jar not staged (run 40_stage_jar first)")
        return self.staged_jar
