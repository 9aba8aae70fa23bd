from __future__ import annotations

import logging
import shutil
from dataclasses import replace
from pathlib import Path

from ..context import PackagingContext
from ..lib.hashing import write_checksums
from ..lib.platforms import artifact_os_id

logger = logging.getLogger(__name__)


def os_jar_name(jar_name: str, os_family: str) -> str:
    """desktop-1.6.4-SNAPSHOT-all.jar -> desktop-1.6.4-SNAPSHOT-all-mac.jar (or -win, -linux)."""
    os_id = artifact_os_id(os_family)
    if jar_name.endswith("-all.jar"):
        return jar_name[: -len("-all.jar")] + f"-all-{os_id}.jar"
    stem = jar_name[:-4] if jar_name.endswith(".jar") else jar_name
    return f"{stem}-{os_id}.jar"


def zip_raspberry_pi_libs(lib_dir: Path, dest: Path, version: str) -> Path:
    base = dest / f"jar-lib-for-raspberry-pi-{version}"
    logger.info("Zipping jar lib for raspberry pi from %s", lib_dir)
    return Path(shutil.make_archive(str(base), "zip", root_dir=str(lib_dir)))


class CollectArtifactsStep:
    step_id = "60_collect_artifacts"

    def run(self, ctx: PackagingContext) -> PackagingContext:
        dirs = ctx.require_dirs()
        jar = ctx.require_staged_jar()
        out_jar = dirs.binaries / os_jar_name(jar.name, ctx.os_family)

        if ctx.dry_run:
            logger.info("Would copy %s -> %s and checksum %s", jar, out_jar, dirs.binaries)
            return ctx

        # Only needed once per release, so only the mac build ships it
        lib_dir = ctx.config.raspberry_pi_lib_dir
        if ctx.os_family == "mac" and lib_dir is not None:
            zip_raspberry_pi_libs(lib_dir, dirs.binaries, ctx.release.version)

        shutil.copy2(jar, out_jar)

        artifacts = write_checksums(dirs.binaries)
        logger.info("The binaries and checksums are ready:")
        for p in sorted(dirs.binaries.iterdir()):
            logger.info("  %s", p)
        return replace(ctx, artifacts=tuple(artifacts))
