from __future__ import annotations

import logging
from pathlib import Path

from ..context import PackagingContext
from ..lib.assets import copy_files
from ..lib.command import run_cmd, shell_argv

logger = logging.getLogger(__name__)

_FILE_BROWSERS = {
    "windows": ["start", ""],
    "mac": ["open"],
    "linux": ["nautilus"],
}


def open_in_file_browser(folder: Path, os_family: str, *, dry_run: bool = False) -> bool:
    argv = [*_FILE_BROWSERS[os_family], str(folder)]
    r = run_cmd(shell_argv(argv, os_family), check=False, dry_run=dry_run)
    if not r.ok:
        logger.warning("Could not open %s in a file browser: %s", folder, r.stderr.strip())
    return r.ok


class ShareArtifactsStep:
    """Optionally copy the binaries to a shared folder (e.g. a VM host mount)."""

    step_id = "70_share_artifacts"

    def run(self, ctx: PackagingContext) -> PackagingContext:
        cfg = ctx.config
        dirs = ctx.require_dirs()

        shared = cfg.env_value("shared_folder")
        logger.info("Environment variable %s is: %s", cfg.env_name("shared_folder"), shared)
        if not ctx.confirm("Copy the created binary to a shared folder?"):
            return ctx
        if not shared:
            logger.warning("%s is not set; skipping copy", cfg.env_name("shared_folder"))
            return ctx

        target = Path(shared)
        copy_files(dirs.binaries, target, dry_run=ctx.dry_run)
        open_in_file_browser(target, ctx.os_family, dry_run=ctx.dry_run)
        return ctx
