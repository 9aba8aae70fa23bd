from __future__ import annotations

import logging
import shutil
from dataclasses import replace

from ..context import PackagingContext
from ..errors import MissingArtifact
from ..lib.assets import reset_dir
from ..lib.command import run_cmd

logger = logging.getLogger(__name__)


class StageJarStep:
    """Put the fat jar alone in its own folder and make it deterministic.

    jpackage ships everything under --input, so nothing else may live there.
    """

    step_id = "40_stage_jar"

    def run(self, ctx: PackagingContext) -> PackagingContext:
        cfg = ctx.config
        src = cfg.main_jar
        if not src.is_file() and not ctx.dry_run:
            raise MissingArtifact(f"Main jar not found: {src} (build the application first)")

        staged = cfg.fat_jar_dir / src.name
        reset_dir(cfg.fat_jar_dir, dry_run=ctx.dry_run)
        if not ctx.dry_run:
            shutil.copy2(src, staged)
        logger.info("Staged %s", staged)

        tool = cfg.deterministic_jar_tool
        if tool is not None:
            # Strips timestamps and build comments so rebuilds are byte-identical
            run_cmd(["java", "-jar", str(tool), str(staged)], dry_run=ctx.dry_run)
        else:
            logger.warning("paths.deterministic_jar_tool not set; jar left as built")

        return replace(ctx, staged_jar=staged)
