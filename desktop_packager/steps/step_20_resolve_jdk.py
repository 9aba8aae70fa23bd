from __future__ import annotations

import logging
from dataclasses import replace

from ..context import PackagingContext, create_work_dirs
from ..lib.binaries import resolve_binary

logger = logging.getLogger(__name__)


class ResolveJdkStep:
    """Create the per-run temp root and pick the JDK archive for this host."""

    step_id = "20_resolve_jdk"

    def run(self, ctx: PackagingContext) -> PackagingContext:
        dirs = create_work_dirs(ctx.config.build_root)
        jdk = resolve_binary(ctx.os_family, ctx.config.jdk_binaries)
        logger.info("JDK for jpackage (%s): %s", ctx.os_family, jdk.url)
        return replace(ctx, dirs=dirs, jdk=jdk)
