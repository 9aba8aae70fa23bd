from __future__ import annotations

import logging
from dataclasses import replace

from ..context import PackagingContext
from ..errors import MissingStepOutput
from ..lib.archives import extract_archive, find_executable
from ..lib.download import download_and_verify

logger = logging.getLogger(__name__)


def jpackage_filename(os_family: str) -> str:
    return "jpackage.exe" if os_family == "windows" else "jpackage"


class FetchJdkStep:
    step_id = "30_fetch_jdk"

    def run(self, ctx: PackagingContext) -> PackagingContext:
        dirs = ctx.require_dirs()
        if ctx.jdk is None:
            raise MissingStepOutput("No JDK resolved (run 20_resolve_jdk first)")

        name = jpackage_filename(ctx.os_family)
        if ctx.dry_run:
            logger.info("Would download %s and extract it into %s", ctx.jdk.url, dirs.jdk)
            return replace(ctx, jpackage_path=dirs.jdk / "bin" / name)

        archive = download_and_verify(
            ctx.jdk,
            dirs.jdk,
            timeout_s=ctx.config.download_timeout_s,
            chunk_size=ctx.config.download_chunk_size,
        )
        extract_archive(archive, dirs.jdk, ctx.jdk.archive_kind)
        return replace(ctx, jpackage_path=find_executable(dirs.jdk, name))
