from __future__ import annotations

import logging
import re
from typing import Optional

from ..context import PackagingContext
from ..errors import CommandFailed, EnvironmentMismatch, OperatorAbort
from ..lib.command import run_cmd

logger = logging.getLogger(__name__)

_JAVA_VERSION = re.compile(r'version "(\d+)(?:\.(\d+))?')


def parse_java_major(text: str) -> Optional[int]:
    """`java -version` banner -> major version ("1.8.0_292" -> 8, "11.0.12" -> 11)."""
    m = _JAVA_VERSION.search(text)
    if not m:
        return None
    major = int(m.group(1))
    if major == 1 and m.group(2):
        major = int(m.group(2))
    return major


def check_java_version(required_major: int, *, dry_run: bool = False) -> None:
    if dry_run:
        logger.info("Would check that java %s is on PATH", required_major)
        return
    # java prints its banner on stderr
    try:
        r = run_cmd(["java", "-version"])
    except CommandFailed as e:
        raise EnvironmentMismatch(f"JDK {required_major} is required (java not runnable: {e})") from e
    major = parse_java_major(r.stderr + "\n" + r.stdout)
    if major != required_major:
        raise EnvironmentMismatch(f"JDK {required_major} is required (found {major or 'unknown'})")
    logger.info("Using JDK %s", major)


class PreflightStep:
    step_id = "10_preflight"

    def run(self, ctx: PackagingContext) -> PackagingContext:
        cfg = ctx.config
        check_java_version(cfg.required_java_major, dry_run=ctx.dry_run)

        if not cfg.preflight_enabled:
            logger.info("Git sanity checks disabled")
            return ctx

        log = run_cmd(
            ["git", "--no-pager", "log", f"-{cfg.git_log_count}", "--oneline"],
            cwd=cfg.base_dir,
            dry_run=ctx.dry_run,
        )
        logger.info("Recent history:\n%s", log.stdout.rstrip())
        if not ctx.confirm(
            "Above you see the current HEAD and its recent history.\n"
            "Is this the right commit for packaging?"
        ):
            raise OperatorAbort("Aborting: wrong commit for packaging")

        status = run_cmd(["git", "status", "--short", "--branch"], cwd=cfg.base_dir, dry_run=ctx.dry_run)
        logger.info("Working tree:\n%s", status.stdout.rstrip())
        if not ctx.confirm(
            "Above you see any local changes that are not in the remote branch.\n"
            "If you have any local changes, please abort, get them merged, get the latest branch and try again.\n"
            "Continue with packaging?"
        ):
            raise OperatorAbort("Aborting: local changes present")

        return ctx
