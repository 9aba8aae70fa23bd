from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .config import load_packager_config
from .context import PackagingContext
from .errors import PackagingError
from .lib.platforms import detect_os_family
from .lib.prompt import make_confirm
from .logging_utils import configure_logging, default_log_path
from .pipeline import PipelineResult, run_pipeline
from .release import release_from_config
from .run_record import build_run_record, save_run_record
from .steps import (
    CollectArtifactsStep,
    FetchJdkStep,
    PackageInstallersStep,
    PreflightStep,
    ResolveJdkStep,
    ShareArtifactsStep,
    StageJarStep,
)

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "packager_config.yaml"


def build_steps():
    return [
        PreflightStep(),
        ResolveJdkStep(),
        FetchJdkStep(),
        StageJarStep(),
        PackageInstallersStep(),
        CollectArtifactsStep(),
        ShareArtifactsStep(),
    ]


def run(
    *,
    config_path: str = DEFAULT_CONFIG_PATH,
    log_path: Optional[str] = None,
    version: Optional[str] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    assume_yes: bool = False,
    dry_run: bool = False,
) -> PipelineResult:
    """Run the packaging pipeline for the host OS."""

    cfg = load_packager_config(config_path)
    log_file = configure_logging(Path(log_path) if log_path else default_log_path(cfg.build_root))
    ctx = PackagingContext(
        config=cfg,
        release=release_from_config(cfg, version=version),
        os_family=detect_os_family(),
        confirm=make_confirm(assume_yes=assume_yes or cfg.assume_yes),
        dry_run=dry_run or cfg.dry_run,
    )
    logger.info("Packaging %s %s on %s", ctx.release.name, ctx.release.version, ctx.os_family)

    result = PipelineResult(ctx=ctx)
    error: Optional[str] = None
    try:
        return run_pipeline(
            ctx=ctx,
            steps=build_steps(),
            start_at=start_at,
            stop_after=stop_after,
            result=result,
        )
    except Exception as e:
        logger.exception("Packaging failed in step %s", result.current_step)
        error = str(e)
        raise
    finally:
        # The temp root only exists once 20_resolve_jdk ran
        if result.ctx.dirs is not None:
            save_run_record(result.ctx.dirs.run_record, build_run_record(result, error=error, log_path=log_file))


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="desktop-packager")
    p.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to packager config (yaml)")
    p.add_argument("--log", default=None, help="Path to packaging log (default: <build_root>/logs/desktop-packager.log)")
    p.add_argument("--version", default=None, help="Application version (overrides release.version)")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 40_stage_jar)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--yes", action="store_true", help="Answer yes to every confirmation")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")

    args = p.parse_args(argv)

    try:
        run(
            config_path=args.config,
            log_path=args.log,
            version=args.version,
            start_at=args.start_at,
            stop_after=args.stop_after,
            assume_yes=bool(args.yes),
            dry_run=bool(args.dry_run),
        )
    except PackagingError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
