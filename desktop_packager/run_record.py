from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .pipeline import PipelineResult


def build_run_record(
    result: PipelineResult,
    *,
    error: Optional[str] = None,
    log_path: Optional[Path] = None,
) -> Dict[str, Any]:
    ctx = result.ctx
    return {
        "os_family": ctx.os_family,
        "release": {"name": ctx.release.name, "version": ctx.release.version},
        "ran_steps": list(result.ran_steps),
        "current_step": result.current_step,
        "error": error,
        "log_path_actual": str(log_path) if log_path else None,
        "jdk": {"url": ctx.jdk.url, "sha256": ctx.jdk.sha256} if ctx.jdk else None,
        "jpackage": str(ctx.jpackage_path) if ctx.jpackage_path else None,
        "artifacts": [{"path": str(a.path), "sha256": a.sha256} for a in ctx.artifacts],
    }


def save_run_record(path: Path, record: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(record, indent=2, sort_keys=True) + "\n", encoding="utf-8")
