from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from .context import PackagingContext

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single pipeline stage: takes a context, returns the next one."""

    step_id: str

    def run(self, ctx: PackagingContext) -> PackagingContext:
        ...


@dataclass
class PipelineResult:
    ctx: PackagingContext
    ran_steps: List[str] = field(default_factory=list)
    current_step: Optional[str] = None


def run_pipeline(
    *,
    ctx: PackagingContext,
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    result: Optional[PipelineResult] = None,
) -> PipelineResult:
    """Run steps in order; the first exception aborts the run.

    Pass a PipelineResult to observe progress even when a step raises.
    """

    known = [s.step_id for s in steps]
    for wanted in (start_at, stop_after):
        if wanted is not None and wanted not in known:
            raise ValueError(f"Unknown step id {wanted!r} (known: {', '.join(known)})")

    res = result if result is not None else PipelineResult(ctx=ctx)
    res.ctx = ctx
    started = start_at is None

    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue

        res.current_step = step.step_id
        logger.info("Running step %s", step.step_id)
        res.ctx = step.run(res.ctx)
        res.ran_steps.append(step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    res.current_step = None
    return res
