from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence

from .session import InstallContext

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single provisioning stage."""

    step_id: str
    title: str

    def applies(self, ctx: InstallContext) -> bool:
        ...

    def run(self, ctx: InstallContext) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]
    skipped_steps: List[str]


def run_pipeline(
    *,
    ctx: InstallContext,
    steps: Sequence[Step],
    on_error: Optional[Callable[[Exception, str], None]] = None,
) -> PipelineResult:
    """Run steps once, in order.

    A step whose own precondition is false is skipped. The first exception
    aborts every remaining step; ``on_error`` sees it (with the step id)
    before it propagates. Nothing is retried or rolled back.
    """

    missing = ctx.record.unresolved()
    if missing:
        raise RuntimeError(f"Configuration incomplete: {', '.join(missing)}")

    ran: List[str] = []
    skipped: List[str] = []

    for step in steps:
        ctx.session.current_step = step.step_id

        if not step.applies(ctx):
            logger.debug("Skipping step %s (not applicable)", step.step_id)
            skipped.append(step.step_id)
            continue

        logger.info("%s...", step.title)
        logger.debug("Running step %s", step.step_id)
        try:
            step.run(ctx)
        except Exception as e:
            if on_error is not None:
                on_error(e, step.step_id)
            raise
        ran.append(step.step_id)

    ctx.session.current_step = None
    return PipelineResult(ran_steps=ran, skipped_steps=skipped)
