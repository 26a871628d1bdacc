from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol, Sequence

from .config import RunConfig
from .lib.host import HostTools
from .lib.target import TargetTree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunContext:
    cfg: RunConfig
    tree: TargetTree
    tools: HostTools

    @property
    def target_root(self) -> str:
        return str(self.tree.root)

    @property
    def dry_run(self) -> bool:
        return self.cfg.dry_run


class Step(Protocol):
    """A single step of the root FS build."""

    step_id: str

    def run(self, ctx: RunContext) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]
    skipped_steps: List[str]


def run_pipeline(*, ctx: RunContext, steps: Sequence[Step]) -> PipelineResult:
    """Run steps in order; the first exception aborts the rest."""

    ran: List[str] = []
    skipped: List[str] = []

    for step in steps:
        enabled = getattr(step, "enabled", None)
        if enabled is not None and not enabled(ctx):
            logger.info("Skipping step %s", step.step_id)
            skipped.append(step.step_id)
            continue

        logger.info("Running step %s", step.step_id)
        step.run(ctx)
        ran.append(step.step_id)

    return PipelineResult(ran_steps=ran, skipped_steps=skipped)
