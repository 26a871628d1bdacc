from __future__ import annotations

import logging
import shutil

from ..lib.pkg import debootstrap_second_stage, dpkg_configure_pending
from ..pipeline import RunContext

logger = logging.getLogger(__name__)


class SecondStageStep:
    step_id = "20_second_stage"

    def run(self, ctx: RunContext) -> None:
        logger.info("Configuring packages...")

        dst = ctx.tree.path(ctx.cfg.emulator_target_path)
        if ctx.dry_run:
            logger.info("Would copy %s -> %s", ctx.tools.emulator, str(dst))
        else:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(ctx.tools.emulator, dst)
            logger.info("Installed emulator at %s", str(dst))

        debootstrap_second_stage(ctx.target_root, dry_run=ctx.dry_run)
        dpkg_configure_pending(ctx.target_root, dry_run=ctx.dry_run)
