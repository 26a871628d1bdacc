from __future__ import annotations

import logging

from ..lib.pkg import apt_clean
from ..pipeline import RunContext

logger = logging.getLogger(__name__)


class FinalizeStep:
    step_id = "80_finalize"

    def run(self, ctx: RunContext) -> None:
        apt_clean(ctx.target_root, dry_run=ctx.dry_run)

        emulator = ctx.tree.path(ctx.cfg.emulator_target_path)
        if ctx.dry_run:
            logger.info("Would remove %s", str(emulator))
            return
        emulator.unlink(missing_ok=True)
        logger.info("Removed %s", str(emulator))
