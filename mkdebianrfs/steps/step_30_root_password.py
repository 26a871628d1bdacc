from __future__ import annotations

import logging

from ..lib.chroot import chroot_cmd
from ..pipeline import RunContext

logger = logging.getLogger(__name__)


class RootPasswordStep:
    step_id = "30_root_password"

    def run(self, ctx: RunContext) -> None:
        logger.info("Configuring target system...")
        print("Please enter a password for the root user:", flush=True)
        chroot_cmd(ctx.target_root, ["passwd", "root"], interactive=True, dry_run=ctx.dry_run)
