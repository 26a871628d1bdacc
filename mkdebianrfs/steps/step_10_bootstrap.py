from __future__ import annotations

import logging

from ..lib.pkg import debootstrap_foreign
from ..pipeline import RunContext

logger = logging.getLogger(__name__)


class BootstrapStep:
    step_id = "10_bootstrap"

    def run(self, ctx: RunContext) -> None:
        cfg = ctx.cfg
        logger.info(
            "Creating Debian %s RFS for %s in '%s'...", cfg.dist, cfg.arch, ctx.target_root
        )
        debootstrap_foreign(
            target_root=ctx.target_root,
            arch=cfg.arch,
            suite=cfg.dist,
            mirror=cfg.mirror,
            packages=cfg.packages,
            debootstrap=ctx.tools.debootstrap,
            dry_run=ctx.dry_run,
        )
