from __future__ import annotations

import logging

from ..lib.chroot import chroot_cmd
from ..pipeline import RunContext

logger = logging.getLogger(__name__)


class InteractiveShellStep:
    step_id = "60_interactive_shell"

    def enabled(self, ctx: RunContext) -> bool:
        return ctx.cfg.profile.interactive_shell

    def run(self, ctx: RunContext) -> None:
        print(
            "\nEntering target system for additional configuration. Type 'exit' when done.\n",
            flush=True,
        )
        # Leaving the shell with a non-zero status (e.g. `exit 1`) aborts the run.
        chroot_cmd(ctx.target_root, ["/bin/bash"], interactive=True, dry_run=ctx.dry_run)
