from __future__ import annotations

from ..lib.target import create_archive
from ..pipeline import RunContext


class ArchiveStep:
    step_id = "90_archive"

    def enabled(self, ctx: RunContext) -> bool:
        return ctx.tree.archive_mode

    def run(self, ctx: RunContext) -> None:
        create_archive(ctx.tree)
