from __future__ import annotations

from ..lib.pkg import dpkg_reconfigure
from ..pipeline import RunContext


class LocaleTimezoneStep:
    step_id = "35_locale_timezone"

    def run(self, ctx: RunContext) -> None:
        for package in ("locales", "tzdata"):
            dpkg_reconfigure(ctx.target_root, package, dry_run=ctx.dry_run)
