from __future__ import annotations

import logging
from pathlib import Path

from ..config import Profile
from ..lib.pkg import render_sources_list, write_sources_list
from ..pipeline import RunContext

logger = logging.getLogger(__name__)


def render_inittab_line(profile: Profile) -> str:
    return (
        f"{profile.serial_id}:23:respawn:/sbin/getty -L "
        f"{profile.serial_tty} {profile.serial_baud} {profile.serial_term}\n"
    )


def render_interfaces(interface: str) -> str:
    return "\n".join(
        [
            f"auto {interface}",
            f"allow-hotplug {interface}",
            f"iface {interface} inet dhcp",
            "",
        ]
    )


def _write_file(root: Path, rel: str, contents: str, *, append: bool = False, dry_run: bool) -> None:
    p = root / rel.lstrip("/")
    if dry_run:
        logger.info("Would %s %s", "append to" if append else "write", str(p))
        return
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("a" if append else "w", encoding="utf-8") as f:
        f.write(contents)


class ConfigureSystemStep:
    step_id = "40_configure_system"

    def run(self, ctx: RunContext) -> None:
        cfg = ctx.cfg
        profile = cfg.profile
        root = ctx.tree.root

        _write_file(root, "/etc/inittab", render_inittab_line(profile), append=True, dry_run=ctx.dry_run)
        _write_file(root, "/etc/hostname", profile.hostname + "\n", dry_run=ctx.dry_run)
        _write_file(
            root,
            "/etc/network/interfaces",
            render_interfaces(profile.network_interface),
            append=True,
            dry_run=ctx.dry_run,
        )

        sources = render_sources_list(
            mirror=cfg.mirror,
            suite=cfg.dist,
            security_mirror=profile.security_mirror,
            with_updates=cfg.has_updates_suite,
        )
        write_sources_list(ctx.target_root, sources, dry_run=ctx.dry_run)

        logger.info(
            "Configured hostname=%s console=%s interface=%s updates=%s",
            profile.hostname,
            profile.serial_tty,
            profile.network_interface,
            cfg.has_updates_suite,
        )
