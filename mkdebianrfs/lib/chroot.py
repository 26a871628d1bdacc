from __future__ import annotations

import logging
from typing import Mapping, Sequence

from ..errors import CommandError
from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)

# Search path used for every command executed inside the target root.
CHROOT_PATH = "/usr/local/bin:/usr/bin:/bin:/usr/local/sbin:/usr/sbin:/sbin"

C_LOCALE_ENV = {
    "LC_ALL": "C",
    "LANGUAGE": "C",
    "LANG": "C",
}

NONINTERACTIVE_ENV = {
    "DEBIAN_FRONTEND": "noninteractive",
    "DEBCONF_NONINTERACTIVE_SEEN": "true",
    **C_LOCALE_ENV,
}

VIRTUAL_FILESYSTEMS = ("proc", "sys")


def chroot_cmd(
    target_root: str,
    argv: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    interactive: bool = False,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command inside target root with the fixed search path."""

    full_env = {**(env or {}), "PATH": CHROOT_PATH}
    return run_cmd(
        ["chroot", target_root, *argv],
        env=full_env,
        interactive=interactive,
        dry_run=dry_run,
    )


def umount_virtual_fs(target_root: str, *, dry_run: bool = False) -> None:
    # Both mount points are always attempted; they are usually not mounted.
    for name in VIRTUAL_FILESYSTEMS:
        try:
            run_cmd(["umount", f"{target_root}/{name}"], check=False, quiet=True, dry_run=dry_run)
        except CommandError as e:
            logger.debug("umount %s/%s not attempted: %s", target_root, name, e)
