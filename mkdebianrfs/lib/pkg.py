from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from .chroot import C_LOCALE_ENV, NONINTERACTIVE_ENV, chroot_cmd
from .command import run_cmd

logger = logging.getLogger(__name__)


def debootstrap_foreign(
    *,
    target_root: str,
    arch: str,
    suite: str,
    mirror: str,
    packages: Sequence[str] = (),
    debootstrap: str = "debootstrap",
    dry_run: bool = False,
) -> None:
    """First stage: download and unpack, without running target binaries."""

    argv = [debootstrap, "--foreign", f"--arch={arch}"]
    if packages:
        argv.append("--include=" + ",".join(packages))
    argv += [suite, target_root, mirror]
    run_cmd(argv, dry_run=dry_run)


def debootstrap_second_stage(target_root: str, *, dry_run: bool = False) -> None:
    chroot_cmd(
        target_root,
        ["/debootstrap/debootstrap", "--second-stage"],
        env=NONINTERACTIVE_ENV,
        dry_run=dry_run,
    )


def dpkg_configure_pending(target_root: str, *, dry_run: bool = False) -> None:
    chroot_cmd(target_root, ["dpkg", "--configure", "-a"], env=NONINTERACTIVE_ENV, dry_run=dry_run)


def dpkg_reconfigure(target_root: str, package: str, *, dry_run: bool = False) -> None:
    """Interactive: debconf prompts go straight to the operator's terminal."""

    chroot_cmd(
        target_root,
        ["dpkg-reconfigure", package],
        env=C_LOCALE_ENV,
        interactive=True,
        dry_run=dry_run,
    )


def apt_clean(target_root: str, *, dry_run: bool = False) -> None:
    chroot_cmd(target_root, ["apt-get", "clean"], dry_run=dry_run)


def render_sources_list(
    *,
    mirror: str,
    suite: str,
    security_mirror: str,
    with_updates: bool = True,
    component: str = "main",
) -> str:
    lines: List[str] = [
        f"deb {mirror} {suite} {component}",
        f"deb-src {mirror} {suite} {component}",
    ]
    if with_updates:
        lines += [
            "",
            f"deb {mirror} {suite}-updates {component}",
            f"deb-src {mirror} {suite}-updates {component}",
            "",
            f"deb {security_mirror} {suite}/updates {component}",
            f"deb-src {security_mirror} {suite}/updates {component}",
        ]
    return "\n".join(lines) + "\n"


def write_sources_list(target_root: str, contents: str, *, dry_run: bool = False) -> None:
    p = Path(target_root) / "etc/apt/sources.list"
    if dry_run:
        logger.info("Would write %s", str(p))
        return
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(contents, encoding="utf-8")
    logger.info("Configured APT sources in %s", str(p))
