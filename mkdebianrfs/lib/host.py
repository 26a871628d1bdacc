from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from ..config import RunConfig
from ..errors import PreconditionError

logger = logging.getLogger(__name__)

BINFMT_DIR = "/proc/sys/fs/binfmt_misc"


@dataclass(frozen=True)
class HostTools:
    debootstrap: str
    emulator: str


def check_root() -> None:
    if os.geteuid() != 0:
        raise PreconditionError("must be run as root")


def find_tool(name: str) -> str:
    path = shutil.which(name)
    if not path:
        raise PreconditionError(f"cannot find {name}")
    return path


def binfmt_registered(interpreter: str, binfmt_dir: str | None = None) -> bool:
    """Return True if any binfmt_misc entry names the given interpreter path.

    Entries that cannot be read (e.g. the write-only 'register' file) are
    skipped, as is a missing binfmt_misc mount.
    """

    root = Path(binfmt_dir or BINFMT_DIR)
    if not root.is_dir():
        return False

    for entry in sorted(root.rglob("*")):
        if not entry.is_file():
            continue
        try:
            text = entry.read_text(encoding="utf-8", errors="replace")
        except OSError:
            continue
        if interpreter in text:
            logger.debug("binfmt entry %s uses %s", entry, interpreter)
            return True
    return False


def check_preconditions(cfg: RunConfig, *, binfmt_dir: str | None = None) -> HostTools:
    """Verify the host can build a foreign root FS. Nothing is modified."""

    check_root()
    debootstrap = find_tool("debootstrap")
    emulator = find_tool(cfg.emulator_name)

    # QEMU gets copied into /usr/bin in the target filesystem, so binfmt_misc
    # must be configured with that path.
    if not binfmt_registered(cfg.emulator_target_path, binfmt_dir):
        raise PreconditionError(f"{cfg.emulator_target_path} not configured with binfmt_misc")

    logger.info("Host tools: debootstrap=%s emulator=%s", debootstrap, emulator)
    return HostTools(debootstrap=debootstrap, emulator=emulator)
