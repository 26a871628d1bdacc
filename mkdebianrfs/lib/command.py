from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..errors import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    interactive: bool = False,
    quiet: bool = False,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - interactive commands inherit the terminal (no capture) so the operator
      can answer prompts; everything else is captured and logged at DEBUG.
    - quiet discards output entirely (used for best-effort cleanup).
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    if env:
        logger.info("CMD %s %s", fmt_argv([f"{k}={v}" for k, v in env.items()]), fmt_argv(argv_list))
    else:
        logger.info("CMD %s", fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    if interactive:
        stdout = stderr = None
    elif quiet:
        stdout = stderr = subprocess.DEVNULL
    else:
        stdout = stderr = subprocess.PIPE

    try:
        p = subprocess.run(
            argv_list,
            text=True,
            stdout=stdout,
            stderr=stderr,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
        )
    except OSError as e:
        raise CommandError(argv_list, 127, f"Cannot run {fmt_argv(argv_list)}: {e}") from e

    out = p.stdout or ""
    err = p.stderr or ""
    if out:
        logger.debug("STDOUT %s", out.strip())
    if err:
        logger.debug("STDERR %s", err.strip())

    if check and p.returncode != 0:
        raise CommandError(
            argv_list,
            p.returncode,
            f"Command failed ({p.returncode}): {fmt_argv(argv_list)}\n{err}".rstrip(),
        )

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=out, stderr=err)
