from __future__ import annotations

from typing import Sequence


class RfsError(RuntimeError):
    """Base class for every failure that aborts a run with exit status 1."""


class PreconditionError(RfsError):
    pass


class ConfigError(RfsError):
    pass


class TargetError(RfsError):
    pass


class CommandError(RfsError):
    def __init__(self, argv: Sequence[str], returncode: int, message: str) -> None:
        super().__init__(message)
        self.argv = list(argv)
        self.returncode = returncode


class RunInterrupted(RfsError):
    def __init__(self, signum: int) -> None:
        super().__init__(f"interrupted by signal {signum}")
        self.signum = signum
