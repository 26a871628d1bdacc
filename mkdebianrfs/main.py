from __future__ import annotations

import logging
import signal
from contextlib import contextmanager
from typing import Iterator, Optional

from .config import RunConfig
from .errors import RfsError, RunInterrupted
from .lib.host import check_preconditions
from .lib.target import TargetTree, prepare_target
from .logging_utils import configure_logging
from .options import PROG, build_run_config, log_level, parse_args
from .pipeline import PipelineResult, RunContext, run_pipeline
from .steps import (
    ArchiveStep,
    BootstrapStep,
    ConfigureSystemStep,
    FinalizeStep,
    InteractiveShellStep,
    LocaleTimezoneStep,
    RootPasswordStep,
    SecondStageStep,
)

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def build_steps():
    return [
        BootstrapStep(),
        SecondStageStep(),
        RootPasswordStep(),
        LocaleTimezoneStep(),
        ConfigureSystemStep(),
        InteractiveShellStep(),
        FinalizeStep(),
        ArchiveStep(),
    ]


@contextmanager
def _handle_signals(handler) -> Iterator[None]:
    previous = {s: signal.signal(s, handler) for s in HANDLED_SIGNALS}
    try:
        yield
    finally:
        for s, old in previous.items():
            signal.signal(s, old)


def _raise(signum, frame):
    raise RunInterrupted(signum)


def interrupt_on_signals():
    """Turn SIGINT/SIGTERM into RunInterrupted so cleanup can run."""

    return _handle_signals(_raise)


def signals_ignored():
    """Keep SIGINT/SIGTERM from cutting cleanup short."""

    return _handle_signals(signal.SIG_IGN)


def run(cfg: RunConfig, *, binfmt_dir: Optional[str] = None) -> PipelineResult:
    """Check the host, build the root FS and always clean up afterwards."""

    tools = check_preconditions(cfg, binfmt_dir=binfmt_dir)

    tree: Optional[TargetTree] = None
    with interrupt_on_signals():
        try:
            # A signal must not land between mkdtemp and the tree owning it.
            with signals_ignored():
                tree = prepare_target(cfg)
            ctx = RunContext(cfg=cfg, tree=tree, tools=tools)
            result = run_pipeline(ctx=ctx, steps=build_steps())
        finally:
            if tree is not None:
                with signals_ignored():
                    tree.cleanup()

    logger.info("Done! (ran=%s skipped=%s)", result.ran_steps, result.skipped_steps)
    return result


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)

    try:
        configure_logging(log_path=args.log, level=log_level(args))
        run(build_run_config(args))
    except RunInterrupted as e:
        logger.error("%s: %s, cleaned up", PROG, e)
        return 1
    except (RfsError, OSError) as e:
        logger.error("%s: %s", PROG, e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
