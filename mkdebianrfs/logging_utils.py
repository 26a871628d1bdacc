from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .errors import ConfigError

FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def configure_logging(log_path: Optional[str] = None, level: int = logging.INFO) -> None:
    """Log to stderr, and also to log_path when given.

    stderr keeps diagnostics apart from the interactive chroot sessions on
    stdout. Calling this again only updates the level.
    """

    root = logging.getLogger()
    root.setLevel(level)
    if getattr(root, "_mkdebianrfs_configured", False):
        return

    fmt = logging.Formatter(fmt=FORMAT, datefmt=DATEFMT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_path:
        try:
            Path(log_path).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_path))
        except OSError as e:
            raise ConfigError(f"cannot open log file {log_path}: {e}") from e

    for h in handlers:
        h.setFormatter(fmt)
        root.addHandler(h)
    setattr(root, "_mkdebianrfs_configured", True)

    if log_path:
        logging.getLogger(__name__).info("Logging to %s", log_path)
