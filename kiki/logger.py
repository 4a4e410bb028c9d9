"""File logging to the per-user log directory."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

LOG_DIR_NAME = ".kiki"
LOG_FILE_NAME = "kiki.log"
LOGGER_NAME = "kiki"
_LOG_DIR_MODE = 0o755
_FORMAT = "time=%(asctime)s level=%(levelname)s msg=%(message)s"


def get_log_dir() -> Path:
    """Return the directory holding the log file (~/.kiki)."""
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as exc:
        raise OSError(f"get home dir: {exc}") from exc
    return home / LOG_DIR_NAME


@contextmanager
def open_file_logger() -> Iterator[logging.Logger]:
    """Attach an INFO-level file handler writing to ~/.kiki/kiki.log.

    The handler is detached and the file closed when the block exits.
    """
    log_dir = get_log_dir()
    try:
        log_dir.mkdir(mode=_LOG_DIR_MODE, parents=True, exist_ok=True)
    except OSError as exc:
        raise OSError(f"create log dir: {exc}") from exc

    try:
        handler = logging.FileHandler(log_dir / LOG_FILE_NAME, mode="a", encoding="utf-8")
    except OSError as exc:
        raise OSError(f"open log file: {exc}") from exc
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(_FORMAT))

    logger = logging.getLogger(LOGGER_NAME)
    previous_level = logger.level
    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    try:
        yield logger
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)
        handler.close()