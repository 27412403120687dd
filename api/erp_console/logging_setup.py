# -*- coding: utf-8 -*-
from __future__ import annotations
import logging, logging.handlers, sys
from pathlib import Path

LOG_NAME = "erp_console.log"
FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# loggers that get the file handler even when uvicorn configured them first
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")


def _has_file_handler(lg: logging.Logger) -> bool:
    return any(getattr(h, "baseFilename", "").endswith(LOG_NAME) for h in lg.handlers)


def _has_stderr_handler(lg: logging.Logger) -> bool:
    return any(
        type(h) is logging.StreamHandler and getattr(h, "stream", None) is sys.stderr
        for h in lg.handlers
    )


def setup_logging(settings) -> Path:
    """
    Rotating file log under CONSOLE_DATA_ROOT/logs/erp_console.log.

    LOG_LEVEL sets the root level; LOG_TO_STDERR adds a stream handler for
    running in a container. Safe to call more than once.
    """
    log_dir = Path(settings.CONSOLE_DATA_ROOT).expanduser() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_NAME
    level = logging.getLevelName(str(settings.LOG_LEVEL).upper())
    if not isinstance(level, int):
        level = logging.INFO

    fmt = logging.Formatter(FORMAT)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=5_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(fmt)
    file_handler.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    if not _has_file_handler(root):
        root.addHandler(file_handler)
    if settings.LOG_TO_STDERR and not _has_stderr_handler(root):
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(fmt)
        root.addHandler(stream)

    for name in SERVER_LOGGERS:
        lg = logging.getLogger(name)
        lg.setLevel(level)
        if not _has_file_handler(lg):
            lg.addHandler(file_handler)

    # one INFO line per backend call otherwise
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return log_path
