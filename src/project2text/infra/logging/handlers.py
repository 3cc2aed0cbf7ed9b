from __future__ import annotations

"""
Sink Handlers.

Builds the stderr and rotating-file sinks that sit behind the queue
listener. Every handler created here is tagged, so reconfiguration and
shutdown only ever remove what this package installed.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import List

from project2text.infra.fs import ensure_parent_dir
from project2text.infra.logging.config import (
    CONSOLE_FORMAT,
    FILE_DATE_FORMAT,
    FILE_FORMAT,
    LoggingConfig,
)

_HANDLER_TAG_ATTR: str = "_project2text_handler"


def _tag_handler(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG_ATTR, True)
    return handler


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def build_sinks(cfg: LoggingConfig, level: int) -> List[logging.Handler]:
    """
    Create the output handlers requested by `cfg`.

    A log file that cannot be opened is reported on stderr and skipped;
    the run continues with whatever sinks remain.

    Args:
        cfg: Logging settings.
        level: Numeric threshold applied to every sink.

    Returns:
        List[logging.Handler]: Tagged handlers, possibly empty.
    """
    sinks: List[logging.Handler] = []

    if cfg.console:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        sinks.append(console)

    if cfg.log_file:
        try:
            ensure_parent_dir(cfg.log_file)
            file_sink = RotatingFileHandler(
                cfg.log_file,
                maxBytes=cfg.max_bytes,
                backupCount=cfg.backup_count,
                encoding="utf-8",
            )
        except OSError as e:
            sys.stderr.write(f"WARNING: Cannot open log file '{cfg.log_file}': {e}\n")
        else:
            file_sink.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
            sinks.append(file_sink)

    for sink in sinks:
        sink.setLevel(level)
        _tag_handler(sink)
    return sinks
