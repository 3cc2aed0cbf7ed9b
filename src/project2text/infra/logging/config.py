from __future__ import annotations

"""
Logging Configuration.

Settings the CLI passes to `configure_logging`, plus the record formats
shared by every run.
"""

import logging
from dataclasses import dataclass
from typing import Optional

CONSOLE_FORMAT: str = "%(levelname)s | %(message)s"
FILE_FORMAT: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

_KNOWN_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class LoggingConfig:
    """
    Where log records go and how verbose they are.

    Attributes:
        level: Level name ("DEBUG", "INFO", ...); unknown names mean INFO.
        console: Also write records to stderr.
        log_file: Rotating log file path, or None for no file output.
        max_bytes: Size at which the log file rolls over.
        backup_count: Rolled-over files kept next to the active one.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None
    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 3

    def level_number(self) -> int:
        name = str(self.level or "").strip().upper()
        if name == "WARN":
            name = "WARNING"
        if name not in _KNOWN_LEVELS:
            return logging.INFO
        return getattr(logging, name)
