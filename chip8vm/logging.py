"""Console logging utilities for the emulator, scheduler and frontends.

This module provides a small levelled console logger with colours and
elapsed-time stamps, plus a tqdm progress bar for headless runs.
"""

import time
import sys
from typing import Dict, Optional

from tqdm import tqdm


LEVEL_ORDER = {
    "DEBUG": 0,
    "INFO": 1,
    "WARNING": 2,
    "ERROR": 3,
    "CRITICAL": 4,
}

_default_level = "INFO"
_loggers: Dict[str, "ConsoleLogger"] = {}


class ConsoleLogger:
    """Flexible console logger with level filtering and formatters."""

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: Optional[str] = None,
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.log_level = (log_level or _default_level).upper()
        if self.log_level not in LEVEL_ORDER:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVEL_ORDER)}")
        self.stream = stream if stream is not None else sys.stdout
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {k: "" for k in [*LEVEL_ORDER, "RESET"]}
        )

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return LEVEL_ORDER.get(level.upper(), 1) >= LEVEL_ORDER.get(self.log_level, 1)

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def set_level(self, log_level: str):
        log_level = log_level.upper()
        if log_level not in LEVEL_ORDER:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVEL_ORDER)}")
        self.log_level = log_level

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


def get_logger(name: str) -> ConsoleLogger:
    """Shared logger per component name, created at the default level."""
    if name not in _loggers:
        _loggers[name] = ConsoleLogger(name)
    return _loggers[name]


def set_log_level(log_level: str):
    """Set the level of every shared logger, and of those created later."""
    global _default_level
    log_level = log_level.upper()
    if log_level not in LEVEL_ORDER:
        raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVEL_ORDER)}")
    _default_level = log_level
    for logger in _loggers.values():
        logger.set_level(log_level)


def progress_bar(total: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """tqdm progress bar for headless instruction runs."""
    if desc is None:
        desc = f"Running ({total:,} cycles)"

    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)

    return tqdm(total=total, desc=desc, unit="cycle", **kwargs)
