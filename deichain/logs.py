"""Timestamped logging to the console and an append-only log file."""

from __future__ import annotations

import threading
from datetime import datetime

DEFAULT_LOG_PATH = "DEIChain_log.txt"
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_write_lock = threading.Lock()


def format_log_line(message: str, when: datetime | None = None) -> str:
    """Return *message* prefixed with a bracketed local timestamp."""
    moment = when if when is not None else datetime.now()
    return f"[{moment.strftime(TIME_FORMAT)}] {message}"


def log_message(message: str, log_path=DEFAULT_LOG_PATH) -> str:
    """Print a timestamped line and append it to *log_path*.

    Pass ``None`` as *log_path* to log to the console only. A log file that
    cannot be opened is silently skipped. The written line is returned.
    """
    line = format_log_line(message)
    with _write_lock:
        print(line, flush=True)
        if log_path is not None:
            try:
                with open(log_path, "a", encoding="utf-8") as handle:
                    handle.write(line + "\n")
            except OSError:
                pass
    return line