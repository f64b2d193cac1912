# src/study_planner/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "planner.log"
PLANNER_LOGGER = "study_planner"

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _PlannerConsoleFilter(logging.Filter):
    """
    Console gate: planner records pass at the handler level, everything else
    (third-party libraries, 'py.warnings') only at ERROR and above.
    """

    def __init__(self, prefix: str = PLANNER_LOGGER) -> None:
        super().__init__()
        self._prefix = prefix

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == self._prefix or record.name.startswith(self._prefix + "."):
            return True
        return record.levelno >= logging.ERROR


def _drop_root_handlers(root: logging.Logger) -> None:
    # Re-running setup (tests, reloads) must not leave open log files behind.
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()


def setup_logging(
    *,
    log_dir: str | Path = ".local/study_planner",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route all logging to stderr (filtered) and to `<log_dir>/planner.log` (full).

    Call once at startup, before the first record is emitted.
    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    _drop_root_handlers(root)
    root.setLevel(min(console_level, file_level))

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_PlannerConsoleFilter())

    to_file = logging.FileHandler(str(log_file), encoding="utf-8")
    to_file.setLevel(file_level)
    to_file.setFormatter(fmt)

    root.addHandler(console)
    root.addHandler(to_file)

    # warnings.warn(...) shows up as 'py.warnings' records.
    logging.captureWarnings(True)

    logging.getLogger(PLANNER_LOGGER).debug("Logging ready file=%s console_level=%s", log_file, console_level)
    return log_file
