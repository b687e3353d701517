# src/config/logging_config.py

"""Logging for one catalog_browser invocation.

Every command (catalog, item, health) writes a fresh ``logs/run_*.log``.
The file records the full reconciliation trail at DEBUG: connectivity
checks, retried fetches, cache inserts and skips, and the reason a load
fell back to cached data.  Cache reads and remote fetches run in worker
threads, so file records carry the thread name.

The console handler writes to stderr at WARNING and above.  stdout
carries nothing but the rendered catalog, which keeps ``--format json``
output pipeable.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

ROOT_LOGGER_NAME = "catalog_browser"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s:%(lineno)d | "
    "%(message)s"
)
_STDERR_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _run_log_path(logs_dir: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return logs_dir / f"run_{stamp}.log"


def _attach(
    logger: logging.Logger,
    handler: logging.Handler,
    level: int,
    fmt: str,
) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
    logger.addHandler(handler)


def setup_logging() -> Path:
    """Route ``catalog_browser.*`` records to a run log and to stderr.

    Safe to call more than once: a logger that already has handlers is
    left as it is.

    Returns:
        Path of the log file for this run.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = _run_log_path(logs_dir)

    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    app_logger.setLevel(logging.DEBUG)
    if app_logger.handlers:
        return log_file

    _attach(
        app_logger,
        logging.FileHandler(log_file, encoding="utf-8"),
        logging.DEBUG,
        _FILE_FORMAT,
    )
    _attach(
        app_logger,
        logging.StreamHandler(sys.stderr),
        logging.WARNING,
        _STDERR_FORMAT,
    )

    app_logger.debug(
        "Run log %s (api=%s, cache=%s)",
        log_file,
        Settings.API_BASE_URL,
        Settings.CATALOG_DB_PATH,
    )
    return log_file
