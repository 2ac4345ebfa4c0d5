"""Journal log file under platformdirs user_log_dir.

All components share one rotating ``bujo.log``. Each component asks for its
own child logger (``get_logger("store")`` -> ``bujo_cli.store``) so a line
shows whether it came from the CLI, the task service or the SQLite store.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "bujo_cli"
_LOG_FILE = "bujo.log"
_MAX_BYTES = 2 * 1024 * 1024  # 2 MB
_BACKUP_COUNT = 3
_LEVEL_ENV = "BUJO_LOG_LEVEL"
_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_logger: logging.Logger | None = None


def _level_from_env() -> int:
    level_name = os.environ.get(_LEVEL_ENV, "INFO").upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def _configure() -> logging.Logger:
    log_dir = Path(user_log_dir(_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)

    journal_log = logging.handlers.RotatingFileHandler(
        log_dir / _LOG_FILE,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    journal_log.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))

    app_logger = logging.getLogger(_APP_NAME)
    app_logger.setLevel(_level_from_env())
    if not app_logger.handlers:
        app_logger.addHandler(journal_log)
    # Never echo into the terminal output of the CLI
    app_logger.propagate = False
    return app_logger


def get_logger(component: str | None = None) -> logging.Logger:
    """Return the journal logger, or the child logger of one component.

    The file handler is set up on first use. The level defaults to INFO and
    can be overridden with BUJO_LOG_LEVEL.

    Args:
        component: Short component name such as ``cli``, ``service`` or ``store``
    """
    global _logger
    if _logger is None:
        _logger = _configure()
    if component is None:
        return _logger
    return _logger.getChild(component)
