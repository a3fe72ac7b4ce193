"""
Logging for the API.

Everything the application logs goes through the ``pocket_ledger`` logger
tree (``get_logger("src.crud.crud_account")`` becomes
``pocket_ledger.src.crud.crud_account``). Libraries keep their own
loggers, capped at a quieter level.
"""
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from src.config import Settings

APP_LOGGER_NAME = "pocket_ledger"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

THIRD_PARTY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "sqlalchemy.orm",
    "alembic",
    "uvicorn.access",
    "uvicorn.error",
    "slowapi",
    "httpx",
)

MAX_LOG_FILE_BYTES = 10 * 1024 * 1024  # 10MB
LOG_FILE_BACKUPS = 5


def _level(name: str, default: int) -> int:
    return getattr(logging, name.upper(), default)


def _handlers(log_file: Optional[str], level: int) -> List[logging.Handler]:
    """Console always, plus a rotating file when LOG_FILE is set"""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_FILE_BYTES,
            backupCount=LOG_FILE_BACKUPS
        ))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def quiet_loggers(names: Iterable[str], level: int) -> None:
    for name in names:
        logging.getLogger(name).setLevel(level)


def setup_logging(settings: Settings) -> logging.Logger:
    """
    Configure the application logger from settings.

    Safe to call more than once (each app built in tests calls it):
    handlers are replaced, not stacked.
    """
    app_level = _level(settings.app_log_level, logging.INFO)

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(app_level)
    app_logger.handlers.clear()
    for handler in _handlers(settings.log_file, app_level):
        app_logger.addHandler(handler)
    app_logger.propagate = False

    quiet_loggers(THIRD_PARTY_LOGGERS, _level(settings.third_party_log_level, logging.WARNING))

    return app_logger


def get_logger(name: str = APP_LOGGER_NAME) -> logging.Logger:
    if name == APP_LOGGER_NAME or name.startswith(f"{APP_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")
