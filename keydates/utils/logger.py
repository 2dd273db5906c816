"""
Logging setup for the Contract Key Dates service.

Settings come from the ``logging`` section of ``api_config.yaml`` and may be
overridden with ``LOG_LEVEL`` and ``LOG_FILE``. An empty ``LOG_FILE`` keeps
output on stdout only, which suits containers that collect stdout.
"""

import os
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
from logging.handlers import RotatingFileHandler

from keydates.utils.config import get_api_config

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_FILE = "/tmp/logs/keydates.log"
DEFAULT_QUIET_LOGGERS = ("kafka", "httpx", "httpcore")


def _logging_settings() -> Dict[str, Any]:
    return get_api_config().get('logging') or {}


def _build_handlers(log_file: str, settings: Dict[str, Any]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_file,
            maxBytes=settings.get('max_bytes', 10 * 1024 * 1024),
            backupCount=settings.get('backup_count', 5),
            encoding='utf-8'
        ))
    return handlers


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure root logging for the service.

    Args:
        level: Logging level name; LOG_LEVEL, then logging.level otherwise
        log_file: Rotating log file; LOG_FILE, then logging.file otherwise.
            An empty value disables the file handler.

    Returns:
        The "keydates" logger
    """
    settings = _logging_settings()
    level = (level or os.getenv("LOG_LEVEL") or settings.get('level', "INFO")).upper()
    if log_file is None:
        log_file = os.getenv("LOG_FILE", settings.get('file', DEFAULT_LOG_FILE))

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=settings.get('format', DEFAULT_FORMAT),
        handlers=_build_handlers(log_file, settings),
        force=True
    )

    # kafka-python logs every metadata refresh at INFO
    for name in settings.get('quiet_loggers', DEFAULT_QUIET_LOGGERS):
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger("keydates")
    logger.info(f"Logging configured at {level} level, file: {log_file or 'disabled'}")
    return logger
