"""
Logging for SimpleCards.

``setup_logging`` configures the ``simplecards`` logger and returns it; the
application factory hands it (or a child of it) to the import pools, the
Quizlet parser and the modules use case. Request lines go to
``simplecards.http``.
"""

import logging
import logging.handlers
import os
from typing import Optional

LOGGER_NAME = 'simplecards'
LOG_FILE_NAME = 'simplecards.log'
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

PLAIN_FORMAT = '%(asctime)s [%(levelname)s] %(name)s (%(threadName)s): %(message)s'
JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"thread": "%(threadName)s", "message": "%(message)s"}'
)


def _default_log_dir() -> str:
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
    return os.path.join(project_root, 'logs')


def _rotating_file_handler(log_dir: str) -> logging.Handler:
    os.makedirs(log_dir, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, LOG_FILE_NAME),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding='utf-8',
    )


def setup_logging(
    app=None,
    log_level: str = 'INFO',
    log_dir: Optional[str] = None,
    json_format: bool = False,
    to_file: bool = True,
) -> logging.Logger:
    """
    Configure the application logger.

    Args:
        app: Flask application instance (optional); quiets werkzeug's access log
        log_level: DEBUG, INFO, WARNING or ERROR
        log_dir: Directory of the rotating log file (default: logs/)
        json_format: One JSON object per line instead of plain text
        to_file: Also write to ``simplecards.log`` (10 MB x 5 backups)

    Returns:
        The configured ``simplecards`` logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(JSON_FORMAT if json_format else PLAIN_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    # Calling twice (one app per test) must not duplicate lines
    logger.handlers.clear()

    handlers = [logging.StreamHandler()]
    if to_file:
        handlers.append(_rotating_file_handler(log_dir or _default_log_dir()))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if app is not None:
        # after_request already logs every request
        logging.getLogger('werkzeug').setLevel(logging.WARNING)

    logger.info("Logging initialized: level=%s, to_file=%s, json=%s", log_level, to_file, json_format)
    return logger
