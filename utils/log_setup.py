import logging
import os

LOG_FORMAT = '{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "msg": "%(message)s"}'

_level = os.getenv("LOG_LEVEL", "INFO").upper()
_logger_names = set()


def get_logger(name: str) -> logging.Logger:
    """Named logger with the JSON-line formatter, attached once per name."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(_level)
        logger.propagate = False
    _logger_names.add(name)
    return logger


def set_level(level: str) -> None:
    """Apply ``level`` to every logger handed out so far and to later ones."""
    global _level
    _level = level.upper()
    for name in _logger_names:
        logging.getLogger(name).setLevel(_level)
