"""Process-wide logging setup."""
import logging
import sys

from config import settings

# Chatty third-party loggers kept at WARNING unless LOG_LEVEL is DEBUG.
_NOISY_LOGGERS = ("pymongo", "urllib3", "httpx")


def setup_logging(level: str | None = None) -> None:
    level = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    if level != "DEBUG":
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
