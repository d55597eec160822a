"""
Application logging setup with console and rotating file handlers
"""
import logging
from logging.handlers import RotatingFileHandler
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_formatter() -> logging.Formatter:
    """Formatter shared by console, file and per-job handlers."""
    return logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def get_logger(name: str,
               level: str | int = "INFO",
               log_file: str | None = None,
               max_bytes: int = 1_000_000,
               backup_count: int = 3) -> logging.Logger:
    logger = logging.getLogger(name)
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)

    # Handlers are attached once; later calls only adjust the level
    if logger.handlers:
        return logger

    formatter = build_formatter()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        fh = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    logger.propagate = False
    return logger
