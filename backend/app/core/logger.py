import logging

from app.core.config import settings


def get_logger(name: str) -> logging.Logger:
    """
    Return a named component logger with a console handler attached once.

    Output looks like ``[CV] WARNING: Stored file missing for CV 3``.
    """
    logger = logging.getLogger(name)
    logger.setLevel(settings.LOG_LEVEL.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            f"[{name.upper()}] %(levelname)s: %(message)s"
        ))
        logger.addHandler(handler)

    return logger
