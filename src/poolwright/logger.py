import logging

from rich.logging import RichHandler

from .core import LOG_LEVEL


def setup_logger(name: str = "poolwright", level: int = logging.ERROR) -> logging.Logger:
    """Configures and returns a logger with RichHandler."""

    logger = logging.getLogger(name)

    # Avoid adding duplicate handlers if setup is called multiple times

    if not logger.handlers:
        logger.setLevel(level)

        handler = RichHandler(rich_tracebacks=True, markup=False)

        handler.setFormatter(logging.Formatter("%(message)s"))

        logger.addHandler(handler)

    else:
        logger.setLevel(level)

    return logger


# Global logger instance (POOLWRIGHT_LOG_LEVEL, default ERROR to reduce noise)


logger = setup_logger(level=getattr(logging, LOG_LEVEL, logging.ERROR))
