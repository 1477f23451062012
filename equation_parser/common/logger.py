"""Package logger shared by the parser, the batch runner and the CLI."""
import logging
import sys
from typing import Union

LOGGER_NAME = "equation_parser"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger: logging.Logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())


class StderrHandler(logging.StreamHandler):
    """Stream handler writing to the current ``sys.stderr``, even after it was replaced."""

    @property
    def stream(self):
        """Return the stream records are written to, looked up on every access."""
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        """Ignore assignments, the stream is always the current stderr."""


def is_configured() -> bool:
    """
    Tell whether :func:`configure_logging` attached a handler in this process.

    :return: True once a stream handler is attached to the package logger
    :rtype: bool
    """
    return any(isinstance(h, logging.StreamHandler) for h in logger.handlers)


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Attach a stderr handler to the package logger and set its level.

    Calling it again only updates the level, handlers are not duplicated.
    Also used as the initializer of worker processes.

    :param level: Logging level, as a number or a name such as ``"DEBUG"``

    :return: The configured package logger
    :rtype: logging.Logger
    """
    if not is_configured():
        handler = StderrHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
