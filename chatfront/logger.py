"""Console logging for the chat front-end."""
import logging
import sys
from typing import Iterable

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# httpx/httpcore log every request at INFO; UpstreamClient already does
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logger(
    name: str,
    level: str = "INFO",
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> logging.Logger:
    """Attach a stdout handler to the application logger.

    Modules log through ``logging.getLogger(__name__)`` and so inherit the
    handler of the ``chatfront`` logger configured here.

    Args:
        name: Logger name (the package name)
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL; unknown values fall
               back to INFO with a warning on stderr
        quiet: Third-party loggers raised to WARNING

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)

    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        print(f"Warning: Invalid log level '{level}', defaulting to INFO", file=sys.stderr)
        log_level = logging.INFO
    logger.setLevel(log_level)

    for noisy in quiet:
        logging.getLogger(noisy).setLevel(max(log_level, logging.WARNING))

    # Called again on reload; keep a single handler
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
