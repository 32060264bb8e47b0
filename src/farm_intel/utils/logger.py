import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Loggers under the "farm_intel" namespace share the package handler, so
    only the package root gets its own StreamHandler.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    log = logging.getLogger(name)
    if not log.handlers and not (name or "").startswith("farm_intel."):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    log.setLevel(logging.INFO)
    return log


# Shared pipeline logger
logger = get_logger("farm_intel")
