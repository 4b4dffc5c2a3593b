"""
Logging configuration for the Secrets Manager adaptor.

SDK calls run on worker threads, so the format carries the thread name
next to the logger name. Output goes to stdout, which AWS Lambda forwards
to CloudWatch Logs.
"""
import logging
import os
import sys

DEFAULT_FORMAT = '%(asctime)s - %(name)s - [%(threadName)s] - %(levelname)s - %(message)s'


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (defaults to this module's name if not provided)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name or __name__)

    if logger.handlers:
        return logger

    log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logger.level)
    handler.setFormatter(
        logging.Formatter(DEFAULT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
    )
    logger.addHandler(handler)

    # Handlers are attached per logger; avoid duplicates through the root
    logger.propagate = False

    return logger
