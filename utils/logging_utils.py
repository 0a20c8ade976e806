import sys
import logging

from config import LOGGING_CONFIG


def setup_logging(log_level=None, log_file=None):
    """Setup logging configuration"""
    if log_level is None:
        log_level = getattr(logging, LOGGING_CONFIG["level"])
    if log_file is None:
        log_file = LOGGING_CONFIG["log_file"]

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format=LOGGING_CONFIG["format"],
        handlers=handlers
    )
    return logging.getLogger(__name__)
