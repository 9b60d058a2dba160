from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# Read the log level from the environment variable, defaulting to 'INFO'
logger_level = os.getenv('LOGGER_LEVEL', 'INFO').upper()
env_log_level = getattr(logging, logger_level, logging.INFO)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s (file: %(filename)s, line: %(lineno)d)'


def create_logger(name: str, level: Optional[int] = None, propagate: bool = False) -> logging.Logger:
    """Generic logger creation function used by all modules.

    Calling it twice for the same name does not stack handlers.
    """
    _level = level if level is not None else env_log_level
    logger = logging.getLogger(name)
    logger.setLevel(_level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.propagate = propagate
    return logger
