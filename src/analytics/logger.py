"""Application logger.

Everything logs through the single ``logger`` defined here. Console output
goes to stdout at INFO; when ``LOG_FILE`` is set, a DEBUG-level file copy
with call sites is written as well.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from src.utils.config import settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"


def _file_handler(log_file: str) -> logging.Handler:
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def setup_logger(
    name: str = "support_assistant", log_file: Optional[str] = None, log_level: str = "INFO"
) -> logging.Logger:
    """Configure the named logger, replacing any handlers it already has."""
    support_logger = logging.getLogger(name)
    support_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    support_logger.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    support_logger.addHandler(console)

    if log_file:
        support_logger.addHandler(_file_handler(log_file))

    return support_logger


logger = setup_logger(log_file=settings.log_file, log_level=settings.log_level)
