"""
Logging configuration for the application.

Application logs go to stdout in one line per record. The operational
error log (``errorpage.errors``) carries the multi-line failure chains
written when error details are hidden from clients; it can additionally
be sent to a dedicated file so those chains stay out of the main stream.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ERROR_LOG_NAME = "errorpage.errors"
ERROR_LOG_FORMAT = "[%(asctime)s] %(message)s"


def configure_logging(
    level: str = "INFO", error_log_path: Optional[str] = None
) -> logging.Logger:
    """Configure application logging and the operational error log.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
        error_log_path: File receiving failure chains. When None they only
            propagate to the root handlers.

    Returns:
        The operational error logger.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    error_log = logging.getLogger(ERROR_LOG_NAME)
    # Failure chains are written at ERROR and must survive a quiet root level.
    error_log.setLevel(logging.ERROR)
    for handler in list(error_log.handlers):
        error_log.removeHandler(handler)
        handler.close()
    if error_log_path:
        Path(error_log_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(error_log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(ERROR_LOG_FORMAT, LOG_DATE_FORMAT))
        error_log.addHandler(file_handler)
    return error_log
