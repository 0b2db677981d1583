"""
Logging configuration.

Library modules only create loggers (logging.getLogger(__name__)); the
application entry point decides where records go by calling setup_logging().
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.logging import RichHandler

LOG_FORMAT = "%(message)s"
FILE_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: Union[str, int] = "INFO", log_file: Optional[Union[str, Path]] = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Logging level name or number
        log_file: Optional file that receives a plain-text copy of all records
    """
    handlers = [RichHandler(rich_tracebacks=True, show_path=False)]

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(
        level=level.upper() if isinstance(level, str) else level,
        format=LOG_FORMAT,
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )
