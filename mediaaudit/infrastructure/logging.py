import sys
import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logging(debug: bool = False, log_path: Optional[Path] = None) -> logging.Logger:
    """
    Setup logging configuration for mediaaudit.

    Diagnostics always go to stderr (stdout carries the CSV report).
    Returns configured logger instance.

    Args:
        debug: If True, enable DEBUG level logging
        log_path: Optional path to an additional log file
    """
    level = logging.DEBUG if debug else logging.INFO

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_path:
        log_file = Path(log_path)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    logger = logging.getLogger("mediaaudit")
    logger.debug(f"Logging initialized (debug={'ON' if debug else 'OFF'}, file={log_path})")

    return logger
