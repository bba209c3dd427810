"""
Logging setup for Map Subsetter.

All modules log through children of the 'subset' logger. The console shows
progress banners and per-layer results; the log file additionally records
the DEBUG-level summaries the clipping routines emit on every call.

Functions:
    setup_logging: Attach console and file handlers, return the log file path
    get_logger: Child logger of 'subset' for a module

Example:
    >>> from utils.logger import setup_logging, get_logger
    >>> log_file = setup_logging()
    >>> logger = get_logger(__name__)
    >>> logger.info("Clipping 3 layers")
"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional, Union

ROOT_LOGGER_NAME = 'subset'

CONSOLE_FORMAT = '%(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(log_dir: Optional[Union[str, Path]] = None,
                  console_level: int = logging.INFO) -> Path:
    """
    Route 'subset' log records to the console and a timestamped log file.

    Calling it again replaces (and closes) the handlers of the previous call,
    so repeated workflow runs in one process each get their own log file.

    Parameters:
    -----------
    log_dir : Optional[Union[str, Path]]
        Where subset_<timestamp>.log is created. Defaults to PROJECT_ROOT/logs
    console_level : int
        Minimum level echoed to stdout; the file always receives DEBUG

    Returns:
    --------
    Path
        The new log file
    """
    log_dir = Path(log_dir) if log_dir is not None else Path(__file__).parent.parent / 'logs'
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / f"subset_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG)

    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))

    root.addHandler(console)
    root.addHandler(file_handler)
    root.debug(f"Log file opened: {log_file}")

    return log_file


def get_logger(name: str) -> logging.Logger:
    """Logger 'subset.<name>' for a module (pass __name__)."""
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')
