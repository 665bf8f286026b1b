import logging
import os
from datetime import datetime
from typing import Optional
from oci_add_hooks.utils.constants import (
    DEFAULT_LOG_LEVEL, ENV_LOG_LEVEL, LOGGER_NAME, LOG_DIR_MODE, LOG_FILE_MODE, LOG_FILE_DATE_FORMAT
)

def get_log_level() -> int:
    """Read the log level from the environment, falling back to the default."""
    env_level = os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(env_level)
    if not isinstance(level, int):
        return logging.getLevelName(DEFAULT_LOG_LEVEL)
    return level

def get_log_file(log_dir: str, now: Optional[datetime] = None) -> str:
    """Return the dated log file path inside log_dir."""
    now = now or datetime.now()
    return os.path.join(log_dir, now.strftime(LOG_FILE_DATE_FORMAT) + ".log")

def setup_logger(name: str = LOGGER_NAME, level: Optional[int] = None, log_dir: Optional[str] = None) -> logging.Logger:
    """
    Set up a logger with consistent formatting and configuration.

    The wrapper shares stdout and stderr with the runtime, so nothing is
    ever logged to the console. Without a log directory the logger stays silent.

    Args:
        name: Name of the logger
        level: Optional logging level. Defaults to the environment setting.
        log_dir: Optional directory for the dated log file.

    Returns:
        logging.Logger: Configured logger instance

    Raises:
        OSError: If the log directory or log file cannot be created
    """
    logger = logging.getLogger(name)

    if level is None:
        level = get_log_level()

    if log_dir:
        os.makedirs(log_dir, mode=LOG_DIR_MODE, exist_ok=True)
        log_file = get_log_file(log_dir)

        # Create empty log file if it doesn't exist and set permissions
        if not os.path.exists(log_file):
            with open(log_file, 'a'):
                pass
            os.chmod(log_file, LOG_FILE_MODE)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s - (%(filename)s)',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler = logging.FileHandler(log_file)
        handler.setFormatter(formatter)
    else:
        handler = logging.NullHandler()

    # Clear existing handlers only once the new one exists
    for old_handler in list(logger.handlers):
        logger.removeHandler(old_handler)
        old_handler.close()

    logger.setLevel(level)
    logger.propagate = False
    logger.addHandler(handler)

    return logger

# Default logger for the application, silent until configured with a log directory
logger = setup_logger(LOGGER_NAME)
