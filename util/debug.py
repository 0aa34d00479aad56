###########EXTERNAL IMPORTS############

import logging
import logging.handlers
import os
from typing import Optional

#######################################

#############LOCAL IMPORTS#############

#######################################


class LoggerManager:
    """
    Centralized logging setup for the whole application.

    `init()` configures the root logger once (console output plus a rotating
    log file). Modules obtain their loggers through `get_logger(__name__)` so
    that every record flows through the same handlers.
    """

    LOG_DIRECTORY = "logs"
    LOG_FILE = "monitor.log"
    LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    MAX_BYTES = 1_000_000
    BACKUP_COUNT = 5

    _initialized: bool = False

    @staticmethod
    def init(level: int = logging.INFO, log_directory: Optional[str] = None) -> None:
        """
        Configures the root logger with a console handler and a rotating file handler.

        Calling this method more than once has no effect.

        Args:
            level: Minimum level for the root logger.
            log_directory: Directory for the log file. Defaults to `LOG_DIRECTORY`.
        """

        if LoggerManager._initialized:
            return

        formatter = logging.Formatter(LoggerManager.LOG_FORMAT)
        root = logging.getLogger()
        root.setLevel(level)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

        directory = log_directory or LoggerManager.LOG_DIRECTORY
        os.makedirs(directory, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=os.path.join(directory, LoggerManager.LOG_FILE),
            maxBytes=LoggerManager.MAX_BYTES,
            backupCount=LoggerManager.BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

        LoggerManager._initialized = True

    @staticmethod
    def get_logger(name: str) -> logging.Logger:
        """Returns the logger registered under the given name."""

        return logging.getLogger(name)
