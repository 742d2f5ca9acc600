# typescan/utils/logger.py

import logging
import logging.handlers
from pathlib import Path


class LoggerManager:
    """
    Configures the application-wide logging system.

    Two handlers can be attached to the root logger:
    1. Console Handler: real-time feedback on stderr, INFO and above
       (DEBUG and above when verbose).
    2. Rotating File Handler: only when a log file is requested. It rotates
       at 5MB, keeps 5 backups, and captures everything from DEBUG up.
    """

    def __init__(self, log_file: Path | None = None, verbose: bool = False):
        """
        Args:
            log_file: Where to write the persistent log, or None for console only.
            verbose: Show DEBUG messages (e.g. every classification) on the console.
        """
        self.log_file_path = log_file
        self.console_level = logging.DEBUG if verbose else logging.INFO
        self.root_logger = logging.getLogger()

    def setup(self):
        """Attaches the handlers, unless the root logger is already configured."""
        if self.root_logger.hasHandlers():
            return

        self.root_logger.setLevel(logging.DEBUG)
        self.root_logger.addHandler(self._create_console_handler())
        if self.log_file_path is not None:
            self.root_logger.addHandler(self._create_file_handler())

        logging.debug("Logging configured.")

    def _create_console_handler(self) -> logging.StreamHandler:
        handler = logging.StreamHandler()
        handler.setLevel(self.console_level)
        formatter = logging.Formatter(
            '%(asctime)s - [%(levelname)s] - %(message)s',
            datefmt='%H:%M:%S'
        )
        handler.setFormatter(formatter)
        return handler

    def _create_file_handler(self) -> logging.handlers.RotatingFileHandler:
        handler = logging.handlers.RotatingFileHandler(
            self.log_file_path, maxBytes=5*1024*1024, backupCount=5, encoding='utf-8'
        )
        handler.setLevel(logging.DEBUG)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - [%(levelname)s] - %(filename)s:%(lineno)d - %(message)s'
        )
        handler.setFormatter(formatter)
        return handler


def setup_logging(log_file: Path | None = None, verbose: bool = False):
    """Initializes and configures the application-wide logging system."""
    manager = LoggerManager(log_file, verbose)
    manager.setup()
