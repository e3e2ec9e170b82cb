"""
Unified logging helper for the YouTube data backend.

Usage:
    from logging_helper import LoggingHelper, LogType

    logger = LoggingHelper.get_logger(LogType.AUTH)
    logger.info("Loaded cached token")

    LoggingHelper.log_error_with_trace("Authorization failed", exception)
"""

import logging
import os
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


class LogType(Enum):
    """Enum for the loggers used by the application."""
    MAIN = "youtube_data_backend"
    AUTH = "youtube_data_backend.auth"


class LoggingHelper:
    """
    Owns every logger of the application.

    Console output is always enabled. File output is only added when a log
    directory is given (argument or YTDB_LOG_DIR).
    """

    _loggers = {}
    _initialized = False
    _log_dir: Optional[Path] = None

    @classmethod
    def initialize(cls, log_dir: Optional[str] = None):
        """
        Initialize all loggers. Safe to call more than once.

        Args:
            log_dir: Directory where log files will be stored (optional)
        """
        if cls._initialized:
            return

        log_dir = log_dir or os.getenv('YTDB_LOG_DIR')
        cls._log_dir = Path(log_dir) if log_dir else None

        cls._loggers[LogType.MAIN] = cls._setup_main_logger()
        cls._loggers[LogType.AUTH] = cls._setup_auth_logger()

        cls._initialized = True

    @classmethod
    def get_logger(cls, log_type: LogType = LogType.MAIN) -> logging.Logger:
        """
        Get a logger instance by type.

        Args:
            log_type: The type of logger to retrieve

        Returns:
            The requested logger instance
        """
        if not cls._initialized:
            cls.initialize()
        return cls._loggers.get(log_type, cls._loggers[LogType.MAIN])

    # =============================================================================
    # Helper methods for common logging patterns
    # =============================================================================

    @classmethod
    def log_error_with_trace(cls, message: str, exception: Exception,
                             log_type: LogType = LogType.MAIN):
        """
        Log an error with full traceback in a single call.

        Args:
            message: Error message to log
            exception: The exception that occurred
            log_type: Which logger to use
        """
        logger = cls.get_logger(log_type)
        logger.error(f"{message}: {exception}", exc_info=exception)

    @classmethod
    def log_operation(cls, operation: str, status: str = "started",
                      log_type: LogType = LogType.MAIN):
        """
        Log operation start/completion with consistent formatting.

        Args:
            operation: Name of the operation
            status: Status - "started" or "completed"
            log_type: Which logger to use
        """
        logger = cls.get_logger(log_type)
        emoji = "▶" if status == "started" else "✓"
        logger.info(f"{emoji} {operation.capitalize()} {status}")

    # =============================================================================
    # Private logger setup methods
    # =============================================================================

    @classmethod
    def _setup_main_logger(cls) -> logging.Logger:
        """Configure and return the main application logger."""
        log_level = os.getenv('LOG_LEVEL', 'INFO').upper()

        logger = logging.getLogger(LogType.MAIN.value)
        logger.setLevel(getattr(logging, log_level, logging.INFO))
        logger.handlers = []
        logger.propagate = False

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
        logger.addHandler(console_handler)

        if cls._log_dir is None:
            return logger

        try:
            cls._log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                cls._log_dir / 'youtube_data_backend.log',
                maxBytes=10*1024*1024,  # 10MB
                backupCount=3,
                encoding='utf-8'
            )
            file_handler.setFormatter(
                logging.Formatter('%(asctime)s | %(name)s | %(levelname)s | %(message)s',
                                  datefmt='%Y-%m-%d %H:%M:%S')
            )
            logger.addHandler(file_handler)

            error_handler = RotatingFileHandler(
                cls._log_dir / 'errors.log',
                maxBytes=10*1024*1024,  # 10MB
                backupCount=3,
                encoding='utf-8'
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(
                logging.Formatter('%(asctime)s | %(name)s | %(levelname)s | %(message)s',
                                  datefmt='%Y-%m-%d %H:%M:%S')
            )
            logger.addHandler(error_handler)

        except OSError as e:
            logger.warning(f"Could not create file handlers: {e}")

        return logger

    @classmethod
    def _setup_auth_logger(cls) -> logging.Logger:
        """Configure the authorization logger as a child of the main logger."""
        logger = logging.getLogger(LogType.AUTH.value)
        logger.setLevel(logging.NOTSET)
        logger.handlers = []
        logger.propagate = True
        return logger
