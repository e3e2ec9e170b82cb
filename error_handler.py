"""
Standardized error handling utilities for the authorization flow.
"""

import os
from typing import Optional, Any, Callable
from logging_helper import LoggingHelper, LogType

# Get logger instance
logger = LoggingHelper.get_logger(LogType.MAIN)


class YouTubeBackendError(Exception):
    """Base exception for all YouTube data backend errors."""
    pass


class ConfigurationError(YouTubeBackendError):
    """Client secret file or settings are missing or invalid."""
    pass


class TokenExchangeError(YouTubeBackendError):
    """
    Raised when the authorization code could not be exchanged for a token.

    Handling: terminal for this run, the user has to authorize again.
    """
    pass


class TokenCacheError(YouTubeBackendError):
    """
    Raised when the token cache is unparseable or cannot be written.

    A missing cache file is not an error, it triggers authorization.
    """
    pass


def log_and_reraise(
    exc: Exception,
    message: str,
    *args,
    level: str = "error",
    as_type: Optional[type] = None,
    log_type: LogType = LogType.MAIN
) -> None:
    """
    Log an exception with context and re-raise it.

    Args:
        exc: The exception to log
        message: Log message with format placeholders
        *args: Arguments for message formatting
        level: Log level (error, warning, critical)
        as_type: Optional exception type to raise instead
        log_type: Which logger to use

    Raises:
        The original exception or as_type if specified
    """
    log = LoggingHelper.get_logger(log_type)
    log_func = getattr(log, level, log.error)
    formatted = message % args if args else message
    log_func(f"{formatted}: {exc}")
    log.debug("Exception details", exc_info=exc)

    if as_type:
        raise as_type(f"{formatted}: {exc}") from exc
    raise exc


def validate_environment_variable(
    var_name: str,
    default: Any,
    validator: Optional[Callable[[Any], bool]] = None,
    converter: Optional[Callable[[str], Any]] = None
) -> Any:
    """
    Safely get and validate an environment variable.

    Args:
        var_name: Name of the environment variable
        default: Default value if not set or invalid
        validator: Optional validation function
        converter: Optional conversion function (e.g., int, Path)

    Returns:
        The validated and converted environment variable value
    """
    raw_value = os.getenv(var_name)

    if raw_value is None:
        logger.debug(f"Environment variable {var_name} not set, using default: {default}")
        return default

    if converter:
        try:
            value = converter(raw_value)
        except (ValueError, TypeError) as exc:
            logger.warning(
                f"Invalid {var_name}='{raw_value}': {exc}. Using default: {default}"
            )
            return default
    else:
        value = raw_value

    if validator and not validator(value):
        logger.warning(
            f"Invalid {var_name}='{value}' failed validation. Using default: {default}"
        )
        return default

    logger.debug(f"Using {var_name}={value}")
    return value
