"""
Storage locations and scopes for the authorization flow.

Values come from the environment (optionally a .env file) and fall back to
the defaults in constants.py. Tests build AuthSettings directly.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple
from dotenv import load_dotenv
from constants import (
    DEFAULT_CLIENT_SECRET_FILE,
    DEFAULT_CREDENTIALS_DIR,
    DEFAULT_SCOPES,
    DEFAULT_TOKEN_FILE,
)
from error_handler import ConfigurationError, validate_environment_variable


def _is_plain_filename(value: str) -> bool:
    return bool(value) and Path(value).name == value


@dataclass(frozen=True)
class AuthSettings:
    """Where the client secret and the token cache live."""

    credentials_dir: Path = Path(DEFAULT_CREDENTIALS_DIR)
    client_secret_file: str = DEFAULT_CLIENT_SECRET_FILE
    token_file: str = DEFAULT_TOKEN_FILE
    scopes: Tuple[str, ...] = field(default=DEFAULT_SCOPES)

    def __post_init__(self):
        if not self.scopes:
            raise ConfigurationError("At least one OAuth scope is required")
        # Accept str paths and lists from callers
        object.__setattr__(self, 'credentials_dir', Path(self.credentials_dir))
        object.__setattr__(self, 'scopes', tuple(self.scopes))

    @property
    def client_secret_path(self) -> Path:
        return self.credentials_dir / self.client_secret_file

    @property
    def token_path(self) -> Path:
        return self.credentials_dir / self.token_file


def load_settings(env_file: str = None) -> AuthSettings:
    """
    Build AuthSettings from environment variables.

    Args:
        env_file: Optional .env file to load first (default: search for .env)

    Returns:
        AuthSettings instance
    """
    load_dotenv(env_file)

    return AuthSettings(
        credentials_dir=validate_environment_variable(
            'YTDB_CREDENTIALS_DIR',
            default=Path(DEFAULT_CREDENTIALS_DIR),
            converter=Path,
        ),
        client_secret_file=validate_environment_variable(
            'YTDB_CLIENT_SECRET_FILE',
            default=DEFAULT_CLIENT_SECRET_FILE,
            validator=_is_plain_filename,
        ),
        token_file=validate_environment_variable(
            'YTDB_TOKEN_FILE',
            default=DEFAULT_TOKEN_FILE,
            validator=_is_plain_filename,
        ),
    )
