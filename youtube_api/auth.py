"""
YouTube API OAuth2 authorization.

This module loads the client secret, keeps the token cache on disk and runs
the interactive authorization-code exchange when no cached token exists.
"""

import json
import os
import stat
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import requests
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from constants import CLIENT_TYPES, REQUIRED_CLIENT_FIELDS, TOKEN_FILE_MODE
from error_handler import (
    ConfigurationError,
    TokenCacheError,
    TokenExchangeError,
    log_and_reraise,
)
from logging_helper import LoggingHelper, LogType
from settings import AuthSettings, load_settings

# Get logger instance
logger = LoggingHelper.get_logger(LogType.AUTH)

Token = Dict[str, Any]


@dataclass(frozen=True)
class ClientSecret:
    """Registered application identity, as downloaded from the Cloud Console."""

    client_type: str
    client_id: str
    client_secret: str
    redirect_uris: Tuple[str, ...]
    auth_uri: str
    token_uri: str
    project_id: Optional[str] = None
    auth_provider_x509_cert_url: Optional[str] = None

    @classmethod
    def from_file(cls, path: Path) -> 'ClientSecret':
        """
        Load a client secret JSON file.

        Args:
            path: Location of the client secret file

        Returns:
            ClientSecret instance

        Raises:
            ConfigurationError: File missing, unreadable, not JSON or incomplete
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            log_and_reraise(e, "Error loading client secret file %s", path, level="debug",
                            as_type=ConfigurationError, log_type=LogType.AUTH)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            log_and_reraise(e, "Client secret file %s is not valid JSON", path, level="debug",
                            as_type=ConfigurationError, log_type=LogType.AUTH)

        return cls.from_dict(data, source=str(path))

    @classmethod
    def from_dict(cls, data: Any, source: str = '<memory>') -> 'ClientSecret':
        """Validate the {"installed": {...}} structure and build a ClientSecret."""
        if not isinstance(data, dict):
            raise ConfigurationError(f"Client secret {source} must be a JSON object")

        client_type = next((key for key in CLIENT_TYPES if key in data), None)
        if client_type is None:
            raise ConfigurationError(
                f"Client secret {source} has no {' or '.join(CLIENT_TYPES)} section"
            )

        info = data[client_type]
        if not isinstance(info, dict):
            raise ConfigurationError(f"Client secret {source}: '{client_type}' must be an object")

        missing = [name for name in REQUIRED_CLIENT_FIELDS if not info.get(name)]
        if missing:
            raise ConfigurationError(
                f"Client secret {source} is missing: {', '.join(missing)}"
            )

        redirect_uris = info['redirect_uris']
        if isinstance(redirect_uris, str) or not isinstance(redirect_uris, list):
            raise ConfigurationError(f"Client secret {source}: redirect_uris must be a list")

        return cls(
            client_type=client_type,
            client_id=info['client_id'],
            client_secret=info['client_secret'],
            redirect_uris=tuple(redirect_uris),
            auth_uri=info['auth_uri'],
            token_uri=info['token_uri'],
            project_id=info.get('project_id'),
            auth_provider_x509_cert_url=info.get('auth_provider_x509_cert_url'),
        )

    @property
    def redirect_uri(self) -> str:
        return self.redirect_uris[0]

    def to_client_config(self) -> Dict[str, Dict[str, Any]]:
        """Return the structure google_auth_oauthlib expects."""
        info = {
            'client_id': self.client_id,
            'client_secret': self.client_secret,
            'redirect_uris': list(self.redirect_uris),
            'auth_uri': self.auth_uri,
            'token_uri': self.token_uri,
        }
        if self.project_id:
            info['project_id'] = self.project_id
        if self.auth_provider_x509_cert_url:
            info['auth_provider_x509_cert_url'] = self.auth_provider_x509_cert_url
        return {self.client_type: info}


@dataclass(frozen=True)
class AuthorizedClient:
    """Client secret plus the token used to authorize outbound API calls."""

    client_secret: ClientSecret
    token: Token = field(hash=False)

    @property
    def scopes(self) -> Optional[list]:
        scope = self.token.get('scope')
        if isinstance(scope, str):
            return scope.split()
        return list(scope) if scope else None

    @property
    def credentials(self) -> Credentials:
        """
        google-auth credentials carrying the cached token.

        The expiry is taken from 'expires_at' when present. It is not checked
        here; a stale token only shows up as a 401 from the API.
        """
        expiry = None
        expires_at = self.token.get('expires_at')
        if expires_at is not None:
            # google-auth compares expiry against naive UTC datetimes
            expiry = datetime.fromtimestamp(float(expires_at), tz=timezone.utc).replace(tzinfo=None)

        return Credentials(
            token=self.token.get('access_token'),
            refresh_token=self.token.get('refresh_token'),
            id_token=self.token.get('id_token'),
            token_uri=self.client_secret.token_uri,
            client_id=self.client_secret.client_id,
            client_secret=self.client_secret.client_secret,
            scopes=self.scopes,
            expiry=expiry,
        )

    def authorization_header(self) -> Dict[str, str]:
        """Header attaching the access token to a raw HTTP request."""
        token_type = self.token.get('token_type') or 'Bearer'
        return {'Authorization': f"{token_type} {self.token.get('access_token')}"}


class TokenStore:
    """Token cache file. Single writer, whole-file overwrites only."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Optional[Token]:
        """
        Read the cached token.

        Returns:
            The token dict, or None when the file is absent or unreadable

        Raises:
            TokenCacheError: The file exists but does not hold a JSON object
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                content = f.read()
        except UnicodeDecodeError as e:
            log_and_reraise(e, "Cached token %s is not UTF-8 text", self.path,
                            as_type=TokenCacheError, log_type=LogType.AUTH)
        except OSError as e:
            logger.info(f"No cached token at {self.path} ({e.__class__.__name__})")
            return None

        try:
            token = json.loads(content)
        except json.JSONDecodeError as e:
            log_and_reraise(e, "Cached token %s is corrupted", self.path,
                            as_type=TokenCacheError, log_type=LogType.AUTH)

        if not isinstance(token, dict):
            raise TokenCacheError(f"Cached token {self.path} must be a JSON object")

        self._tighten_permissions()
        logger.debug(f"Loaded cached token from {self.path}")
        return token

    def save(self, token: Token) -> None:
        """
        Write the token, creating the cache directory when needed.

        Raises:
            TokenCacheError: Directory creation or the write failed
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            log_and_reraise(e, "Could not create token directory %s", self.path.parent,
                            as_type=TokenCacheError, log_type=LogType.AUTH)

        # Write next to the cache and swap it in, so a failed write keeps the old token
        old_umask = os.umask(0o077)
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=self.path.parent,
                                             prefix=f".{self.path.name}.", suffix='.tmp',
                                             delete=False) as f:
                tmp_path = f.name
                json.dump(token, f)
            os.chmod(tmp_path, TOKEN_FILE_MODE)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            log_and_reraise(e, "Could not store token to %s", self.path,
                            as_type=TokenCacheError, log_type=LogType.AUTH)
        finally:
            os.umask(old_umask)

        logger.info(f"Token stored to {self.path}")

    def _tighten_permissions(self) -> None:
        try:
            file_mode = stat.S_IMODE(os.stat(self.path).st_mode)
            if file_mode != TOKEN_FILE_MODE:
                logger.warning(
                    f"Token file has insecure permissions ({oct(file_mode)}), fixing to 600"
                )
                os.chmod(self.path, TOKEN_FILE_MODE)
        except OSError as e:
            # Permission check failure shouldn't block authorization
            logger.warning(f"Failed to check/fix token file permissions: {e}")


class Authorizer:
    """
    Produces an AuthorizedClient, using the cached token when there is one.

    Args:
        settings: Storage locations and scopes
        input_func: Reads one line from the console (default: input)
    """

    AUTH_PROMPT = "Enter the code from that page here: "

    def __init__(self, settings: Optional[AuthSettings] = None,
                 input_func: Callable[[str], str] = input) -> None:
        self.settings = settings or load_settings()
        self.token_store = TokenStore(self.settings.token_path)
        self._input = input_func

    def load_client_secret(self) -> ClientSecret:
        return ClientSecret.from_file(self.settings.client_secret_path)

    def obtain_client(self) -> AuthorizedClient:
        """
        Return an authorized client.

        A cached token is used as-is. Without one, the user is asked to
        authorize in the browser and paste the code back.

        Raises:
            ConfigurationError: Client secret missing or invalid
            TokenCacheError: Cached token unparseable or not writable
            TokenExchangeError: Code exchange failed
        """
        client_secret = self.load_client_secret()

        token = self.token_store.load()
        if token is not None:
            logger.debug("Using cached YouTube API token")
            return AuthorizedClient(client_secret, token)

        logger.info("No cached token found, starting OAuth2 authorization")
        token = self.request_new_token(client_secret)
        self.token_store.save(token)
        return AuthorizedClient(client_secret, token)

    def request_new_token(self, client_secret: ClientSecret) -> Token:
        """
        Run the interactive authorization-code exchange.

        Prints one authorization URL, reads one line holding the code and
        exchanges it at the token endpoint. Offline access is requested so
        the endpoint also returns a refresh token.

        Raises:
            TokenExchangeError: No code entered or the exchange failed
        """
        flow = InstalledAppFlow.from_client_config(
            client_secret.to_client_config(),
            scopes=list(self.settings.scopes),
            redirect_uri=client_secret.redirect_uri,
        )
        auth_url, _ = flow.authorization_url(access_type='offline')

        print(f"Authorize this app by visiting this url: {auth_url}")
        code = self._input(self.AUTH_PROMPT).strip()
        if not code:
            raise TokenExchangeError("No authorization code entered")

        try:
            token = flow.fetch_token(code=code)
        except (OAuth2Error, requests.RequestException, ValueError, Warning) as e:
            # Warning: oauthlib raises it when the granted scope differs
            log_and_reraise(e, "Error while trying to retrieve access token",
                            as_type=TokenExchangeError, log_type=LogType.AUTH)

        logger.info("Received new YouTube API token")
        return dict(token)


def authenticate(settings: Optional[AuthSettings] = None) -> AuthorizedClient:
    """Obtain an authorized client in the foreground."""
    return Authorizer(settings).obtain_client()
