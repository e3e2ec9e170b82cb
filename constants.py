"""
Common constants used across the YouTube data backend.
"""

# Read-only access to the YouTube Data API
YOUTUBE_READONLY_SCOPE = 'https://www.googleapis.com/auth/youtube.readonly'
DEFAULT_SCOPES = (YOUTUBE_READONLY_SCOPE,)

API_SERVICE_NAME = 'youtube'
API_VERSION = 'v3'

# Credential storage defaults (all overridable, see settings.py)
DEFAULT_CREDENTIALS_DIR = './.credentials/'
DEFAULT_CLIENT_SECRET_FILE = 'client_secret.json'
DEFAULT_TOKEN_FILE = 'youtube-credentials.json'  # nosec B105 - filename, not password

# Top-level keys Google uses in downloaded client secret files
CLIENT_TYPES = ('installed', 'web')
REQUIRED_CLIENT_FIELDS = ('client_id', 'client_secret', 'auth_uri', 'token_uri', 'redirect_uris')

# Owner-only read/write for the cached token
TOKEN_FILE_MODE = 0o600
