"""
Shared fixtures: client secret and token cache under a temporary directory.
"""
import json
import pytest
from settings import AuthSettings


CLIENT_SECRET = {
    'installed': {
        'client_id': '1234-abc.apps.googleusercontent.com',
        'project_id': 'youtube-data-backend',
        'auth_uri': 'https://accounts.google.com/o/oauth2/auth',
        'token_uri': 'https://oauth2.googleapis.com/token',
        'auth_provider_x509_cert_url': 'https://www.googleapis.com/oauth2/v1/certs',
        'client_secret': 'GOCSPX-secret',
        'redirect_uris': ['http://localhost'],
    }
}

TOKEN = {
    'access_token': 'ya29.a0-access',
    'refresh_token': '1//0g-refresh',
    'token_type': 'Bearer',
    'expires_in': 3599,
    'expires_at': 1760000000.0,
    'scope': ['https://www.googleapis.com/auth/youtube.readonly'],
}


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at an empty credentials directory."""
    return AuthSettings(credentials_dir=tmp_path / 'credentials')


@pytest.fixture
def client_secret_file(settings):
    """Write a valid client secret file."""
    settings.credentials_dir.mkdir(parents=True, exist_ok=True)
    settings.client_secret_path.write_text(json.dumps(CLIENT_SECRET))
    return settings.client_secret_path


@pytest.fixture
def cached_token(settings, client_secret_file):
    """Write a token cache next to the client secret."""
    settings.token_path.write_text(json.dumps(TOKEN))
    return dict(TOKEN)
