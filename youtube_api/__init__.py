"""
YouTube API module - authorized access to the YouTube Data API v3.

The module is organized into focused submodules:
- auth: client secret, token cache and the OAuth2 authorization-code exchange
- backend: background authorization and the one-shot readiness signal
- v3: the YouTube Data API v3 service binding
"""

from typing import Dict, Type

from error_handler import ConfigurationError
from .auth import (
    AuthorizedClient,
    Authorizer,
    ClientSecret,
    TokenStore,
    authenticate,
)
from .backend import ReadySignal, YouTubeDataBackend
from .v3 import YouTubeV3

# Concrete API bindings, selected by name
BACKENDS: Dict[str, Type[YouTubeDataBackend]] = {
    'youtube_v3': YouTubeV3,
}


def create_backend(kind: str = 'youtube_v3', **kwargs) -> YouTubeDataBackend:
    """
    Construct a registered backend.

    Args:
        kind: Key in BACKENDS
        **kwargs: Passed to the backend constructor

    Raises:
        ConfigurationError: Unknown backend name
    """
    try:
        backend_cls = BACKENDS[kind]
    except KeyError:
        raise ConfigurationError(
            f"Unknown backend '{kind}' (available: {', '.join(sorted(BACKENDS))})"
        ) from None
    return backend_cls(**kwargs)


__all__ = [
    'AuthorizedClient',
    'Authorizer',
    'BACKENDS',
    'ClientSecret',
    'ReadySignal',
    'TokenStore',
    'YouTubeDataBackend',
    'YouTubeV3',
    'authenticate',
    'create_backend',
]
