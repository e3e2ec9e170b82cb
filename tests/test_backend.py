"""
Tests for background authorization, the readiness signal and the v3 binding.
"""
from unittest.mock import Mock, patch

import pytest

from error_handler import ConfigurationError, TokenExchangeError
from youtube_api import BACKENDS, YouTubeV3, create_backend
from youtube_api.auth import AuthorizedClient, Authorizer, ClientSecret
from youtube_api.backend import ReadySignal, YouTubeDataBackend
from tests.conftest import CLIENT_SECRET, TOKEN


class RecordingBackend(YouTubeDataBackend):
    """Backend that records on_ready calls."""

    def __init__(self, *args, **kwargs):
        self.ready_calls = []
        super().__init__(*args, **kwargs)

    def on_ready(self, client):
        self.ready_calls.append(client)


@pytest.fixture
def client():
    return AuthorizedClient(ClientSecret.from_dict(CLIENT_SECRET), dict(TOKEN))


@pytest.fixture
def authorizer(client):
    mock = Mock(spec=Authorizer)
    mock.obtain_client.return_value = client
    return mock


# =============================================================================
# ReadySignal
# =============================================================================

def test_ready_signal_fires_once(client):
    """Test that a second fire() is ignored."""
    signal = ReadySignal()
    callback = Mock()
    signal.subscribe(callback)

    assert signal.fire(client) is True
    assert signal.fire(client) is False
    callback.assert_called_once_with(client)


def test_ready_signal_late_subscriber_called_immediately(client):
    """Test that subscribing after firing delivers the payload right away."""
    signal = ReadySignal()
    signal.fire(client)
    callback = Mock()
    signal.subscribe(callback)
    callback.assert_called_once_with(client)


def test_ready_signal_failing_callback_does_not_block_others(client):
    """Test that one broken subscriber doesn't stop the rest."""
    signal = ReadySignal()
    good = Mock()
    signal.subscribe(Mock(side_effect=RuntimeError('boom')))
    signal.subscribe(good)

    signal.fire(client)
    good.assert_called_once_with(client)
    assert signal.is_set()


def test_ready_signal_wait_times_out():
    """Test that waiting on an unfired signal returns False."""
    assert ReadySignal().wait(timeout=0.01) is False


# =============================================================================
# YouTubeDataBackend
# =============================================================================

def test_backend_becomes_ready(authorizer, client):
    """Test that authorization completes and on_ready runs exactly once."""
    callback = Mock()
    backend = RecordingBackend(authorizer=authorizer, autostart=False)
    backend.subscribe(callback)
    backend.start()

    assert backend.wait_until_ready(timeout=5) is True
    assert backend.is_ready()
    assert backend.client is client
    assert backend.ready_calls == [client]
    callback.assert_called_once_with(client)
    authorizer.obtain_client.assert_called_once()


def test_backend_autostart(authorizer):
    """Test that construction starts authorization by default."""
    backend = RecordingBackend(authorizer=authorizer)
    assert backend.wait_until_ready(timeout=5) is True


def test_backend_not_started_without_autostart(authorizer):
    """Test that autostart=False defers authorization."""
    backend = RecordingBackend(authorizer=authorizer, autostart=False)
    assert backend.wait_until_ready(timeout=0.05) is False
    authorizer.obtain_client.assert_not_called()
    assert not backend.is_ready()


def test_backend_start_twice_is_ignored(authorizer):
    """Test that a second start() does not authorize again."""
    backend = RecordingBackend(authorizer=authorizer)
    backend.start()
    backend.wait_until_ready(timeout=5)
    authorizer.obtain_client.assert_called_once()


def test_backend_configuration_error_never_fires(authorizer):
    """Test that a missing config leaves the backend not ready and keeps the error."""
    authorizer.obtain_client.side_effect = ConfigurationError('client_secret.json not found')
    callback = Mock()
    backend = RecordingBackend(authorizer=authorizer, autostart=False)
    backend.subscribe(callback)
    backend.start()

    with pytest.raises(ConfigurationError):
        backend.wait_until_ready(timeout=5)

    assert isinstance(backend.error, ConfigurationError)
    assert not backend.is_ready()
    assert backend.ready_calls == []
    callback.assert_not_called()


def test_backend_exchange_failure_is_surfaced(authorizer):
    """Test that a failed exchange reaches the waiting caller instead of hanging."""
    authorizer.obtain_client.side_effect = TokenExchangeError('invalid_grant')
    backend = RecordingBackend(authorizer=authorizer)

    with pytest.raises(TokenExchangeError):
        backend.wait_until_ready(timeout=5)


def test_backend_binding_failure(authorizer):
    """Test that an exception in on_ready is recorded and readiness never fires."""

    class BrokenBackend(YouTubeDataBackend):
        def on_ready(self, client):
            raise RuntimeError('discovery failed')

    callback = Mock()
    backend = BrokenBackend(authorizer=authorizer, autostart=False)
    backend.subscribe(callback)
    backend.start()

    with pytest.raises(Exception, match='discovery failed'):
        backend.wait_until_ready(timeout=5)
    assert not backend.is_ready()
    callback.assert_not_called()


def test_client_available_inside_on_ready(authorizer, client):
    """Test that on_ready can read self.client while readiness is still pending."""
    seen = []

    class InspectingBackend(YouTubeDataBackend):
        def on_ready(self, ready_client):
            seen.append((self.client, self.is_ready()))

    backend = InspectingBackend(authorizer=authorizer)
    assert backend.wait_until_ready(timeout=5) is True
    assert seen == [(client, False)]
    assert backend.is_ready()


def test_backend_end_to_end_with_cached_token(settings, cached_token):
    """Test a real Authorizer reading the cache from disk."""
    backend = RecordingBackend(settings=settings)
    assert backend.wait_until_ready(timeout=5) is True
    assert backend.client.token == cached_token


def test_backend_end_to_end_missing_config(settings):
    """Test that a missing client secret surfaces as ConfigurationError."""
    backend = RecordingBackend(settings=settings, authorizer=Authorizer(settings, input_func=Mock()))
    with pytest.raises(ConfigurationError):
        backend.wait_until_ready(timeout=5)


# =============================================================================
# YouTubeV3 and the backend registry
# =============================================================================

def test_youtube_v3_builds_service(authorizer, client):
    """Test that the v3 binding is built with the client's credentials."""
    with patch('youtube_api.v3.build') as build:
        build.return_value = Mock(name='youtube')
        backend = YouTubeV3(authorizer=authorizer)
        assert backend.wait_until_ready(timeout=5) is True

    assert backend.service is build.return_value
    assert backend.is_ready()
    args, kwargs = build.call_args
    assert args == ('youtube', 'v3')
    assert kwargs['credentials'].token == client.token['access_token']


def test_youtube_v3_not_ready_before_binding(authorizer):
    """Test that is_ready tracks the service, not just the client."""
    backend = YouTubeV3(authorizer=authorizer, autostart=False)
    assert backend.service is None
    assert not backend.is_ready()


def test_create_backend(authorizer):
    """Test that registered backends are created by name."""
    with patch('youtube_api.v3.build'):
        backend = create_backend('youtube_v3', authorizer=authorizer)
        backend.wait_until_ready(timeout=5)
    assert isinstance(backend, YouTubeV3)
    assert set(BACKENDS) == {'youtube_v3'}


def test_create_backend_unknown():
    """Test that an unknown backend name is a configuration error."""
    with pytest.raises(ConfigurationError, match='youtube_v3'):
        create_backend('youtube_v2')
