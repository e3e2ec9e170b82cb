"""
Service adapter base: authorizes in the background and signals readiness once.
"""

import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from error_handler import YouTubeBackendError
from logging_helper import LoggingHelper, LogType
from settings import AuthSettings
from .auth import Authorizer, AuthorizedClient

# Get logger instance
logger = LoggingHelper.get_logger(LogType.MAIN)

ReadyCallback = Callable[[AuthorizedClient], None]


class ReadySignal:
    """
    One-shot "ready" notification carrying an AuthorizedClient.

    fire() only has an effect the first time. Callbacks subscribed after
    firing run immediately on the subscriber's thread.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[ReadyCallback] = []
        self._payload: Optional[AuthorizedClient] = None

    def subscribe(self, callback: ReadyCallback) -> None:
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback(self._payload)

    def fire(self, payload: AuthorizedClient) -> bool:
        """Deliver payload to every subscriber. Returns False if already fired."""
        with self._lock:
            if self._event.is_set():
                return False
            self._payload = payload
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            try:
                callback(payload)
            except Exception as e:
                LoggingHelper.log_error_with_trace("Ready callback failed", e)
        return True

    def is_set(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._event.wait(timeout)


class YouTubeDataBackend(ABC):
    """
    Base capability for an API binding that needs an authorized client.

    Construction starts authorization on a daemon thread. When a client is
    available, on_ready() builds the binding and subscribers are notified.
    On failure the error is logged and kept in `error`; readiness never fires.

    Args:
        settings: Storage locations and scopes (default: from environment)
        authorizer: Authorizer to use (default: built from settings)
        autostart: Start authorizing immediately (default: True)
    """

    def __init__(self, settings: Optional[AuthSettings] = None,
                 authorizer: Optional[Authorizer] = None,
                 autostart: bool = True) -> None:
        self.authorizer = authorizer or Authorizer(settings)
        self.client: Optional[AuthorizedClient] = None
        self.error: Optional[YouTubeBackendError] = None
        self._bound = False
        self._ready = ReadySignal()
        self._done = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._start_lock = threading.Lock()

        if autostart:
            self.start()

    def start(self) -> None:
        """Start the background authorization thread (once)."""
        with self._start_lock:
            if self._thread is not None:
                logger.warning(f"{self.__class__.__name__} authorization already started")
                return
            self._thread = threading.Thread(
                target=self._authorize,
                name=f"{self.__class__.__name__}-auth",
                daemon=True,
            )
            self._thread.start()

    def subscribe(self, callback: ReadyCallback) -> None:
        """Register for the one-time "ready" notification."""
        self._ready.subscribe(callback)

    @abstractmethod
    def on_ready(self, client: AuthorizedClient) -> None:
        """Build the concrete API binding. Called exactly once."""

    def is_ready(self) -> bool:
        return self._bound

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Block until authorization finishes.

        Returns:
            True when ready, False if the timeout expired first

        Raises:
            YouTubeBackendError: The error that stopped authorization
        """
        if not self._done.wait(timeout):
            return False
        if self.error is not None:
            raise self.error
        return self.is_ready()

    def _authorize(self) -> None:
        LoggingHelper.log_operation(f"{self.__class__.__name__} authorization")
        try:
            self._run_authorization()
        finally:
            self._done.set()

    def _run_authorization(self) -> None:
        try:
            client = self.authorizer.obtain_client()
        except YouTubeBackendError as e:
            self.error = e
            LoggingHelper.log_error_with_trace("YouTube authorization failed", e)
            return

        self.client = client
        try:
            self.on_ready(client)
        except Exception as e:
            # Binding failed: keep the error, readiness never fires
            self.error = YouTubeBackendError(f"Could not build API binding: {e}")
            self.error.__cause__ = e
            LoggingHelper.log_error_with_trace("Could not build API binding", e)
            return

        self._bound = True
        self._ready.fire(client)
        LoggingHelper.log_operation(f"{self.__class__.__name__} authorization", "completed")
