"""
YouTube Data API v3 binding.
"""

from typing import Any, Optional

from googleapiclient.discovery import build

from constants import API_SERVICE_NAME, API_VERSION
from logging_helper import LoggingHelper, LogType
from .auth import AuthorizedClient
from .backend import YouTubeDataBackend

# Get logger instance
logger = LoggingHelper.get_logger(LogType.MAIN)


class YouTubeV3(YouTubeDataBackend):
    """Builds the googleapiclient YouTube v3 service once authorized."""

    def __init__(self, *args, **kwargs) -> None:
        self.service: Optional[Any] = None
        super().__init__(*args, **kwargs)

    def on_ready(self, client: AuthorizedClient) -> None:
        self.service = build(
            API_SERVICE_NAME,
            API_VERSION,
            credentials=client.credentials,
            cache_discovery=False,
        )
        logger.info("YouTube Data API v3 service ready")

    def is_ready(self) -> bool:
        return self.service is not None
