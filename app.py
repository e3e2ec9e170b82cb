#!/usr/bin/env python3
"""
Authorize against the YouTube Data API and report when the client is ready.

Usage:
    python app.py                   # authorize (cached or interactive), build the v3 service
    python app.py --authorize-only  # only make sure a token is cached
"""

import sys
from typing import List, Optional

from error_handler import YouTubeBackendError
from logging_helper import LoggingHelper, LogType
from settings import load_settings
from youtube_api import authenticate, create_backend

# Get logger instance
logger = LoggingHelper.get_logger(LogType.MAIN)


def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description='Authorize access to the YouTube Data API')
    parser.add_argument('--authorize-only', action='store_true',
                        help='Cache a token and exit without building the API service')
    parser.add_argument('--env-file', type=str, help='Load settings from this .env file')
    parser.add_argument('--backend', type=str, default='youtube_v3',
                        help='API binding to build (default: youtube_v3)')
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.env_file)

        if args.authorize_only:
            authenticate(settings)
            print(f"Token cached at {settings.token_path}")
            return 0

        backend = create_backend(args.backend, settings=settings)
        if not backend.wait_until_ready():
            logger.error(f"{backend.__class__.__name__} stopped before becoming ready")
            return 1
    except YouTubeBackendError as e:
        logger.error(f"Failed: {e}")
        return 1

    logger.info(f"{backend.__class__.__name__} ready, token cached at {settings.token_path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
