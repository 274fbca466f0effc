#!/usr/bin/env python3
"""Main entry point for DayPlanner."""

import logging
import sys
from pathlib import Path
import uvicorn
from pydantic import ValidationError

# Add src to path
sys.path.insert(0, str(Path(__file__).parent))

from config import Settings

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    """Configure root logging from settings."""
    handlers = [logging.StreamHandler()]
    if settings.log_file:
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file))

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def main():
    """Main entry point."""
    import argparse

    try:
        settings = Settings()
    except ValidationError as e:
        sys.exit(f"Invalid configuration: {e}")

    parser = argparse.ArgumentParser(description="DayPlanner task scheduler")
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"HTTP server host (default: {settings.host})"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"HTTP server port (default: {settings.port})"
    )
    parser.add_argument(
        "--dbfile",
        default=settings.dbfile,
        help=f"SQLite database file (default: {settings.dbfile})"
    )
    parser.add_argument(
        "--web-dir",
        default=settings.web_dir,
        help=f"Directory with the web frontend (default: {settings.web_dir})"
    )

    args = parser.parse_args()

    # Update settings if provided
    settings.host = args.host
    settings.port = args.port
    settings.dbfile = args.dbfile
    settings.web_dir = args.web_dir

    configure_logging(settings)

    from api.http_server import create_app

    try:
        logger.info(f"Starting HTTP server on {settings.host}:{settings.port}")
        uvicorn.run(
            create_app(settings),
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower()
        )
    except KeyboardInterrupt:
        logger.info("Shutting down DayPlanner...")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
