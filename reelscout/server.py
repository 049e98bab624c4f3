"""Command-line entry point: run the API under uvicorn."""

import logging

import uvicorn
from dotenv import load_dotenv

from reelscout.core.config import get_settings


def main():
    load_dotenv()
    settings = get_settings()

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = uvicorn.Config(
        "reelscout.main:app",
        host=settings.host,
        port=settings.port,
        timeout_graceful_shutdown=settings.shutdown_timeout,
        log_config=None,
    )
    # uvicorn handles SIGINT/SIGTERM and drains in-flight requests
    uvicorn.Server(config).run()


if __name__ == "__main__":
    main()
