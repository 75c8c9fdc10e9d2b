"""Main application module for the publication gateway."""
from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from api_routes import register_routes
from publications.client import PublicationClient
from publications.settings import PublicationSettings, load_settings

DEFAULT_PORT = 5000
DEFAULT_HOST = "127.0.0.1"

logger = logging.getLogger("publications.gateway")


def configure_logging(settings: PublicationSettings) -> None:
    handlers = [logging.StreamHandler()]
    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file))
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def create_app(
    settings: Optional[PublicationSettings] = None,
    client: Optional[PublicationClient] = None,
) -> Flask:
    """Build the gateway app; routes answer 500 until ``API_SERVER`` is set."""
    settings = settings or load_settings()
    if client is None and settings.api_base:
        client = PublicationClient.from_settings(settings)
    if client is None:
        logger.warning("API_SERVER is not configured; /api/videos routes will fail")

    app = Flask(__name__)
    app.config["PUBLICATION_SETTINGS"] = settings
    register_routes(app, client)
    return app


def main() -> None:  # pragma: no cover
    load_dotenv(os.getenv("PUBLICATIONS_DOTENV", ".env"))
    settings = load_settings()
    configure_logging(settings)
    app = create_app(settings)
    port = int(os.getenv("PORT", DEFAULT_PORT))
    host = os.getenv("HOST", DEFAULT_HOST)
    logger.info("Starting publication gateway on %s:%s", host, port)
    app.run(host=host, port=port, debug=False)


if __name__ == "__main__":  # pragma: no cover
    main()
