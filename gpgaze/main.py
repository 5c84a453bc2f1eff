"""
gpgaze - Real-time gaze estimation server

Exposes a GazeTracker over Socket.IO. Eye images arrive from the
eye-extraction client as nested lists; gaze points are emitted back for the
client to draw.

Usage:
    python -m gpgaze.main
"""

import logging
import sys
from typing import Optional

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from gpgaze import __version__
from gpgaze.config import Config, config
from gpgaze.models import GazeTracker
from gpgaze.routes import register_handlers

logger = logging.getLogger(__name__)


def configure_logging(settings: Config) -> None:
    """Configure root logging for the server process."""
    logging.basicConfig(
        level=logging.DEBUG if settings.server.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def create_app(settings: Optional[Config] = None) -> Flask:
    """
    Application factory for creating the Flask app.

    Returns:
        Configured Flask application instance
    """
    settings = settings or config
    app = Flask(__name__)

    # Enable CORS if configured
    if settings.server.cors_enabled:
        CORS(app)
        logger.info("CORS enabled")

    @app.route("/health")
    def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    logger.info("Flask app created")
    return app


def create_socketio(app: Flask, settings: Optional[Config] = None) -> SocketIO:
    """
    Create and configure SocketIO instance.

    Args:
        app: Flask application instance

    Returns:
        Configured SocketIO instance
    """
    settings = settings or config
    socketio = SocketIO(
        app,
        cors_allowed_origins="*" if settings.server.cors_enabled else None,
        async_mode="threading",
        logger=settings.server.debug,
        engineio_logger=settings.server.debug,
    )

    logger.info("SocketIO configured")
    return socketio


def create_server(settings: Optional[Config] = None):
    """
    Build the app, its Socket.IO server and the tracker behind them.

    Returns:
        Tuple of (app, socketio, tracker)
    """
    settings = settings or config
    app = create_app(settings)
    socketio = create_socketio(app, settings)

    tracker = GazeTracker(settings)
    register_handlers(socketio, tracker)
    return app, socketio, tracker


def main():
    """Run the application."""
    configure_logging(config)
    app, socketio, _ = create_server(config)

    logger.info(
        "Starting gpgaze server on %s:%d (debug=%s)",
        config.server.host,
        config.server.port,
        config.server.debug,
    )
    socketio.run(
        app,
        host=config.server.host,
        port=config.server.port,
        debug=config.server.debug,
        allow_unsafe_werkzeug=config.server.debug,
    )


if __name__ == "__main__":
    main()
