"""Socket.IO routes for the gaze tracker."""

from gpgaze.routes.websocket_handlers import register_handlers

__all__ = ["register_handlers"]
