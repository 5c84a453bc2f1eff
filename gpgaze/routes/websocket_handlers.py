"""
WebSocket event handlers for real-time gaze estimation.

This module handles all Socket.IO events for:
- Calibration exemplar capture and retraining
- Real-time gaze estimation
- Calibration reset
"""

import json
import logging
from typing import TYPE_CHECKING

import numpy as np
from flask_socketio import emit

from gpgaze.models.errors import DimensionMismatchError

if TYPE_CHECKING:
    from flask_socketio import SocketIO
    from gpgaze.models import GazeTracker

logger = logging.getLogger(__name__)


def _eye_image(payload: dict, key: str) -> np.ndarray:
    """Decode a nested-list eye image from an event payload."""
    return np.asarray(payload[key], dtype=np.float64)


def register_handlers(socketio: "SocketIO", tracker: "GazeTracker") -> None:
    """
    Register all WebSocket event handlers.

    Args:
        socketio: Flask-SocketIO instance
        tracker: GazeTracker instance owning the estimator
    """

    @socketio.on("calibrationExemplar")
    def handle_calibration_exemplar(data: str) -> None:
        """
        Handle a confirmed calibration target.

        Expected data format (JSON string):
        {
            "screenX": float,
            "screenY": float,
            "rightEye": [[float, ...], ...],
            "leftEye": [[float, ...], ...]
        }

        Emits:
            modelTrained: {"exemplars": int} after a successful retrain
            calibrationError: {"error": str} if retraining failed
        """
        try:
            payload = json.loads(data)
            target = (float(payload["screenX"]), float(payload["screenY"]))
            right_eye = _eye_image(payload, "rightEye")
            left_eye = _eye_image(payload, "leftEye")
        except json.JSONDecodeError as e:
            logger.error("Invalid calibration exemplar JSON: %s", e)
            return
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Malformed calibration exemplar: %s", e)
            return

        try:
            success = tracker.add_target(right_eye, left_eye, target)
        except ValueError as e:
            logger.error("Rejected calibration exemplar: %s", e)
            emit("calibrationError", {"error": str(e)})
            return

        if success:
            emit("modelTrained", {"exemplars": tracker.exemplar_count})
        else:
            emit("calibrationError", {"error": "Calibration exemplars are degenerate"})

    @socketio.on("realTimeData")
    def handle_real_time_data(data: str) -> None:
        """
        Handle real-time eye images and emit the gaze estimate.

        Expected data format (JSON string):
        {
            "rightEye": [[float, ...], ...],
            "leftEye": [[float, ...], ...],
            "blink": int (0 or 1)
        }

        Emits:
            data_response: JSON string {"x": float, "y": float, "isBlinking": bool}
        """
        # Skip if model not ready
        if not tracker.is_calibrated:
            return

        try:
            payload = json.loads(data)
            right_eye = _eye_image(payload, "rightEye")
            left_eye = _eye_image(payload, "leftEye")
            is_blinking = bool(int(payload.get("blink", 0)))
        except json.JSONDecodeError as e:
            logger.error("Invalid real-time data JSON: %s", e)
            return
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Malformed real-time data: %s", e)
            return

        try:
            gaze_point = tracker.track(right_eye, left_eye, is_blinking)
        except DimensionMismatchError as e:
            logger.error("Eye image size does not match calibration: %s", e)
            return

        emit("data_response", json.dumps(gaze_point.to_dict()))

    @socketio.on("connect")
    def handle_connect() -> None:
        """Handle client connection."""
        logger.info("Client connected")

    @socketio.on("disconnect")
    def handle_disconnect() -> None:
        """Handle client disconnection."""
        logger.info("Client disconnected")

    @socketio.on("reset")
    def handle_reset() -> None:
        """Handle calibration reset request."""
        tracker.reset()
        emit("resetComplete")
        logger.info("Tracker reset by client request")

    logger.info("WebSocket handlers registered")
