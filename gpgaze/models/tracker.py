"""
Gaze Tracker - per-frame state management for eye tracking.

This module drives the GazeEstimator from collaborator input:
- Turning a newly confirmed calibration target into an exemplar and retraining
- Recording the eye images of usable frames while a target is displayed
- Updating the gaze estimate once per processed frame
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

import numpy as np

from gpgaze.config import Config, config as default_config
from gpgaze.models.errors import DegenerateModelError
from gpgaze.models.gaze_estimator import GazeEstimator, GazePoint, RetrainStrategy

logger = logging.getLogger(__name__)


class TrackerState(Enum):
    """Current state of the eye tracker."""
    IDLE = auto()
    CALIBRATING = auto()
    TRACKING = auto()


@dataclass
class EyeFrame:
    """Eye-extractor output for a single video frame."""
    right_eye: np.ndarray
    left_eye: np.ndarray
    is_blinking: bool = False

    # Running average of the eye crops, used as exemplar images
    right_average: Optional[np.ndarray] = None
    left_average: Optional[np.ndarray] = None

    tracking_successful: bool = True


@dataclass
class CalibrationStatus:
    """Calibration-sequence state for the current frame."""
    is_active: bool = False
    needs_recalibration: bool = False
    active_point: Optional[Tuple[float, float]] = None

    # Frames the active point has been shown for
    point_frame_no: int = 0


class GazeTracker:
    """
    Manages an eye tracking session on top of a GazeEstimator.

    Handles:
    - State transitions (idle → calibrating → tracking)
    - Exemplar capture and retraining when a target is confirmed
    - Per-frame sample capture during calibration
    - Real-time estimation

    Example:
        tracker = GazeTracker()

        for frame, status in frames:
            gaze_point = tracker.process(frame, status)
    """

    def __init__(
        self,
        settings: Optional[Config] = None,
        strategy: Optional[RetrainStrategy] = None,
    ):
        """Initialize the gaze tracker."""
        settings = settings or default_config
        self._estimator = GazeEstimator(settings, strategy)
        self._frame_sample_start = settings.calibration.frame_sample_start
        self._state = TrackerState.IDLE

        logger.info("GazeTracker initialized")

    @property
    def state(self) -> TrackerState:
        """Current tracker state."""
        return self._state

    @property
    def estimator(self) -> GazeEstimator:
        return self._estimator

    @property
    def is_calibrated(self) -> bool:
        """Whether the estimator has trained models."""
        return self._estimator.is_active

    @property
    def exemplar_count(self) -> int:
        """Number of calibration exemplars collected."""
        return self._estimator.exemplar_count

    @property
    def frame_sample_count(self) -> int:
        """Number of per-frame calibration samples collected."""
        return self._estimator.store.frame_sample_count

    @property
    def gaze_point(self) -> GazePoint:
        return self._estimator.gaze_point

    def add_target(self, right_average, left_average, target: Tuple[float, float]) -> bool:
        """
        Learn a newly confirmed calibration target.

        Args:
            right_average: Averaged right eye image for the target
            left_average: Averaged left eye image for the target
            target: (x, y) screen coordinates of the target

        Returns:
            True if the models were retrained, False if retraining failed
            and the previous models were kept
        """
        self._state = TrackerState.CALIBRATING
        self._estimator.add_exemplar(right_average, left_average, target)
        try:
            self._estimator.retrain()
        except DegenerateModelError as e:
            logger.error("Retraining failed after %d exemplars: %s",
                         self._estimator.exemplar_count, e)
            return False

        logger.info("Calibration target (%.1f, %.1f) learned, %d exemplars",
                    target[0], target[1], self._estimator.exemplar_count)
        return True

    def process(self, frame: EyeFrame, calibration: Optional[CalibrationStatus] = None) -> GazePoint:
        """
        Process one video frame.

        Args:
            frame: Eye images and blink flag for the frame
            calibration: Calibration-sequence state; None outside calibration

        Returns:
            The current gaze point
        """
        if not frame.tracking_successful:
            return self._estimator.gaze_point

        calibration = calibration or CalibrationStatus()

        if calibration.needs_recalibration:
            if frame.right_average is None or frame.left_average is None \
                    or calibration.active_point is None:
                logger.warning("Recalibration requested without average eye images or target")
            else:
                self.add_target(frame.right_average, frame.left_average, calibration.active_point)

        if (calibration.is_active
                and calibration.active_point is not None
                and calibration.point_frame_no >= self._frame_sample_start
                and not frame.is_blinking):
            try:
                self._estimator.add_frame_sample(
                    frame.right_eye, frame.left_eye, calibration.active_point
                )
            except ValueError as e:
                logger.warning("Skipping calibration frame sample: %s", e)

        if not calibration.is_active and self._estimator.is_active:
            self._state = TrackerState.TRACKING

        return self._estimator.estimate(frame.right_eye, frame.left_eye, frame.is_blinking)

    def track(self, right_eye, left_eye, is_blinking: bool = False) -> GazePoint:
        """Estimate gaze outside of calibration."""
        if self._estimator.is_active:
            self._state = TrackerState.TRACKING
        return self._estimator.estimate(right_eye, left_eye, is_blinking)

    def reset(self) -> None:
        """Reset tracker to initial state."""
        self._estimator.clear(reset_point=True)
        self._state = TrackerState.IDLE
        logger.info("GazeTracker reset")
