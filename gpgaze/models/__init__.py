"""Models package for gaze estimation."""

from gpgaze.models.calibration_store import CalibrationExemplar, CalibrationStore, FrameSample
from gpgaze.models.errors import DegenerateModelError, DimensionMismatchError, GazeError
from gpgaze.models.gaussian_process import ImageGaussianProcess
from gpgaze.models.gaze_estimator import (
    EyeModels,
    FullRebuildStrategy,
    GazeEstimator,
    GazePoint,
    RetrainStrategy,
)
from gpgaze.models.kernel import SquaredExponentialKernel, image_distance
from gpgaze.models.tracker import CalibrationStatus, EyeFrame, GazeTracker, TrackerState

__all__ = [
    "CalibrationExemplar",
    "CalibrationStatus",
    "CalibrationStore",
    "DegenerateModelError",
    "DimensionMismatchError",
    "EyeFrame",
    "EyeModels",
    "FrameSample",
    "FullRebuildStrategy",
    "GazeError",
    "GazeEstimator",
    "GazePoint",
    "GazeTracker",
    "ImageGaussianProcess",
    "RetrainStrategy",
    "SquaredExponentialKernel",
    "TrackerState",
    "image_distance",
]
