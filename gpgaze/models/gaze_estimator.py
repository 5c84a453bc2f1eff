"""
Dual-eye Gaussian Process gaze estimator.

Four regressors are trained from the calibration store, one per eye and per
screen axis:

```
Right eye ──► GP(x) ──┐                 ┌── GP(y) ◄── Right eye
                      ├─► mean ─► x     │
Left eye  ──► GP(x) ──┘        y ◄─ mean┴── GP(y) ◄── Left eye
```

The per-eye predictions are averaged without weighting and the result is
clamped to the screen rectangle. The estimator is either Uncalibrated (no
models) or Calibrated (all four models fit on the current store contents);
estimates requested while Uncalibrated are no-ops.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, NamedTuple, Optional, Tuple

import numpy as np

from gpgaze.config import Config, config as default_config
from gpgaze.models.calibration_store import CalibrationExemplar, CalibrationStore
from gpgaze.models.gaussian_process import ImageGaussianProcess
from gpgaze.models.kernel import SquaredExponentialKernel

logger = logging.getLogger(__name__)


@dataclass
class GazePoint:
    """Represents an estimated gaze point on screen."""
    x: float = 0.0
    y: float = 0.0
    is_blinking: bool = False

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "isBlinking": self.is_blinking}

    def __iter__(self):
        yield self.x
        yield self.y


class EyeModels(NamedTuple):
    """The four regressors of a calibrated estimator."""
    right_x: Any
    right_y: Any
    left_x: Any
    left_y: Any


class RetrainStrategy:
    """
    Builds the four per-eye, per-axis models from a calibration store.

    Implementations must either return a complete EyeModels or raise;
    the estimator swaps the result in as a whole.
    """

    def rebuild(
        self,
        store: CalibrationStore,
        kernel: SquaredExponentialKernel,
        noise: float,
    ) -> EyeModels:
        """Fit and return all four models; subclasses must override this."""
        raise NotImplementedError


class FullRebuildStrategy(RetrainStrategy):
    """Refit every regressor from the full store on each retrain."""

    def rebuild(
        self,
        store: CalibrationStore,
        kernel: SquaredExponentialKernel,
        noise: float,
    ) -> EyeModels:
        labels = store.labels_frame()
        images_right = store.images_right
        images_left = store.images_left

        return EyeModels(
            right_x=ImageGaussianProcess(kernel, noise).fit(images_right, labels["x"]),
            right_y=ImageGaussianProcess(kernel, noise).fit(images_right, labels["y"]),
            left_x=ImageGaussianProcess(kernel, noise).fit(images_left, labels["x"]),
            left_y=ImageGaussianProcess(kernel, noise).fit(images_left, labels["y"]),
        )


class GazeEstimator:
    """
    Calibrated dual-eye gaze estimator.

    The calibration store and the four models form a single unit of
    mutation guarded by one re-entrant lock. retrain() blocks; callers that
    offload it to a worker thread will see estimate() wait for it to finish.

    Attributes:
        is_active: Whether all four models are fit
        gaze_point: Most recent estimate (default point until calibrated)

    Example:
        estimator = GazeEstimator()

        # For each confirmed calibration target
        estimator.add_exemplar(right_avg, left_avg, (x, y))
        estimator.retrain()

        # Per frame
        point = estimator.estimate(right_eye, left_eye, is_blinking)
    """

    def __init__(
        self,
        settings: Optional[Config] = None,
        strategy: Optional[RetrainStrategy] = None,
    ):
        """
        Initialize the estimator.

        Args:
            settings: Configuration resolved by the caller; defaults to the
                environment-derived module configuration
            strategy: Retraining strategy; defaults to FullRebuildStrategy
        """
        settings = settings or default_config
        self.kernel = SquaredExponentialKernel(settings.kernel)
        self.noise = settings.model.noise
        self.screen_width = settings.screen.width
        self.screen_height = settings.screen.height
        self.strategy = strategy or FullRebuildStrategy()

        self.store = CalibrationStore()
        self._models: Optional[EyeModels] = None
        self.gaze_point = GazePoint()

        self._lock = threading.RLock()

        logger.info("GazeEstimator initialized with %r (noise=%s, screen=%sx%s)",
                    self.kernel, self.noise, self.screen_width, self.screen_height)

    @property
    def is_active(self) -> bool:
        return self._models is not None

    @property
    def exemplar_count(self) -> int:
        return len(self.store)

    def add_exemplar(self, right_image, left_image, label: Tuple[float, float]) -> CalibrationExemplar:
        """
        Store a new calibration exemplar.

        The models are not touched; call retrain() once the exemplar is in.
        """
        with self._lock:
            return self.store.add_exemplar(right_image, left_image, label)

    def add_frame_sample(self, right_image, left_image, target: Tuple[float, float]) -> None:
        """Record a usable frame shown for the active calibration target."""
        with self._lock:
            self.store.add_frame_sample(right_image, left_image, target)

    def retrain(self) -> None:
        """
        Rebuild all four models from the current store contents.

        Raises:
            DegenerateModelError: If the store is empty or the kernel matrix
                is singular. The previous models are left in place.
        """
        with self._lock:
            models = self.strategy.rebuild(self.store, self.kernel, self.noise)
            self._models = models
            logger.info("Retrained gaze models on %d exemplars", len(self.store))

    def clear(self, reset_point: bool = False) -> None:
        """
        Discard all calibration data and return to the Uncalibrated state.

        Args:
            reset_point: Also replace the last gaze point with the default one
        """
        with self._lock:
            self.store.clear()
            self._models = None
            if reset_point:
                self.gaze_point = GazePoint()
            logger.info("Calibration cleared")

    def estimate(self, right_image, left_image, is_blinking: bool = False) -> GazePoint:
        """
        Estimate the gaze point for one frame.

        Args:
            right_image: Right eye image of the current frame
            left_image: Left eye image of the current frame
            is_blinking: Blink flag from the eye extractor; the estimate is
                still computed and only tagged

        Returns:
            The current GazePoint. While Uncalibrated, or when the frame
            yields a non-finite estimate, this is the previous (or default)
            point, unchanged.
        """
        with self._lock:
            if self._models is None:
                return self.gaze_point

            models = self._models
            x = (models.right_x.predict(right_image) + models.left_x.predict(left_image)) / 2
            y = (models.right_y.predict(right_image) + models.left_y.predict(left_image)) / 2

            if not (np.isfinite(x) and np.isfinite(y)):
                logger.warning("Discarding non-finite gaze estimate (%s, %s)", x, y)
                return self.gaze_point

            self.gaze_point = GazePoint(
                x=float(np.clip(x, 0.0, self.screen_width)),
                y=float(np.clip(y, 0.0, self.screen_height)),
                is_blinking=bool(is_blinking),
            )
            return self.gaze_point
