"""
Calibration exemplar storage.

Holds the averaged eye images captured for each confirmed calibration target
together with the target's screen coordinates. Exemplars are kept in three
positionally aligned sequences (right images, left images, labels); every
append touches all three so index i always refers to the same target.

Images are copied when captured so the store never aliases a frame buffer
that the video pipeline will overwrite on the next frame.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import pandas as pd

from gpgaze.models.errors import DimensionMismatchError

logger = logging.getLogger(__name__)


def capture_image(image) -> np.ndarray:
    """Copy an eye image into an immutable float64 array."""
    captured = np.array(image, dtype=np.float64, copy=True)
    if captured.ndim != 2:
        raise ValueError(f"Eye images must be single-channel 2D arrays, got shape {captured.shape}")
    if not np.all(np.isfinite(captured)):
        raise ValueError("Eye images must contain only finite pixel values")
    captured.setflags(write=False)
    return captured


def capture_label(label) -> Tuple[float, float]:
    """Validate a screen-space target as a finite (x, y) pair."""
    x, y = (float(value) for value in label)
    if not (np.isfinite(x) and np.isfinite(y)):
        raise ValueError(f"Calibration targets must be finite, got ({x}, {y})")
    return x, y


@dataclass(frozen=True)
class CalibrationExemplar:
    """One calibration sample: averaged eye images and their screen target."""
    right_image: np.ndarray
    left_image: np.ndarray
    x: float
    y: float

    @property
    def label(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class FrameSample:
    """Eye images of a single usable frame recorded while a target was shown."""
    right_image: np.ndarray
    left_image: np.ndarray
    x: float
    y: float


class CalibrationStore:
    """
    Append-only collection of calibration exemplars.

    Thread Safety:
        Not thread-safe on its own. The GazeEstimator owning the store
        serializes all access under its lock.

    Example:
        store = CalibrationStore()
        store.add_exemplar(right_avg, left_avg, (960.0, 540.0))
        x_labels = store.labels_frame()["x"]
    """

    def __init__(self):
        self._images_right: List[np.ndarray] = []
        self._images_left: List[np.ndarray] = []
        self._labels: List[Tuple[float, float]] = []

        # Every usable frame per target, kept alongside the averaged exemplars
        self._frame_samples: List[FrameSample] = []

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self):
        for right, left, (x, y) in zip(self._images_right, self._images_left, self._labels):
            yield CalibrationExemplar(right_image=right, left_image=left, x=x, y=y)

    @property
    def images_right(self) -> Tuple[np.ndarray, ...]:
        return tuple(self._images_right)

    @property
    def images_left(self) -> Tuple[np.ndarray, ...]:
        return tuple(self._images_left)

    @property
    def labels(self) -> Tuple[Tuple[float, float], ...]:
        return tuple(self._labels)

    @property
    def frame_samples(self) -> Tuple[FrameSample, ...]:
        return tuple(self._frame_samples)

    @property
    def frame_sample_count(self) -> int:
        return len(self._frame_samples)

    def add_exemplar(self, right_image, left_image, label: Tuple[float, float]) -> CalibrationExemplar:
        """
        Append one exemplar to all three aligned sequences.

        The images are copied before anything is appended, so a malformed
        input leaves the store untouched.

        Args:
            right_image: Averaged right eye image (canonical eye-crop size)
            left_image: Averaged left eye image (canonical eye-crop size)
            label: (x, y) screen coordinates of the calibration target

        Returns:
            The stored CalibrationExemplar

        Raises:
            DimensionMismatchError: If an image differs in shape from the
                exemplars already stored for that eye
        """
        right = capture_image(right_image)
        left = capture_image(left_image)
        x, y = capture_label(label)

        if self._labels:
            for image, stored in ((right, self._images_right[0]), (left, self._images_left[0])):
                if image.shape != stored.shape:
                    raise DimensionMismatchError(
                        f"Exemplar image shape {image.shape} does not match "
                        f"stored exemplar shape {stored.shape}"
                    )

        self._images_right.append(right)
        self._images_left.append(left)
        self._labels.append((x, y))

        logger.debug("Added exemplar %d at (%.1f, %.1f)", len(self._labels), x, y)
        return CalibrationExemplar(right_image=right, left_image=left, x=x, y=y)

    def add_frame_sample(self, right_image, left_image, target: Tuple[float, float]) -> None:
        """Record the eye images of one usable frame for the active target."""
        x, y = capture_label(target)
        self._frame_samples.append(FrameSample(
            right_image=capture_image(right_image),
            left_image=capture_image(left_image),
            x=x,
            y=y,
        ))

    def labels_frame(self) -> pd.DataFrame:
        """Labels as a DataFrame with one column per regression axis."""
        return pd.DataFrame(self._labels, columns=["x", "y"], dtype=np.float64)

    def clear(self) -> None:
        """Remove every exemplar and frame sample."""
        self._images_right.clear()
        self._images_left.clear()
        self._labels.clear()
        self._frame_samples.clear()
        logger.debug("Calibration store cleared")
