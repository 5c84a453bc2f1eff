"""Exceptions raised by the gaze estimation models."""


class GazeError(Exception):
    """Base class for gaze estimation errors."""


class DegenerateModelError(GazeError, ValueError):
    """
    Training set cannot produce a usable regression model.

    Raised for an empty exemplar set or a regularized Gram matrix that is
    singular to numerical precision. Collect more (or more varied)
    calibration exemplars, or raise the noise term.
    """


class DimensionMismatchError(GazeError, ValueError):
    """Eye images with different shapes were compared."""
