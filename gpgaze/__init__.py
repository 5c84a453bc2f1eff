"""gpgaze - calibrated dual-eye Gaussian Process gaze estimation."""

__version__ = "1.0.0"
