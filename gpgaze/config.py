"""
Configuration settings for the gpgaze eye-tracking core.

This module centralizes all configurable parameters. Values are resolved
once, when a Config is built, and handed to the estimator at construction
time; nothing here is re-read per frame.
"""

import os
from dataclasses import dataclass, field


@dataclass
class KernelConfig:
    """Hyperparameters of the squared-exponential image kernel."""

    # Signal standard deviation; k(a, a) == sigma ** 2
    sigma: float = 2.0

    # Length-scale applied to the squared pixel distance
    length_scale: float = 2000.0


@dataclass
class ModelConfig:
    """Configuration for the Gaussian Process regressors."""

    # Diagonal regularization added to the Gram matrix
    noise: float = 0.01


@dataclass
class ScreenConfig:
    """Screen rectangle that gaze estimates are clamped to."""

    width: float = 1920.0
    height: float = 1080.0


@dataclass
class CalibrationConfig:
    """Configuration for the calibration process."""

    # Frames shown for a target before per-frame samples are recorded
    frame_sample_start: int = 11


@dataclass
class ServerConfig:
    """Configuration for the Flask server."""

    host: str = "0.0.0.0"
    port: int = 3226
    debug: bool = False

    # CORS settings
    cors_enabled: bool = True


@dataclass
class Config:
    """Main configuration class aggregating all settings."""

    kernel: KernelConfig = field(default_factory=KernelConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    screen: ScreenConfig = field(default_factory=ScreenConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Environment variables override default values.
        Prefix: GPGAZE_

        Examples:
            GPGAZE_KERNEL_SIGMA=1.5
            GPGAZE_KERNEL_LENGTH_SCALE=2500
            GPGAZE_SCREEN_WIDTH=2560
        """
        config = cls()

        # Kernel settings from env
        config.kernel.sigma = float(os.getenv("GPGAZE_KERNEL_SIGMA", config.kernel.sigma))
        config.kernel.length_scale = float(
            os.getenv("GPGAZE_KERNEL_LENGTH_SCALE", config.kernel.length_scale)
        )

        # Model settings from env
        config.model.noise = float(os.getenv("GPGAZE_MODEL_NOISE", config.model.noise))

        # Screen settings from env
        config.screen.width = float(os.getenv("GPGAZE_SCREEN_WIDTH", config.screen.width))
        config.screen.height = float(os.getenv("GPGAZE_SCREEN_HEIGHT", config.screen.height))

        # Calibration settings from env
        config.calibration.frame_sample_start = int(
            os.getenv("GPGAZE_CALIBRATION_FRAME_SAMPLE_START",
                      config.calibration.frame_sample_start)
        )

        # Server settings from env
        config.server.port = int(os.getenv("GPGAZE_SERVER_PORT", config.server.port))
        config.server.host = os.getenv("GPGAZE_SERVER_HOST", config.server.host)
        config.server.debug = os.getenv("GPGAZE_DEBUG", "false").lower() == "true"

        return config


# Default configuration instance
config = Config.from_env()
