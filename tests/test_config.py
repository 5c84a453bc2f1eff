"""
Tests for the configuration system.

Run with: pytest tests/ -v
"""

import pytest

from gpgaze.config import Config


class TestConfig:
    """Tests for configuration system."""

    def test_default_config_values(self):
        """Test default configuration values."""
        cfg = Config()

        assert cfg.kernel.sigma == 2.0
        assert cfg.kernel.length_scale == 2000.0
        assert cfg.model.noise == 0.01
        assert (cfg.screen.width, cfg.screen.height) == (1920.0, 1080.0)
        assert cfg.calibration.frame_sample_start == 11
        assert cfg.server.port == 3226

    def test_instances_do_not_share_sections(self):
        """Test each Config owns its section objects."""
        first = Config()
        second = Config()

        first.kernel.sigma = 5.0

        assert second.kernel.sigma == 2.0

    def test_from_env(self, monkeypatch):
        """Test environment variables override defaults."""
        monkeypatch.setenv("GPGAZE_KERNEL_SIGMA", "1.5")
        monkeypatch.setenv("GPGAZE_KERNEL_LENGTH_SCALE", "2500")
        monkeypatch.setenv("GPGAZE_MODEL_NOISE", "0.05")
        monkeypatch.setenv("GPGAZE_SCREEN_WIDTH", "2560")
        monkeypatch.setenv("GPGAZE_SCREEN_HEIGHT", "1440")
        monkeypatch.setenv("GPGAZE_SERVER_PORT", "8080")
        monkeypatch.setenv("GPGAZE_DEBUG", "true")

        cfg = Config.from_env()

        assert cfg.kernel.sigma == 1.5
        assert cfg.kernel.length_scale == 2500.0
        assert cfg.model.noise == 0.05
        assert (cfg.screen.width, cfg.screen.height) == (2560.0, 1440.0)
        assert cfg.server.port == 8080
        assert cfg.server.debug

    def test_from_env_defaults(self, monkeypatch):
        """Test unset variables keep the defaults."""
        for name in ("GPGAZE_KERNEL_SIGMA", "GPGAZE_MODEL_NOISE", "GPGAZE_DEBUG"):
            monkeypatch.delenv(name, raising=False)

        cfg = Config.from_env()

        assert cfg.kernel.sigma == 2.0
        assert cfg.model.noise == 0.01
        assert not cfg.server.debug


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
