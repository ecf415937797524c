"""Unit tests for environment configuration."""

import pytest

from solidblock.env.config import EnvConfig


class TestEnvConfig:
    """Tests for EnvConfig validation."""

    def test_defaults(self):
        config = EnvConfig()
        assert (config.width, config.height) == (20, 15)
        assert config.obstacle_pattern == "normal"

    def test_empty_board(self):
        with pytest.raises(ValueError, match="board must be non-empty"):
            EnvConfig(width=0)

    def test_spawn_interval(self):
        with pytest.raises(ValueError, match="spawn_interval must be positive"):
            EnvConfig(spawn_interval=0)

    def test_short_history(self):
        with pytest.raises(ValueError, match="history_length must be >= 10"):
            EnvConfig(history_length=5)
