"""
Tests for configuration loading.
"""

from datetime import time

import pytest

from doctorschedule.config import TOKEN_ENV_VAR, AppConfig
from doctorschedule.domain.models import SlotDuration


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self):
        """Test built-in defaults."""
        config = AppConfig()

        assert config.api.base_url == "http://localhost:5002/api"
        assert config.horizon_days == 30
        assert config.defaults.get_start_time() == time(9, 0)
        assert config.defaults.get_end_time() == time(17, 0)
        assert config.defaults.get_slot_duration() is SlotDuration.THIRTY

    def test_load_from_yaml(self, tmp_path):
        """Test loading a YAML file."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "api:\n"
            "  base_url: https://tabeeb.example/api\n"
            "  token: abc\n"
            "defaults:\n"
            "  start_time: '08:30'\n"
            "  end_time: '14:00'\n"
            "  slot_duration: 45\n"
            "timezone: Europe/Berlin\n"
            "horizon_days: 14\n"
            "log_level: info\n",
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(config_path)

        assert config.api.resolve_token() == "abc"
        assert config.defaults.get_start_time() == time(8, 30)
        assert config.defaults.get_slot_duration() is SlotDuration.FORTY_FIVE
        assert config.horizon_days == 14
        assert config.log_level == "INFO"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_load_or_default_without_file(self, tmp_path):
        config = AppConfig.load_or_default(tmp_path / "missing.yaml")

        assert config.timezone == "Asia/Karachi"

    def test_invalid_yaml(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("api: [unclosed\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(config_path)

    def test_root_must_be_mapping(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(config_path)

    def test_reversed_default_hours_rejected(self):
        """Test that default hours must be ordered."""
        with pytest.raises(ValueError):
            AppConfig(defaults={"start_time": "17:00", "end_time": "09:00"})

    def test_unsupported_slot_duration_rejected(self):
        with pytest.raises(ValueError):
            AppConfig(defaults={"slot_duration": 20})

    def test_horizon_bounds(self):
        with pytest.raises(ValueError):
            AppConfig(horizon_days=0)

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValueError):
            AppConfig(timezone="Mars/Olympus_Mons")

    def test_token_from_environment(self, monkeypatch):
        """Test the environment fallback for the API token."""
        monkeypatch.setenv(TOKEN_ENV_VAR, "from-env")

        assert AppConfig().api.resolve_token() == "from-env"
        assert AppConfig(api={"token": "from-file"}).api.resolve_token() == "from-file"
