"""
Configuration Tests
===================

Tests for settings loading.
"""

import pytest
from pydantic import ValidationError

from wifi_rrm.config import Settings, load_config


ENV_VARS = (
    "WIFI_RRM_WIFISCAN_BUFFER_SIZE",
    "WIFI_RRM_MAX_QUEUE_SIZE",
    "WIFI_RRM_TARGET_MCS",
    "WIFI_RRM_GATEWAY_URL",
    "WIFI_RRM_GATEWAY_TIMEOUT",
    "WIFI_RRM_LOG_LEVEL",
    "WIFI_RRM_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self):
        settings = load_config()
        assert settings.modeler.wifi_scan_buffer_size == 10
        assert settings.modeler.max_queue_size == 1000
        assert settings.tpc.target_mcs == 8
        assert settings.tpc.default_tx_power == 10
        assert settings.tpc.min_tx_power == 0
        assert settings.tpc.max_tx_power == 30
        assert settings.propagation.coverage_threshold == pytest.approx(0.70)

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text(
            "modeler:\n"
            "  wifi_scan_buffer_size: 4\n"
            "tpc:\n"
            "  target_mcs: 5\n"
            "gateway:\n"
            "  base_url: https://gw.example.com\n"
        )

        settings = load_config(str(path))

        assert settings.modeler.wifi_scan_buffer_size == 4
        assert settings.tpc.target_mcs == 5
        assert settings.gateway.base_url == "https://gw.example.com"
        assert settings.modeler.max_queue_size == 1000

    def test_config_yaml_in_working_directory(self, tmp_path):
        (tmp_path / "config.yaml").write_text("tpc:\n  default_tx_power: 12\n")
        assert load_config().tpc.default_tx_power == 12

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("tpc:\n  target_mcs: 5\n")
        monkeypatch.setenv("WIFI_RRM_TARGET_MCS", "3")
        monkeypatch.setenv("WIFI_RRM_MAX_QUEUE_SIZE", "50")
        monkeypatch.setenv("WIFI_RRM_GATEWAY_TIMEOUT", "1.5")
        monkeypatch.setenv("WIFI_RRM_LOG_LEVEL", "DEBUG")

        settings = load_config(str(path))

        assert settings.tpc.target_mcs == 3
        assert settings.modeler.max_queue_size == 50
        assert settings.gateway.timeout_seconds == 1.5
        assert settings.logging.level == "DEBUG"

    def test_invalid_target_mcs(self, monkeypatch):
        monkeypatch.setenv("WIFI_RRM_TARGET_MCS", "12")
        with pytest.raises(ValidationError):
            load_config()

    def test_invalid_default_tx_power(self):
        with pytest.raises(ValidationError):
            Settings.model_validate({"tpc": {"default_tx_power": 40}})

    def test_invalid_buffer_size(self):
        with pytest.raises(ValidationError):
            Settings.model_validate({"modeler": {"wifi_scan_buffer_size": 0}})
