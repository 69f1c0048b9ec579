"""
TEST SUITE: Environment Configuration
=====================================

Module: companion_policy/config.py
"""

import pytest

from companion_policy.config import GateSettings, DEFAULT_MIN_INTERVAL_MS, DEFAULT_MESSAGES_THRESHOLD
from companion_policy.exceptions import ConfigurationError, ErrorCode


class TestGateSettings:

    def test_defaults(self):
        settings = GateSettings.from_env({})
        assert settings.minimum_interval_ms == DEFAULT_MIN_INTERVAL_MS == 300000
        assert settings.messages_threshold == DEFAULT_MESSAGES_THRESHOLD == 10
        assert settings.store_backend == "memory"
        assert settings.max_entries is None
        assert settings.state_ttl_seconds is None

    def test_overrides(self):
        settings = GateSettings.from_env({
            "SUMMARY_MIN_INTERVAL_MS": "60000",
            "SUMMARY_MESSAGES_THRESHOLD": " 5 ",
            "GATE_STORE_BACKEND": "Database",
            "GATE_MAX_ENTRIES": "1000",
            "GATE_STATE_TTL_SECONDS": "86400",
        })
        assert settings.minimum_interval_ms == 60000
        assert settings.messages_threshold == 5
        assert settings.store_backend == "database"
        assert settings.max_entries == 1000
        assert settings.state_ttl_seconds == 86400

    def test_blank_values_use_defaults(self):
        settings = GateSettings.from_env({"SUMMARY_MESSAGES_THRESHOLD": "", "GATE_MAX_ENTRIES": "  "})
        assert settings.messages_threshold == 10
        assert settings.max_entries is None

    def test_non_integer_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            GateSettings.from_env({"SUMMARY_MIN_INTERVAL_MS": "five minutes"})
        assert exc_info.value.error_code == ErrorCode.CONFIGURATION_ERROR
        assert exc_info.value.details["setting"] == "SUMMARY_MIN_INTERVAL_MS"

    def test_negative_rejected(self):
        with pytest.raises(ConfigurationError):
            GateSettings.from_env({"SUMMARY_MESSAGES_THRESHOLD": "-1"})

    def test_zero_max_entries_rejected(self):
        with pytest.raises(ConfigurationError):
            GateSettings.from_env({"GATE_MAX_ENTRIES": "0"})

    def test_unknown_backend_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            GateSettings.from_env({"GATE_STORE_BACKEND": "redis"})
        assert "GATE_STORE_BACKEND" in exc_info.value.message

    def test_exception_to_dict(self):
        error = ConfigurationError("bad value", setting="X")
        data = error.to_dict()
        assert data["error_code"] == 7000
        assert data["error_type"] == "CONFIGURATION_ERROR"
        assert data["details"] == {"setting": "X"}
