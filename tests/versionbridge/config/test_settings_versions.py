"""Test settings version 2 converters."""

import pytest

from versionbridge.config.versions.v2 import SettingsVersion2


class TestSettingsVersion2:
    """Test conversion between settings versions 1 and 2."""

    @pytest.fixture
    def handler(self):
        """Create version 2 handler."""
        return SettingsVersion2()

    def test_forward_moves_fields(self, handler):
        """Should rename version_key and nest log_level."""
        old = {"config_version": 1, "version_key": "rev", "log_level": "DEBUG", "latest": 3}

        upgraded = handler.forward(old)

        assert upgraded == {
            "config_version": 2,
            "version_field": "rev",
            "latest": 3,
            "logging": {"level": "DEBUG"},
        }

    def test_forward_does_not_touch_input(self, handler):
        """Should return a new mapping and leave the input alone."""
        old = {"config_version": 1, "version_key": "rev"}

        handler.forward(old)

        assert old == {"config_version": 1, "version_key": "rev"}

    def test_forward_keeps_existing_logging_level(self, handler):
        """Should prefer an already nested logging level."""
        old = {"log_level": "DEBUG", "logging": {"level": "ERROR", "json_logs": True}}

        upgraded = handler.forward(old)

        assert upgraded["logging"] == {"level": "ERROR", "json_logs": True}
        assert "log_level" not in upgraded

    def test_forward_without_logging(self, handler):
        """Should not add an empty logging section."""
        upgraded = handler.forward({})

        assert upgraded == {"config_version": 2}

    def test_back_restores_version_1(self, handler):
        """Should invert forward for version 1 fields."""
        old = {"config_version": 1, "version_key": "rev", "default_version": 0, "log_level": "INFO"}

        assert handler.back(handler.forward(old)) == old

    def test_back_drops_unknown_logging_options(self, handler):
        """Should keep only the level when downgrading logging settings."""
        current = {"config_version": 2, "logging": {"level": "INFO", "include_caller": True}}

        assert handler.back(current) == {"config_version": 1, "log_level": "INFO"}
