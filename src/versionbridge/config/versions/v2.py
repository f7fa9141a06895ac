"""Settings version 2 definition."""

from typing import Any


class SettingsVersion2:
    """Settings version 2 - nested logging section and ``version_field`` name.

    Version 1 kept everything at the root::

        config_version: 1
        version_key: version
        default_version: 1
        latest: null
        log_level: INFO
    """

    from_version = 1
    to_version = 2

    def forward(self, config: dict[str, Any]) -> dict[str, Any]:
        """Upgrade a version 1 settings mapping."""
        upgraded = dict(config)

        if "version_key" in upgraded:
            upgraded["version_field"] = upgraded.pop("version_key")

        logging_section = dict(upgraded.get("logging") or {})
        if "log_level" in upgraded:
            logging_section.setdefault("level", upgraded.pop("log_level"))
        if logging_section:
            upgraded["logging"] = logging_section

        upgraded["config_version"] = 2
        return upgraded

    def back(self, config: dict[str, Any]) -> dict[str, Any]:
        """Downgrade a version 2 settings mapping."""
        downgraded = dict(config)

        if "version_field" in downgraded:
            downgraded["version_key"] = downgraded.pop("version_field")

        # Version 1 only knew the level
        logging_section = downgraded.pop("logging", None) or {}
        if "level" in logging_section:
            downgraded["log_level"] = logging_section["level"]

        downgraded["config_version"] = 1
        return downgraded
