"""Settings management with version support."""

import shutil
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from versionbridge.config.models import BridgeSettings
from versionbridge.config.versions import CURRENT_VERSION
from versionbridge.engine import ConversionEngine
from versionbridge.exceptions import ConfigurationError, PathNotFoundError
from versionbridge.loader import load_converters

logger = structlog.get_logger(__name__)


class SettingsManager:
    """Manages settings loading, saving, and migration."""

    CURRENT_VERSION = CURRENT_VERSION

    def __init__(self, settings_path: Path | str):
        """Initialize SettingsManager.

        Args:
            settings_path: Location of the YAML settings file
        """
        self.settings_path = Path(settings_path)
        self.engine = ConversionEngine(
            get_version=lambda raw: raw.get("config_version", 1),
            latest=self.CURRENT_VERSION,
        )
        load_converters(self.engine, "versionbridge.config.versions")

    async def load(self) -> BridgeSettings:
        """Load settings with migration and validation.

        Returns:
            BridgeSettings: Loaded and validated settings

        Raises:
            ConfigurationError: If the file is not valid YAML or fails validation
        """
        if not self.settings_path.exists():
            logger.debug("Settings file not found, using defaults", path=str(self.settings_path))
            return BridgeSettings()

        raw_settings = self._read_yaml()

        # Migrate to current version if needed
        try:
            raw_settings = await self.engine.to_latest(raw_settings)
        except PathNotFoundError as e:
            raise ConfigurationError(
                f"Unknown settings version {e.from_version!r} in {self.settings_path}"
            ) from e

        return self._create_settings_object(raw_settings)

    def save(self, settings: BridgeSettings) -> None:
        """Save settings to file with backup.

        Args:
            settings: Settings to save
        """
        self.settings_path.parent.mkdir(parents=True, exist_ok=True)

        if self.settings_path.exists():
            backup_path = self.settings_path.with_suffix(".yaml.backup")
            try:
                shutil.copy2(self.settings_path, backup_path)
            except PermissionError:
                logger.warning("Could not create settings backup", path=str(backup_path))

        settings_yaml = yaml.dump(settings.model_dump(), default_flow_style=False, sort_keys=False)
        self.settings_path.write_text(settings_yaml)
        logger.info("Settings saved", path=str(self.settings_path))

    def _read_yaml(self) -> dict[str, Any]:
        """Read the YAML settings file.

        Returns:
            dict: Raw settings dictionary
        """
        try:
            raw = yaml.safe_load(self.settings_path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.settings_path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigurationError(f"Settings file {self.settings_path} must contain a mapping")
        return raw

    def _create_settings_object(self, raw_settings: dict[str, Any]) -> BridgeSettings:
        """Create a BridgeSettings object from a migrated dictionary."""
        expected_fields = set(BridgeSettings.model_fields.keys())
        filtered = {k: v for k, v in raw_settings.items() if k in expected_fields}

        unexpected_fields = set(raw_settings.keys()) - expected_fields
        if unexpected_fields:
            logger.warning(
                "Filtered out unexpected settings fields",
                fields=sorted(unexpected_fields),
            )

        try:
            return BridgeSettings(**filtered)
        except ValidationError as e:
            raise ConfigurationError(f"Settings validation failed: {e}") from e
