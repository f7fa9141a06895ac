"""versionbridge settings package.

This package provides settings management with:
- Version tracking and migration support
- Validation through Pydantic models
- YAML parsing and serialization
"""

from .manager import SettingsManager
from .models import BridgeSettings, LoggingConfig

__all__ = [
    "BridgeSettings",
    "LoggingConfig",
    "SettingsManager",
]
