"""Convert versioned records along the shortest chain of registered converters."""

from .engine import ConversionEngine, default_get_version, field_version_detector
from .exceptions import (
    ConfigurationError,
    ConversionStepError,
    PathNotFoundError,
    VersionBridgeError,
    VersionDetectionError,
)
from .graph import ConversionPath, ConverterEdge, VersionGraph
from .loader import load_converters

__all__ = [
    "ConfigurationError",
    "ConversionEngine",
    "ConversionPath",
    "ConversionStepError",
    "ConverterEdge",
    "PathNotFoundError",
    "VersionBridgeError",
    "VersionDetectionError",
    "VersionGraph",
    "default_get_version",
    "field_version_detector",
    "load_converters",
]
