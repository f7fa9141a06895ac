"""Exception hierarchy for versionbridge.

Every error raised by the graph, the engine or the settings layer derives from
``VersionBridgeError`` so callers can catch a single base class.
"""

from collections.abc import Hashable


class VersionBridgeError(Exception):
    """Base class for all versionbridge errors."""


class PathNotFoundError(VersionBridgeError):
    """No directed chain of converters links two versions."""

    def __init__(self, from_version: Hashable, to_version: Hashable) -> None:
        super().__init__(f"No conversion path from version {from_version!r} to {to_version!r}")
        self.from_version = from_version
        self.to_version = to_version


class VersionDetectionError(VersionBridgeError):
    """The version detector failed for a record."""

    def __init__(self, record_type: str, cause: BaseException) -> None:
        super().__init__(f"Could not detect version of {record_type} record: {cause}")
        self.record_type = record_type
        self.cause = cause


class ConversionStepError(VersionBridgeError):
    """A converter raised while a path was being applied."""

    def __init__(
        self,
        from_version: Hashable,
        to_version: Hashable,
        step: int,
        cause: BaseException,
    ) -> None:
        super().__init__(
            f"Conversion step {step} ({from_version!r} -> {to_version!r}) failed: {cause}"
        )
        self.from_version = from_version
        self.to_version = to_version
        self.step = step
        self.cause = cause


class ConfigurationError(VersionBridgeError):
    """Settings or registrations cannot support the requested operation."""
