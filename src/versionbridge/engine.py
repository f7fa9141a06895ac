"""Conversion engine: resolves versions and applies converter paths to records."""

import inspect
import numbers
from collections.abc import Awaitable, Callable, Hashable, Mapping
from typing import TYPE_CHECKING, Any

import structlog

from versionbridge.exceptions import (
    ConfigurationError,
    ConversionStepError,
    VersionDetectionError,
)
from versionbridge.graph import ConversionPath, ConverterFn, VersionGraph

if TYPE_CHECKING:
    from versionbridge.config.models import BridgeSettings

logger = structlog.get_logger(__name__)

VersionDetector = Callable[[Any], Hashable | Awaitable[Hashable]]

DEFAULT_VERSION_FIELD = "version"
DEFAULT_VERSION = 1


def field_version_detector(
    field: str = DEFAULT_VERSION_FIELD, default: Hashable = DEFAULT_VERSION
) -> VersionDetector:
    """Build a detector that reads ``field`` from a record.

    Mappings are read by key, other objects by attribute. A missing or ``None``
    value yields ``default``.
    """

    def get_version(record: Any) -> Hashable:  # noqa: ANN401
        if isinstance(record, Mapping):
            value = record.get(field)
        else:
            value = getattr(record, field, None)
        return default if value is None else value

    return get_version


default_get_version = field_version_detector()


def _is_numeric(version: Hashable) -> bool:
    return isinstance(version, numbers.Real) and not isinstance(version, bool)


class ConversionEngine:
    """Converts records between versions along the shortest converter path.

    Converters may be plain or async functions. A converter returning ``None`` is
    treated as having mutated the record in place. Records are never copied.
    """

    def __init__(
        self,
        get_version: VersionDetector | None = None,
        latest: Hashable | None = None,
    ):
        """Initialize the engine.

        Args:
            get_version: Detector for a record's current version. Defaults to
                reading the ``version`` field, falling back to ``1``.
            latest: Fixed latest version. When omitted the numeric maximum of
                all registered versions is used.
        """
        self.graph = VersionGraph()
        self.get_version = get_version or default_get_version
        self.latest = latest
        self._warned_non_numeric = False

    @classmethod
    def from_settings(cls, settings: "BridgeSettings") -> "ConversionEngine":
        """Build an engine from loaded settings."""
        return cls(
            get_version=field_version_detector(settings.version_field, settings.default_version),
            latest=settings.latest,
        )

    def add_converter(
        self,
        from_version: Hashable,
        to_version: Hashable,
        forward: ConverterFn,
        back: ConverterFn | None = None,
    ) -> None:
        """Register a converter, and optionally its inverse."""
        self.graph.add_edge(from_version, to_version, forward, back)

        if self.latest is None and not self._warned_non_numeric:
            if not (_is_numeric(from_version) and _is_numeric(to_version)):
                self._warned_non_numeric = True
                logger.warning(
                    "Non-numeric version registered without a fixed latest version; "
                    "latest inference will fail",
                    from_version=from_version,
                    to_version=to_version,
                )

    def converter(
        self, from_version: Hashable, to_version: Hashable
    ) -> Callable[[ConverterFn], ConverterFn]:
        """Register the decorated function as a forward converter.

        The decorated function gains a ``back`` attribute that registers the
        inverse converter::

            @engine.converter(1, 2)
            def upgrade(record): ...

            @upgrade.back
            def downgrade(record): ...
        """

        def decorator(forward: ConverterFn) -> ConverterFn:
            def back(inverse: ConverterFn) -> ConverterFn:
                self.add_converter(to_version, from_version, inverse)
                return inverse

            # Attach first so a function that rejects attributes registers nothing
            forward.back = back  # type: ignore[attr-defined]
            self.add_converter(from_version, to_version, forward)
            return forward

        return decorator

    def latest_version(self) -> Hashable:
        """Resolve the fixed latest version, or infer it from registered versions.

        Raises:
            ConfigurationError: If no latest is fixed and registered versions are
                missing or not all numeric
        """
        if self.latest is not None:
            return self.latest

        versions = self.graph.all_versions()
        if not versions:
            raise ConfigurationError("Cannot infer latest version: no converters registered")

        non_numeric = [version for version in versions if not _is_numeric(version)]
        if non_numeric:
            raise ConfigurationError(
                f"Cannot infer latest version from non-numeric versions {non_numeric!r}; "
                "pass latest explicitly"
            )
        return max(versions)

    async def detect_version(self, record: Any) -> Hashable:  # noqa: ANN401
        """Detect the current version of a record.

        Raises:
            VersionDetectionError: If the detector or its awaitable fails, or the
                detected version is unhashable
        """
        try:
            version = self.get_version(record)
            if inspect.isawaitable(version):
                version = await version
            hash(version)
        except Exception as e:
            logger.warning("Version detection failed", record_type=type(record).__name__, error=str(e))
            raise VersionDetectionError(type(record).__name__, e) from e
        return version

    def plan(self, from_version: Hashable, to_version: Hashable) -> ConversionPath:
        """Look up the shortest path without applying it."""
        path = self.graph.shortest_path(from_version, to_version)
        logger.debug("Resolved conversion path", versions=path.versions, hops=len(path))
        return path

    def can_convert(self, from_version: Hashable, to_version: Hashable) -> bool:
        """Check whether a record at ``from_version`` can reach ``to_version``."""
        return self.graph.has_path(from_version, to_version)

    async def from_to(self, from_version: Hashable, to_version: Hashable, record: Any) -> Any:  # noqa: ANN401
        """Convert a record the caller states is at ``from_version``."""
        path = self.plan(from_version, to_version)
        return await self._apply(path, record)

    async def to(self, to_version: Hashable, record: Any) -> Any:  # noqa: ANN401
        """Convert a record from its detected version to ``to_version``."""
        from_version = await self.detect_version(record)
        return await self.from_to(from_version, to_version, record)

    async def from_to_latest(self, from_version: Hashable, record: Any) -> Any:  # noqa: ANN401
        """Convert a record from ``from_version`` to the latest version."""
        return await self.from_to(from_version, self.latest_version(), record)

    async def to_latest(self, record: Any) -> Any:  # noqa: ANN401
        """Convert a record from its detected version to the latest version."""
        from_version = await self.detect_version(record)
        return await self.from_to(from_version, self.latest_version(), record)

    async def _apply(self, path: ConversionPath, record: Any) -> Any:  # noqa: ANN401
        # Steps run strictly one after another; each feeds the next
        for step, edge in enumerate(path):
            try:
                result = edge.convert(record)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as e:
                logger.warning(
                    "Conversion step failed",
                    step=step,
                    from_version=edge.from_version,
                    to_version=edge.to_version,
                    error=str(e),
                )
                raise ConversionStepError(edge.from_version, edge.to_version, step, e) from e

            if result is not None:
                record = result
            logger.debug(
                "Applied conversion step",
                step=step,
                from_version=edge.from_version,
                to_version=edge.to_version,
            )
        return record
