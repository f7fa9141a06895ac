"""Discover converter classes in modules and register them on an engine."""

import importlib
import inspect
import re
from pathlib import Path
from types import ModuleType

import structlog

from versionbridge.engine import ConversionEngine
from versionbridge.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)


def _import(module: ModuleType | str) -> ModuleType:
    if isinstance(module, ModuleType):
        return module
    try:
        # Module names come from the caller's own configuration
        return importlib.import_module(module)  # nosemgrep
    except ImportError as e:
        raise ConfigurationError(f"Cannot import converter module '{module}': {e}") from e


def _natural_key(path: Path) -> list[int | str]:
    """Sort key that orders v2 before v10."""
    return [int(part) if part.isdecimal() else part for part in re.split(r"(\d+)", path.stem)]


def _version_modules(package: ModuleType) -> list[ModuleType]:
    """Import every ``v*.py`` submodule of a package in natural order."""
    modules = []
    for package_dir in package.__path__:
        for version_file in sorted(Path(package_dir).glob("v*.py"), key=_natural_key):
            modules.append(_import(f"{package.__name__}.{version_file.stem}"))
    return modules


def _is_converter_class(obj: object, module: ModuleType) -> bool:
    return (
        inspect.isclass(obj)
        and obj.__module__ == module.__name__
        and hasattr(obj, "from_version")
        and hasattr(obj, "to_version")
        and callable(getattr(obj, "forward", None))
    )


def _register_module(engine: ConversionEngine, module: ModuleType) -> int:
    count = 0
    # vars() preserves definition order
    for obj in list(vars(module).values()):
        if not _is_converter_class(obj, module):
            continue
        try:
            converter = obj()
        except TypeError as e:
            raise ConfigurationError(
                f"Converter class {module.__name__}.{obj.__name__} must take no arguments"
            ) from e
        engine.add_converter(
            converter.from_version,
            converter.to_version,
            converter.forward,
            getattr(converter, "back", None),
        )
        count += 1
    return count


def load_converters(engine: ConversionEngine, *modules: ModuleType | str) -> int:
    """Register all converter classes found in the given modules.

    A converter class defines ``from_version``, ``to_version`` and a ``forward``
    method, optionally ``back``. Packages are expanded to their ``v*.py``
    submodules.

    Args:
        engine: Engine to register converters on
        *modules: Module objects or dotted module names

    Returns:
        int: Number of converters registered

    Raises:
        ConfigurationError: If a module cannot be imported or a class cannot be
            instantiated
    """
    count = 0
    for module in modules:
        imported = _import(module)
        targets = _version_modules(imported) if hasattr(imported, "__path__") else [imported]
        for target in targets:
            registered = _register_module(engine, target)
            logger.debug("Loaded converters", module=target.__name__, count=registered)
            count += registered
    return count
