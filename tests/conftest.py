import logging
import sys
from typing import Any

import pytest
import structlog

from versionbridge import ConversionEngine


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo structlog and root handler changes made by configure_structlog."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    structlog.reset_defaults()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def make_step(to_version: int, log: list[tuple[Any, Any]]):
    """Build a converter that records its call and stamps the new version."""

    def step(record: dict[str, Any]) -> dict[str, Any]:
        log.append((record.get("version"), to_version))
        return {**record, "version": to_version}

    return step


@pytest.fixture
def call_log() -> list[tuple[Any, Any]]:
    """Provide a list that converters append (from, to) pairs to."""
    return []


@pytest.fixture
def chain_engine(call_log) -> ConversionEngine:
    """Provide an engine with a bidirectional chain 1 <-> 2 <-> 3 <-> 4."""
    engine = ConversionEngine()
    for version in (1, 2, 3):
        engine.add_converter(
            version,
            version + 1,
            make_step(version + 1, call_log),
            make_step(version, call_log),
        )
    return engine


SAMPLE_CONVERTERS = {
    "__init__.py": '"""Sample converters for tests."""\n',
    "v2_contact.py": '''
class SplitName:
    from_version = 1
    to_version = 2

    def forward(self, record):
        first, _, last = record.pop("name").partition(" ")
        record.update(first_name=first, last_name=last, version=2)

    def back(self, record):
        record["name"] = f"{record.pop('first_name')} {record.pop('last_name')}".strip()
        record["version"] = 1


def not_a_converter(record):
    return record
''',
    "v3_contact.py": '''
import asyncio


class AddEmails:
    from_version = 2
    to_version = 3

    async def forward(self, record):
        await asyncio.sleep(0)
        return {**record, "emails": [], "version": 3}
''',
    "helpers.py": '''
class Ignored:
    from_version = 1
    to_version = 99

    def forward(self, record):
        return record
''',
}


@pytest.fixture
def sample_converters(tmp_path, monkeypatch) -> str:
    """Write an importable converter package and return its name."""
    package_dir = tmp_path / "sample_converters"
    package_dir.mkdir()
    for filename, source in SAMPLE_CONVERTERS.items():
        (package_dir / filename).write_text(source)

    monkeypatch.syspath_prepend(str(tmp_path))
    yield "sample_converters"

    for name in [m for m in sys.modules if m.split(".")[0] == "sample_converters"]:
        del sys.modules[name]
