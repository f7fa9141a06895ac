#!/usr/bin/env python3
"""Command-line tool for converting a versioned YAML or JSON document.

This script loads converter modules, finds the shortest conversion path for a
document and either prints that path or writes the converted document.
"""

import asyncio
import math
import shutil
import sys
from collections.abc import Hashable
from pathlib import Path
from typing import Any

import click
import structlog
import yaml

from versionbridge.config import BridgeSettings, SettingsManager
from versionbridge.engine import ConversionEngine
from versionbridge.exceptions import VersionBridgeError
from versionbridge.loader import load_converters
from versionbridge.utils.structlog_configurator import configure_structlog

logger = structlog.get_logger(__name__)


def parse_version_token(token: str) -> Hashable:
    """Turn a command-line version into an int or float when it looks like one."""
    try:
        return int(token)
    except ValueError:
        pass
    try:
        number = float(token)
    except ValueError:
        return token
    # "nan" and "inf" stay names
    return number if math.isfinite(number) else token


def read_document(path: Path) -> Any:  # noqa: ANN401
    """Read a YAML or JSON document.

    Args:
        path: Document location

    Returns:
        Parsed document
    """
    return yaml.safe_load(path.read_text())


def write_document(document: Any, output: Path | None) -> None:  # noqa: ANN401
    """Write a document as YAML to a file, or to stdout when no file is given.

    An existing output file is copied to ``<name>.backup`` first.
    """
    document_yaml = yaml.dump(document, default_flow_style=False, sort_keys=False)

    if output is None:
        click.echo(document_yaml, nl=False)
        return

    if output.exists():
        backup_path = output.with_name(f"{output.name}.backup")
        shutil.copy2(output, backup_path)
        logger.debug("Backed up existing output", path=str(backup_path))

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(document_yaml)
    click.echo(click.style(f"✅ Wrote {output}", fg="green"), err=True)


async def build_engine(
    settings_path: Path | None, converters: tuple[str, ...], verbose: bool = False
) -> ConversionEngine:
    """Load settings, configure logging and register converter modules."""
    if settings_path is not None:
        settings = await SettingsManager(settings_path).load()
    else:
        settings = BridgeSettings()
    if verbose:
        settings.logging.level = "DEBUG"
    configure_structlog(settings.logging)

    engine = ConversionEngine.from_settings(settings)
    count = load_converters(engine, *converters)
    logger.info("Converters loaded", count=count, versions=len(engine.graph))
    return engine


def print_plan(engine: ConversionEngine, from_version: Hashable, to_version: Hashable) -> None:
    """Print the conversion path between two versions."""
    path = engine.plan(from_version, to_version)
    if not path:
        click.echo(f"Already at version {to_version!r}; nothing to do.")
        return

    click.echo(f"{len(path)} step(s) from {from_version!r} to {to_version!r}:")
    for step, edge in enumerate(path, start=1):
        click.echo(f"  {step}. {edge.from_version!r} -> {edge.to_version!r}")


async def run(
    input_path: Path,
    converters: tuple[str, ...],
    from_token: str | None,
    to_token: str | None,
    output: Path | None,
    settings_path: Path | None,
    plan_only: bool,
    verbose: bool = False,
) -> None:
    """Convert one document according to the command-line options."""
    engine = await build_engine(settings_path, converters, verbose)
    document = read_document(input_path)

    if from_token is not None:
        from_version = parse_version_token(from_token)
    else:
        from_version = await engine.detect_version(document)

    if to_token is not None:
        to_version = parse_version_token(to_token)
    else:
        to_version = engine.latest_version()

    if plan_only:
        print_plan(engine, from_version, to_version)
        return

    converted = await engine.from_to(from_version, to_version, document)
    write_document(converted, output)


@click.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--converters",
    "-c",
    multiple=True,
    required=True,
    help="Module or package holding converter classes (repeatable)",
)
@click.option("--from", "from_token", help="Source version (detected from the document if omitted)")
@click.option("--to", "to_token", help="Target version (latest if omitted)")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Write result to this file")
@click.option(
    "--settings", type=click.Path(dir_okay=False, path_type=Path), help="YAML settings file"
)
@click.option("--plan", "plan_only", is_flag=True, help="Show the conversion path without converting")
@click.option("--verbose", is_flag=True, help="Enable verbose logging")
def cli(
    input_path: Path,
    converters: tuple[str, ...],
    from_token: str | None,
    to_token: str | None,
    output: Path | None,
    settings: Path | None,
    plan_only: bool,
    verbose: bool,
) -> None:
    """Convert a versioned document to another version.

    Examples:
      # Convert to the latest version, printing YAML
      migrate-document record.yaml -c myapp.converters

      # Show the path from version 1 to 4
      migrate-document record.yaml -c myapp.converters --from 1 --to 4 --plan

      # Convert in place
      migrate-document record.yaml -c myapp.converters -o record.yaml
    """
    try:
        asyncio.run(
            run(input_path, converters, from_token, to_token, output, settings, plan_only, verbose)
        )
    except (VersionBridgeError, OSError, yaml.YAMLError) as e:
        logger.error("Document conversion failed", error=str(e))
        click.echo(click.style(f"❌ Error: {e}", fg="red"), err=True)
        sys.exit(1)

    if verbose:
        click.echo("✨ Done!", err=True)


def main() -> None:
    """Entry point for the migrate-document CLI."""
    cli()


if __name__ == "__main__":
    main()
