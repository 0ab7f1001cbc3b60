"""
Command-line interface for automapper.

Loads a JSON document, fills a dataclass from it and prints the mapped
result as JSON. Types are named as ``package.module:QualName``.
"""

import dataclasses
import importlib
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click

from . import __version__
from .constants import SCHEMA_PATH_ENV
from .errors import MappingError
from .kinds import is_aggregate, zero_value
from .mapping import map_from_source, map_from_source_map, map_to_destination


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log mapping decisions to stderr")
def main(verbose: bool) -> None:
    """
    automapper.

    Map JSON documents onto dataclasses, and dataclasses onto each other.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command("map")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("dest_type")
@click.option(
    "--schema",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar=SCHEMA_PATH_ENV,
    help=f"JSON schema to validate the input against (default: ${SCHEMA_PATH_ENV})",
)
@click.option("--compact", is_flag=True, help="Output compact JSON (no indentation)")
def map_command(input_file: Path, dest_type: str, schema: Optional[Path], compact: bool) -> None:
    """Fill a fresh DEST_TYPE from the JSON object in INPUT_FILE.

    Keys of the document name fields of DEST_TYPE. Fields not mentioned
    keep their default value.

    Example:

        automapper map user.json myapp.models:User
    """
    document = _load_document(input_file)
    if schema is not None:
        _validate_document(document, schema)

    dest = _new_instance(dest_type)
    try:
        map_from_source_map(document, dest)
    except MappingError as e:
        _fail(f"Mapping failed: {e}")

    _emit(dest, compact)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("source_type")
@click.argument("dest_type")
@click.option(
    "--source-driven",
    is_flag=True,
    help="Require every source field to exist on the destination instead",
)
@click.option("--compact", is_flag=True, help="Output compact JSON (no indentation)")
def convert(
    input_file: Path, source_type: str, dest_type: str, source_driven: bool, compact: bool
) -> None:
    """Load INPUT_FILE as SOURCE_TYPE and map it onto DEST_TYPE.

    By default every DEST_TYPE field must be found on SOURCE_TYPE. With
    --source-driven every SOURCE_TYPE field must be found on DEST_TYPE.

    Example:

        automapper convert user.json myapp.dto:UserDTO myapp.models:User
    """
    document = _load_document(input_file)

    source = _new_instance(source_type)
    dest = _new_instance(dest_type)
    try:
        map_from_source_map(document, source)
        if source_driven:
            map_from_source(source, dest)
        else:
            map_to_destination(source, dest)
    except MappingError as e:
        _fail(f"Mapping failed: {e}")

    _emit(dest, compact)


def load_type(name: str) -> type:
    """
    Import a class named as ``package.module:QualName``.

    Raises:
        click.BadParameter: If the name is malformed or cannot be imported
    """
    module_name, sep, qualname = name.partition(":")
    if not sep or not module_name or not qualname:
        raise click.BadParameter(f"expected 'module:QualName', got {name!r}")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name!r}: {e}") from e
    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise click.BadParameter(f"{module_name!r} has no attribute {qualname!r}") from e
    return obj


def _new_instance(name: str) -> Any:
    try:
        cls = load_type(name)
    except click.BadParameter as e:
        _fail(f"Error loading type: {e.message}")
    if not is_aggregate(cls):
        _fail(f"Error loading type: {name} is not a dataclass")
    return zero_value(cls)


def _load_document(path: Path) -> Any:
    try:
        with open(path) as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        _fail(f"Error parsing {path}: {e}")


def _validate_document(document: Any, schema_path: Path) -> None:
    import jsonschema

    with open(schema_path) as f:
        schema = json.load(f)

    try:
        jsonschema.validate(document, schema)
    except jsonschema.ValidationError as e:
        _fail(f"✗ Validation failed: {e.message}")


def _emit(dest: Any, compact: bool) -> None:
    click.echo(json.dumps(dataclasses.asdict(dest), indent=None if compact else 2, default=str))


def _fail(message: str) -> None:
    click.echo(click.style(message, fg="red"), err=True)
    sys.exit(1)


if __name__ == "__main__":
    main()
