import asyncio
import json
import logging
from pathlib import Path

import click
from pydantic import TypeAdapter

from .cli_utils import reconstruct_command_line
from .config import ConverterOptions, SchemaOptions
from .converters import DEFINITIONS_KEY
from .errors import ReschemaError
from .loader import DirectoryLoader
from .schema import Schema

logger = logging.getLogger(__name__)


async def load_schema(raw, options: SchemaOptions) -> Schema:
    return await Schema.create(raw, options)


def convert_schema(schema: Schema, target: str, options: ConverterOptions) -> dict:
    """Convert a loaded schema to a JSON document for the given target."""
    context = {}
    result = schema.to(target, options, context)

    if target.lower() == "pydantic":
        return TypeAdapter(result).json_schema()

    if context.get(DEFINITIONS_KEY):
        result = {**result, DEFINITIONS_KEY: context[DEFINITIONS_KEY]}
    return result


@click.command()
@click.option(
    "--types",
    "-t",
    "types_dir",
    default=None,
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Directory holding named types as <name>.json files",
)
@click.option(
    "--target",
    "-T",
    default="jsonschema",
    type=click.Choice(["jsonschema", "pydantic"], case_sensitive=False),
)
@click.option("--deref", is_flag=True, default=False, help="Inline named types instead of emitting definitions")
@click.option(
    "--add-generation-comment",
    is_flag=True,
    default=False,
    help="Add a $comment with the command line used to generate the output",
)
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.argument("output", required=False, default=None, type=click.Path(resolve_path=True))
def reschema(types_dir, target, deref, add_generation_comment, verbose, path, output):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    with open(path) as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"Invalid JSON in {path}: {e}") from e

    loader = DirectoryLoader(types_dir) if types_dir is not None else None
    options = SchemaOptions(loader=loader)

    try:
        schema = asyncio.run(load_schema(raw, options))
        result = convert_schema(schema, target, ConverterOptions(deref=deref))
    except ReschemaError as e:
        raise click.ClickException(str(e)) from e

    if add_generation_comment:
        result = {"$comment": f"Generated by: {reconstruct_command_line(reschema)}", **result}

    out = json.dumps(result, indent=2, ensure_ascii=False) + "\n"
    if output is None:
        click.echo(out, nl=False)
    else:
        logger.debug("Writing %s", output)
        Path(output).write_text(out, encoding="utf-8")
