import json
from pathlib import Path

import click

from .cli_utils import configure_logging, load_options
from .errors import JsonSchemaToTsError
from .pipeline import compile_schema, normalize, read_schema


@click.command()
@click.option("--name", "-n", default=None, type=str, help="Root type name (defaults to the file name)")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--stage", "-s", default="parse", type=click.Choice(["normalize", "parse"]))
@click.option("--ignore-min-and-max-items/--use-min-and-max-items", default=None, help="Never infer tuples from minItems/maxItems")
@click.option("--strict-index-signatures/--loose-index-signatures", default=None, help="Add `undefined` to index signature values")
@click.option("--unknown-any/--any", "unknown_any", default=None, help="Type untyped schemas as unknown (default) or any")
@click.option("--const-enums/--no-const-enums", "enable_const_enums", default=None)
@click.option("--unreachable-definitions/--reachable-definitions-only", default=None, help="Also parse unreferenced definitions")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, required=False, type=click.Path(resolve_path=True))
def json_schema_to_ts(
    name,
    config,
    stage,
    ignore_min_and_max_items,
    strict_index_signatures,
    unknown_any,
    enable_const_enums,
    unreachable_definitions,
    verbose,
    path,
    output,
):
    """Compile the JSON Schema at PATH and write the result as JSON to OUTPUT (or stdout)."""
    configure_logging(verbose)

    if name is None:
        name = Path(path).stem

    try:
        options = load_options(
            config,
            {
                "ignore_min_and_max_items": ignore_min_and_max_items,
                "strict_index_signatures": strict_index_signatures,
                "unknown_any": unknown_any,
                "enable_const_enums": enable_const_enums,
                "unreachable_definitions": unreachable_definitions,
            },
        )
        schema = read_schema(path)
        if stage == "normalize":
            result = normalize(schema, name, options)
        else:
            result = compile_schema(schema, name, options).to_dict()
        out = json.dumps(result, indent=2, ensure_ascii=False)
    except JsonSchemaToTsError as e:
        raise click.ClickException(str(e)) from e
    except ValueError as e:
        # json.dumps on a schema with circular references
        raise click.ClickException(f"Cannot serialize result: {e}") from e

    if output is None:
        click.echo(out)
    else:
        with open(output, "w", encoding="utf-8") as f:
            f.write(out + "\n")
