import json
import logging
from pathlib import Path

import click

from .cli_utils import read_package_version, reconstruct_command_line
from .pipeline import CodeGeneratorConfig, GeneratedCodeError, OutputMode, PipelineGenerator, SchemaResolutionError


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--version", "schema_version", default=None, type=str, help="Schema version recorded in the output")
@click.option(
    "--package-json",
    default=None,
    type=click.Path(exists=True, resolve_path=True),
    help="Read the schema version from the version field of a package.json",
)
@click.option("--strict-references", is_flag=True, default=False, help="Fail on malformed $ref strings")
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite an existing output file")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging")
@click.argument("schema", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", type=click.Path(resolve_path=True))
def protocol_schema_to_code(config, schema_version, package_json, strict_references, force, verbose, schema, output):
    """Generate Python protocol bindings from SCHEMA into OUTPUT."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    with open(schema, encoding="utf-8") as f:
        schema_dict = json.load(f)

    if config is not None:
        with open(config, encoding="utf-8") as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # CLI flags override the config file
    if strict_references:
        config.strict_references = True
    if force:
        config.output.mode = OutputMode.FORCE

    if schema_version is None:
        schema_version = read_package_version(package_json) if package_json else ""

    codegen = PipelineGenerator(
        schema_dict,
        config,
        version=schema_version,
        command_line=reconstruct_command_line(protocol_schema_to_code),
    )

    try:
        codegen.write(Path(output))
    except SchemaResolutionError as e:
        raise click.ClickException(f"{type(e).__name__}: {e}") from e
    except (GeneratedCodeError, FileExistsError) as e:
        raise click.ClickException(str(e)) from e
