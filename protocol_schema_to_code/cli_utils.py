"""
CLI utilities for command line reconstruction and introspection.
"""

import json
from pathlib import Path

import click

COMMAND_NAME = "protocol_schema_to_code"


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct the command line from the current Click context.

    Paths are shortened to their file name so the generated header does not
    depend on the machine it was produced on.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
    except RuntimeError:
        return COMMAND_NAME

    cli_args = ctx.params
    cmd_parts = [COMMAND_NAME]
    arguments = []
    options = []

    for param in click_command.params:
        value = cli_args.get(param.name)
        if not value:
            continue

        if isinstance(param, click.Argument):
            arguments.append(_format_value(value))
        elif isinstance(param, click.Option):
            if value == param.default:
                continue
            flag = param.opts[0] if param.opts else f"--{param.name}"
            if param.is_flag:
                options.append(flag)
            else:
                options.extend([flag, _format_value(value)])

    cmd_parts.extend(arguments)
    cmd_parts.extend(options)
    return " ".join(cmd_parts)


def _format_value(value) -> str:
    if isinstance(value, (str, Path)):
        path_obj = Path(str(value))
        return path_obj.name if path_obj.exists() else str(value)
    return str(value)


def read_package_version(package_json: str | Path) -> str:
    """Read the `version` field of a package.json file, empty if absent."""
    with open(package_json, encoding="utf-8") as f:
        return str(json.load(f).get("version", ""))
