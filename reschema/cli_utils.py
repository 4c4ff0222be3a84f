"""
CLI utilities for command line reconstruction.
"""

from pathlib import Path

import click

PROG_NAME = "reschema"


def _format_value(value) -> str:
    # Existing paths are shown by file name only
    if isinstance(value, (str, Path)):
        path = Path(str(value))
        return path.name if path.exists() else str(value)
    return str(value)


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct the command line of the current Click invocation.

    Options left at their default value are omitted, flags are shown without
    a value.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string, the bare program name when no
        Click context is active
    """
    try:
        params = click.get_current_context().params
    except RuntimeError:
        return PROG_NAME

    arguments = []
    options = []
    for param in click_command.params:
        value = params.get(param.name)
        if value is None or value is False:
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

    return " ".join([PROG_NAME, *arguments, *options])
