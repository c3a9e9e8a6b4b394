"""
Rebuilding the invocation reported in the generated files' header.
"""

from pathlib import Path

import click
from click.core import ParameterSource

PROGRAM_NAME = "controllers_to_sdk"


def display_value(value) -> str:
    """Render a parameter value, showing existing files by name only."""
    if isinstance(value, (str, Path)) and Path(str(value)).exists():
        return Path(str(value)).name
    return str(value)


def option_tokens(option: click.Option, value) -> list[str]:
    """Tokens reproducing an option as it was typed."""
    if option.is_flag:
        if value:
            return [option.opts[0]]
        return [option.secondary_opts[0]] if option.secondary_opts else []

    return [option.opts[0], display_value(value)]


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Rebuild the current invocation of a command.

    Only the parameters typed on the command line are reported: values coming
    from defaults or the environment are left out, so that the header stays
    stable between runs.

    Args:
        click_command: The running command

    Returns:
        The command line, arguments first, or the program name alone when no
        command is running
    """
    ctx = click.get_current_context(silent=True)
    if ctx is None:
        return PROGRAM_NAME

    arguments = []
    options = []

    for param in click_command.params:
        if param.name not in ctx.params or ctx.get_parameter_source(param.name) != ParameterSource.COMMANDLINE:
            continue

        value = ctx.params[param.name]

        if isinstance(param, click.Argument):
            arguments.append(display_value(value))
        elif isinstance(param, click.Option):
            options.extend(option_tokens(param, value))

    return " ".join([PROGRAM_NAME, *arguments, *options])
