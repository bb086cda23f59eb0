"""Output format selection shared by the table-printing commands."""

from enum import Enum
from functools import wraps
from typing import Callable
import click


class OutputFormat(str, Enum):
    TEXT = "text"
    MARKDOWN = "markdown"
    JSON = "json"


# shorthand flags: (option names, parameter name, format they select)
FORMAT_ALIASES = [
    (("--md", "--markdown"), "markdown_flag", OutputFormat.MARKDOWN),
    (("--json",), "json_flag", OutputFormat.JSON),
]


def format_option(default: OutputFormat = OutputFormat.TEXT) -> Callable:
    """Add ``--format`` plus the ``--md``/``--json`` shorthands to a command.

    The wrapped command only receives ``format``; a shorthand flag wins over
    ``--format``.

    Example:
        @click.command()
        @format_option()
        def show(format: str):
            ...
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            for _, param_name, target in FORMAT_ALIASES:
                if kwargs.pop(param_name, False):
                    kwargs["format"] = target.value
            return func(*args, **kwargs)

        wrapper = click.option(
            "--format",
            "format",
            type=click.Choice([f.value for f in OutputFormat]),
            default=default.value,
            help=f"Output format (default: {default.value}).",
        )(wrapper)

        for names, param_name, target in FORMAT_ALIASES:
            wrapper = click.option(
                *names,
                param_name,
                is_flag=True,
                default=False,
                help=f"Alias for --format {target.value}.",
            )(wrapper)
        return wrapper

    return decorator
