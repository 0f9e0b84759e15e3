"""
Defines the main Click command group for nbtoken.

This module provides:
- The root `cli` command group for the application.
- Registration of subcommands from other modules.

Usage:
Import `cli` to dispatch "/"-prefixed commands typed at the REPL or passed
on stdin.
"""

import click
from nbtoken.commands.base import RichGroup
from nbtoken.commands.token import token


@click.group(
    cls=RichGroup,
    help="""
    nbtoken Command Palette

    Manage the tokens of the current session.
    """,
)
def cli() -> None:
    """
    The root Click command group for nbtoken.
    """
    pass


cli: click.Group = cli

cli.add_command(token)
