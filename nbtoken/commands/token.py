"""
Token Management Commands

This module provides CLI commands for inspecting and changing the tokens of
the current session, and for replacing placeholders in text.

Commands:
- /token set <path> <value>: Set a token.
- /token get <path>: Show a token's value.
- /token clear <path>: Unset a token (the key is kept).
- /token showall: Show the whole token tree.
- /token reset: Reset tokens to their defaults.
- /token navigate: Announce a navigation start (resets subscribed stores).
- /token replace <text>: Replace placeholders in text.
"""

import json
from typing import Any
from rich.console import Console
from rich.markup import escape
import click
from nbtoken.commands.base import RichGroup, RichCommand, rich_help
from nbtoken.lib.log import LOG
from nbtoken.lib.session import TokenSession, session_get
from nbtoken.lib.store import InvalidPath

console: Console = Console()


@click.group(
    cls=RichGroup,
    short_help="Manage tokens",
    help="""
    Token Management

    Commands to set, show and clear tokens, and to replace placeholders.
    """,
)
def token() -> None:
    """
    Root group for token-related commands.
    """
    pass


token: click.Group = token


def _value_parse(value: str, as_json: bool) -> Any:
    if not as_json:
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="value")


@token.command(
    cls=RichCommand,
    help=rich_help(
        command="set",
        description="Set a token.",
        usage="/token set [--json] <path> <value>",
        args={
            "<path>": "Delimited token path, e.g. site:name",
            "<value>": "The value to assign (parsed as JSON with --json).",
        },
    ),
)
@click.option("--json", "as_json", is_flag=True, help="Parse the value as JSON")
@click.argument("path", type=str)
@click.argument("value", type=str)
def set(path: str, value: str, as_json: bool = False) -> None:
    """
    Sets a token in the session store.

    :param path: The token path.
    :param value: The token value.
    :param as_json: Whether to parse value as JSON.
    """
    session: TokenSession = session_get()
    parsed: Any = _value_parse(value, as_json)
    try:
        session.store.set(path, parsed)
        console.print(f"[bold green]Token '{path}' set successfully.[/bold green]")
    except InvalidPath as e:
        LOG(f"Error setting token '{path}': {e}")
        console.print(f"[bold red]Error: {e}[/bold red]")


@token.command(
    cls=RichCommand,
    help=rich_help(
        command="get",
        description="Show the value of a token.",
        usage="/token get [--default <value>] <path>",
        args={
            "<path>": "Delimited token path, e.g. site:name",
        },
    ),
)
@click.option("--default", "default", type=str, default=None, help="Shown when unset")
@click.argument("path", type=str)
def get(path: str, default: str | None = None) -> None:
    """
    Show a token's value.

    :param path: The token path.
    :param default: Value shown when the token is unset.
    """
    session: TokenSession = session_get()
    try:
        value: Any = session.store.get(path, default)
    except InvalidPath as e:
        LOG(f"Error showing token '{path}': {e}")
        console.print(f"[bold red]Error: {e}[/bold red]")
        return

    if value is None:
        console.print(f"[bold red]Token '{path}' is not set.[/bold red]")
    else:
        console.print(f"[bold cyan]{path}:[/bold cyan] {escape(str(value))}")


@token.command(
    cls=RichCommand,
    help=rich_help(
        command="clear",
        description="Unset a token. The key stays in the tree without a value.",
        usage="/token clear <path>",
        args={
            "<path>": "Delimited token path, e.g. site:name",
        },
    ),
)
@click.argument("path", type=str)
def clear(path: str) -> None:
    """
    Clears a token in the session store.

    :param path: The token path.
    """
    session: TokenSession = session_get()
    try:
        session.store.clear(path)
        console.print(f"[bold green]Token '{path}' cleared successfully.[/bold green]")
    except InvalidPath as e:
        LOG(f"Error clearing token '{path}': {e}")
        console.print(f"[bold red]Error: {e}[/bold red]")


@token.command(
    cls=RichCommand,
    help=rich_help(
        command="showall",
        description="Show the whole token tree as JSON.",
        usage="/token showall",
        args={},
    ),
)
def showall() -> None:
    """
    Displays the session's token tree.
    """
    session: TokenSession = session_get()
    console.print("[bold yellow]All tokens:[/bold yellow]")
    console.print_json(data=session.store.snapshot(), default=str)


@token.command(
    cls=RichCommand,
    help=rich_help(
        command="reset",
        description="Reset all tokens to their defaults.",
        usage="/token reset",
        args={},
    ),
)
def reset() -> None:
    """
    Resets the session store to its defaults.
    """
    session_get().store.reset()
    console.print("[bold green]Tokens reset to defaults.[/bold green]")


@token.command(
    cls=RichCommand,
    help=rich_help(
        command="navigate",
        description="Announce a navigation start to every subscriber.",
        usage="/token navigate",
        args={},
    ),
)
def navigate() -> None:
    """
    Emits a navigation start on the session bus.
    """
    notified: int = session_get().bus.navigationStart()
    console.print(f"[bold green]Navigation started ({notified} notified).[/bold green]")


@token.command(
    cls=RichCommand,
    help=rich_help(
        command="replace",
        description="Replace token placeholders in text.",
        usage="/token replace <text>",
        args={
            "<text>": "Text containing placeholders such as \\[site:name]",
        },
    ),
)
@click.argument("text", nargs=-1, required=True)
def replace(text: tuple[str, ...]) -> None:
    """
    Prints text with the session's tokens substituted.

    :param text: Words of the text to replace.
    """
    replaced: str = session_get().replacer.replace(" ".join(text))
    console.print(replaced, markup=False, highlight=False)
