"""
Command processing for nbtoken.

Dispatches "/"-prefixed input to the click command palette. Handles:
- Command parsing
- The /exit and /help special commands
- Error reporting without leaving the REPL
"""

import shlex
import click
from typing import Final
from rich.console import Console
from nbtoken.commands.app import cli
from nbtoken.lib.log import LOG

console: Final[Console] = Console()


def command_process(user_input: str) -> bool:
    """Handle a command starting with '/'.

    Args:
        user_input: The user's command input string starting with '/'

    Returns:
        bool: True to continue processing, False to exit
    """
    try:
        parts: list[str] = shlex.split(user_input[1:])
    except ValueError as e:
        LOG(f"Error parsing command: {e}")
        console.print(f"[bold red]Error parsing input: {e}[/bold red]")
        return True

    if not parts:
        console.print("[bold red]Error: No command provided.[/bold red]")
        return True

    command: str = parts[0]
    args: list[str] = parts[1:]

    try:
        if command == "exit":
            return False

        if command == "help":
            cli.main(args=args + ["--help"], prog_name="/", standalone_mode=False)
            return True

        cli.main(args=[command] + args, prog_name="/", standalone_mode=False)
        return True

    except click.exceptions.ClickException as e:
        console.print(f"[bold red]Error:[/bold red] {e.format_message()}")
        return True
    except click.exceptions.Exit:
        return True
    except SystemExit:
        return True
    except Exception as e:
        LOG(f"Command processing error: {e}")
        console.print(f"[bold red]Unexpected error:[/bold red] {e}")
        return True
