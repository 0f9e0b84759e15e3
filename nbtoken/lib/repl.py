"""
REPL implementation for nbtoken.

This module provides the REPL (Read-Eval-Print Loop) interface, managing:
- User interaction loop
- Command execution
- Placeholder replacement of plain lines
- Error handling
"""

from rich.console import Console
from typing import Final
from nbtoken.lib.input import input_get, input_handle
from nbtoken.lib.log import LOG
from nbtoken.models.dataModel import InputResult

console: Final[Console] = Console()


async def repl_do() -> None:
    """Main REPL entry point.

    Exits on:
    - /exit command
    - Ctrl-D or an interrupted prompt
    - Critical errors
    """
    console.print(
        """
        [cyan]Welcome to the nbtoken REPL!
        [green]Type [white]/exit[green] to quit.
        [green]Use [white]/help[green] for command list, [white]/token --help[green] for token commands.
        """
    )

    continue_repl: bool = True
    while continue_repl:
        try:
            input_result: InputResult = await input_get()

            if not input_result.continue_loop:
                break

            if not input_result.text:
                continue

            continue_repl = await input_handle(
                text=input_result.text, non_interactive=False
            )

        except KeyboardInterrupt:
            console.print("\n[bold yellow]Use '/exit' to quit properly[/bold yellow]")
        except Exception as e:
            LOG(f"REPL critical error: {e}")
            console.print(f"[bold red]Fatal error: {e}[/bold red]")
            continue_repl = False

    console.print("[bold cyan]REPL session terminated[/bold cyan]")
