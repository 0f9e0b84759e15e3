"""
Base classes for Rich-enhanced Click commands and groups.

This module defines:
- `rich_help`: Builds the help text shown for a token command.
- `RichGroup`: A Click group rendering its help with Rich.
- `RichCommand`: A Click command rendering its help inside a Rich panel.

Help is printed as "/<group> <command>" so it reads the same way commands are
typed at the nbtoken REPL prompt.
"""

from rich.console import Console
from rich.panel import Panel
import click
from nbtoken.lib.log import LOG

console: Console = Console()


def rich_help(command: str, description: str, usage: str, args: dict) -> str:
    """
    Generate Rich-enhanced help text for commands.

    :param command: The command name.
    :param description: Description of the command.
    :param usage: Usage syntax for the command.
    :param args: Dictionary of arguments and their descriptions.
    :return: Formatted Rich help string.
    """
    help_text = f"[bold cyan]{description}[/bold cyan]\n\n"
    help_text += f"[bold yellow]Usage:[/bold yellow]\n    [green]{usage}[/green]\n"
    if args:
        help_text += "\n[bold yellow]Arguments:[/bold yellow]\n"
        for arg, desc in args.items():
            help_text += f"    [green]{arg}[/green]: {desc}\n"
    return help_text


class RichGroup(click.Group):
    """
    A Click Group that lists its commands with Rich colorization.
    """

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """
        Render the group help: usage line, description, commands and options.

        :param ctx: The Click context for the command group.
        :param formatter: The Click help formatter.
        """
        try:
            info_name: str = ctx.info_name.lstrip("/") if ctx.info_name else ""
            console.print(
                f"[bold yellow]Usage:[/bold yellow] [cyan]/{info_name}[/cyan] "
                f"[magenta][OPTIONS] COMMAND [ARGS]...[/magenta]\n"
            )

            if self.help:
                console.print(f"[bold cyan]{self.help.strip()}[/bold cyan]\n")

            if self.commands:
                console.print("[bold green]Available Commands:[/bold green]")
                for name, command in self.commands.items():
                    console.print(
                        f"- [cyan]{name}[/cyan]: [white]{command.short_help or 'No description available.'}[/white]"
                    )
                console.print()

            for param in self.get_params(ctx):
                console.print(
                    f"- [cyan]{param.opts[0]}[/cyan]: {getattr(param, 'help', None) or 'No description'}"
                )
        except Exception as e:
            LOG(f"Help rendering error: {e}")
            console.print(f"[bold red]Help rendering error:[/bold red] {e}")


class RichCommand(click.Command):
    """
    A Click Command that shows its help text inside a Rich panel.
    """

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """
        Render the help message for the command using Rich.

        :param ctx: The Click context for the command.
        :param formatter: The Click help formatter.
        """
        try:
            help_text = self.help or "No help text available."
            panel_width = max(len(line) for line in help_text.splitlines()) + 10
            panel = Panel(
                help_text, expand=False, width=min(panel_width, 80), border_style="cyan"
            )
            console.print(panel)
        except Exception as e:
            LOG(f"Help rendering error: {e}")
            console.print(f"[bold red]Help rendering error:[/bold red] {e}")
