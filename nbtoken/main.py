"""
nbtoken Main Module.

Command line front end for the token store and replacer: loads the defaults
token tree, applies token assignments given on the command line, and replaces
[path:to:token] placeholders in text or JSON documents.

Usage:
    Run this module as a standalone script or through the `nbtoken` console script.

Examples:
    Start interactive REPL:
        $ nbtoken --defaults tokens.json

    Single input mode:
        $ nbtoken --set site:name=Acme --ask "Welcome to [site:name]"
        $ echo "Welcome to [site:name]" | nbtoken --set site:name=Acme
        $ nbtoken --json --set site:name=Acme < page.json

Note:
    Input priority order:
    1. stdin (if available)
    2. --ask argument (if provided)
    3. interactive REPL (default)
"""

from argparse import Namespace, ArgumentParser, ArgumentDefaultsHelpFormatter
import asyncio
import signal
import sys
from types import FrameType
from typing import Any, Final, Optional
from pydantic import ValidationError
from rich.console import Console
from nbtoken.config.settings import App, appsettings, config_load
from nbtoken.lib.input import mode_detect, input_readStdin, input_handle
from nbtoken.lib.log import LOG
from nbtoken.lib.repl import repl_do
from nbtoken.lib.session import TokenSession, session_set
from nbtoken.models.dataModel import InputMode

__version__: Final[str] = "0.1.0"

console: Final[Console] = Console()

parser: Final[ArgumentParser] = ArgumentParser(
    description="Replace [path:to:token] placeholders with token values.",
    formatter_class=ArgumentDefaultsHelpFormatter,
)
parser.add_argument("--delimiter", type=str, help="Token path delimiter")
parser.add_argument("--defaults", type=str, help="JSON file with the defaults token tree")
parser.add_argument(
    "--set",
    dest="assignments",
    action="append",
    default=[],
    metavar="PATH=VALUE",
    help="Set a token before processing input (repeatable)",
)
parser.add_argument(
    "--json", action="store_true", help="Treat input as a JSON document"
)
parser.add_argument("--ask", type=str, help="Direct input (alternative to stdin)")
parser.add_argument(
    "-V", "--version", action="version", version=f"%(prog)s {__version__}"
)


def assignment_parse(assignment: str) -> tuple[str, str]:
    """Split a PATH=VALUE assignment.

    Raises:
        ValueError: If there is no '=' or the path is empty
    """
    path, sep, value = assignment.partition("=")
    if not sep or not path:
        raise ValueError(f"Invalid token assignment '{assignment}', expected PATH=VALUE")
    return path, value


async def config_setup(options: Namespace) -> bool:
    """Create and initialize the token session.

    Args:
        options: Parsed command-line arguments

    Returns:
        bool: True if the session is ready
    """
    try:
        settings: App = appsettings
        if options.defaults:
            settings = appsettings.model_copy(update={"defaults_file": options.defaults})

        overrides: dict[str, Any] = {}
        if options.delimiter:
            overrides["delimiter"] = options.delimiter

        session: TokenSession = TokenSession.create(config_load(settings, overrides))
        await session.store.init()
        session_set(session)

        for assignment in options.assignments:
            path, value = assignment_parse(assignment)
            session.store.set(path, value)
        return True

    except (ValueError, ValidationError) as e:
        LOG(f"Configuration setup failed: {e}")
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        return False


async def async_main(options: Namespace) -> None:
    """Asynchronous main function handling all input modes.

    Args:
        options: Parsed command-line arguments
    """
    if not await config_setup(options):
        sys.exit(1)

    mode: InputMode = await mode_detect(options.ask)

    if mode.has_stdin:
        try:
            input_text: str = await input_readStdin()
        except IOError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            sys.exit(1)
        await input_handle(input_text, non_interactive=True, as_json=options.json)

    elif mode.ask_string:
        await input_handle(mode.ask_string, non_interactive=True, as_json=options.json)

    else:
        await repl_do()


def signal_handle(sig: int, frame: Optional[FrameType]) -> None:
    """Signal handler for graceful interruption."""
    console.print("\n[bold red]Interrupt received. Exiting.[/bold red]")
    sys.exit(0)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the nbtoken command.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])
    """
    options: Namespace = parser.parse_args(argv)
    signal.signal(signal.SIGINT, signal_handle)

    try:
        asyncio.run(async_main(options))
    except KeyboardInterrupt:
        console.print("\n[bold cyan]Program interrupted by user. Exiting.[/bold cyan]")


if __name__ == "__main__":
    main()
