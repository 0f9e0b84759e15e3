"""
Input handling and processing for nbtoken.

This module provides functionality for collecting and processing user input:
lines starting with "/" are commands, everything else has its token
placeholders replaced.

The module handles:
- Interactive and non-interactive input
- Placeholder replacement in text or JSON documents
- Input mode detection
- Error handling

Processing order:
1. Escape sequence (a leading backslash keeps a leading "/" literal)
2. Command processing
3. Placeholder replacement
"""

import json
import sys
from pathlib import Path
from typing import Any, Final, Optional
from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from rich.console import Console
from rich.markup import escape
from nbtoken.lib.command import command_process
from nbtoken.lib.log import LOG
from nbtoken.lib.session import session_get
from nbtoken.models.dataModel import InputMode, InputResult, ProcessResult

console: Final[Console] = Console()

HISTORY_FILE: Final[str] = str(Path.home() / ".nbtoken_history")
PROMPT: Final[str] = "nbtoken> "


class REPLSession:
    """Manages REPL input session with history support."""

    def __init__(self) -> None:
        self.session: PromptSession = PromptSession(
            history=FileHistory(HISTORY_FILE),
            enable_history_search=True,
        )


repl_session: Optional[REPLSession] = None


async def input_get() -> InputResult:
    """Get user input with prompt.

    Returns:
        InputResult containing:
            - text: The user input text
            - continue_loop: Whether to continue processing
            - error: Any error message if input failed
    """
    global repl_session
    try:
        if not repl_session:
            repl_session = REPLSession()

        user_input: str = await repl_session.session.prompt_async(PROMPT)
        return InputResult(text=user_input.strip(), continue_loop=True)

    except (KeyboardInterrupt, EOFError):
        return InputResult(text="", continue_loop=False, error="Interrupt received")
    except Exception as e:
        return InputResult(text="", continue_loop=False, error=f"Input error: {e}")


async def mode_detect(ask_string: str | None = None) -> InputMode:
    """Detect the appropriate input mode.

    Args:
        ask_string: Optional direct input string

    Returns:
        InputMode indicating how to handle input

    Note:
        Priority order:
        1. Stdin content
        2. Ask string
        3. REPL mode
    """
    try:
        if not sys.stdin.isatty():
            return InputMode(has_stdin=True, ask_string=None, use_repl=False)
        if ask_string:
            return InputMode(has_stdin=False, ask_string=ask_string, use_repl=False)
        return InputMode(has_stdin=False, ask_string=None, use_repl=True)

    except Exception as e:
        LOG(f"Error detecting input mode: {e}")
        return InputMode(has_stdin=False, ask_string=None, use_repl=True)


async def input_readStdin() -> str:
    """Read content from stdin.

    Returns:
        Content read from stdin, trailing newline removed

    Raises:
        IOError: If stdin read fails or is empty
    """
    try:
        content: str = sys.stdin.read()
    except Exception as e:
        LOG(f"Error reading from stdin: {e}")
        raise IOError(f"Failed to read from stdin: {e}")
    if not content.strip():
        raise IOError("Empty input from stdin")
    return content.rstrip("\n")


def document_replace(text: str) -> str:
    """Replace placeholders throughout a JSON document and serialize it again.

    Only JSON strings are rewritten; numbers, booleans and null keep their type.

    Raises:
        ValueError: If text is not valid JSON
    """
    try:
        document: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Input is not valid JSON: {e}") from e
    replaced: Any = session_get().replacer.replace(document, keep_scalars=True)
    return json.dumps(replaced, indent=2, ensure_ascii=False)


async def input_process(text: str, as_json: bool = False) -> ProcessResult:
    """Process any type of input (commands or content).

    Args:
        text: Raw input text to process
        as_json: Treat non-command input as a JSON document

    Returns:
        ProcessResult containing replaced text or command status
    """
    try:
        if text.startswith("\\"):
            text = text[1:]
        elif text.startswith("/"):
            continue_processing: bool = command_process(text)
            return ProcessResult(
                text=text,
                is_command=True,
                should_exit=not continue_processing,
            )

        processed_text: str = (
            document_replace(text) if as_json else session_get().replacer.replace(text)
        )
        return ProcessResult(text=processed_text, is_command=False, should_exit=False)

    except Exception as e:
        LOG(f"Error processing input: {e}")
        return ProcessResult(
            text="",
            is_command=False,
            should_exit=True,
            error=str(e),
            success=False,
            exit_code=1,
        )


async def input_handle(
    text: str, non_interactive: bool = False, as_json: bool = False
) -> bool:
    """Handle input processing and return whether to continue REPL loop.

    In non-interactive mode the process exits with the result's exit code.

    Returns:
        bool: True if REPL should continue, False if should exit
    """
    process_result: ProcessResult = await input_process(text, as_json=as_json)
    if not process_result.success:
        console.print(f"[bold red]Error: {escape(process_result.error or '')}[/bold red]")
        if non_interactive:
            sys.exit(process_result.exit_code)
        return True

    should_exit: bool = False
    if process_result.is_command:
        if process_result.should_exit and not non_interactive:
            console.print("[bold cyan]Exiting.[/bold cyan]")
            should_exit = True
    elif process_result.text:
        console.print(
            process_result.text, markup=False, highlight=False, soft_wrap=True
        )

    if non_interactive:
        sys.exit(process_result.exit_code)

    return not should_exit
