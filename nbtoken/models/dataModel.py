"""
dataModel.py

This module defines the data models and schemas used throughout nbtoken.
The models leverage Pydantic for validation and type safety.

Features:
- Token configuration (path delimiter and defaults tree).
- The closed node-kind variant driving every recursive traversal.
- Results for input collection and input processing.

Usage:
Import these models to validate and structure data used in the application.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict
from collections.abc import Mapping, Sequence, Set
from enum import Enum


def defaults_site() -> Dict[str, Any]:
    """
    Default token tree: site name and slogan, both unset.
    """
    return {"site": {"name": None, "slogan": None}}


class NodeKind(Enum):
    """
    Shape of a value inside a token tree or a replace input.

    SCALAR values are substituted, SEQUENCE values are leaves when flattening
    but containers when replacing, MAPPING values are always descended into.
    """

    SCALAR = 1
    SEQUENCE = 2
    MAPPING = 3

    @classmethod
    def of(cls, value: Any) -> "NodeKind":
        """
        Classify `value`. Strings and bytes are scalars, not sequences.

        :param value: Any value.
        :return: The matching NodeKind.
        """
        if isinstance(value, Mapping):
            return cls.MAPPING
        if isinstance(value, (str, bytes, bytearray)):
            return cls.SCALAR
        if isinstance(value, (Sequence, Set)):
            return cls.SEQUENCE
        return cls.SCALAR


class TokenConfig(BaseModel):
    """
    Token store configuration.

    Attributes:
        delimiter (str): Separator between token path segments.
        defaults (dict): Tree the store is initialized and reset to.
    """

    delimiter: str = Field(default=":", description="Token path delimiter.")
    defaults: Dict[str, Any] = Field(
        default_factory=defaults_site, description="Initial and reset-to token tree."
    )

    @field_validator("delimiter")
    @classmethod
    def delimiter_check(cls, value: str) -> str:
        if not value:
            raise ValueError("Token path delimiter cannot be empty")
        return value


class InputResult(BaseModel):
    """Result of input collection operation.

    Attributes:
        text: The collected input text
        continue_loop: Whether to continue processing
        error: Optional error message if input collection failed
    """

    text: str
    continue_loop: bool
    error: str | None = None


class ProcessResult(BaseModel):
    """Result of command/input processing.

    Attributes:
        text: Replaced output text or command text
        is_command: Whether input was a command
        should_exit: Whether to exit processing
        error: Optional error message
        success: Whether processing succeeded
        exit_code: Exit code for non-interactive mode
    """

    text: str
    is_command: bool
    should_exit: bool
    error: str | None = None
    success: bool = True
    exit_code: int = 0


class InputMode(BaseModel):
    """Input mode determination.

    Attributes:
        has_stdin: Whether stdin has content
        ask_string: Direct input string if provided
        use_repl: Whether to use interactive REPL
    """

    has_stdin: bool = False
    ask_string: str | None = None
    use_repl: bool = True
