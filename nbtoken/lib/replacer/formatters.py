"""
Value formatting for token replacement.

`value_stringify` turns a token value into the text written in place of its
placeholder. `value_translate` adapts a translation function (anything with
the ``t(message, args)`` shape) into a `format_value` hook for TokenReplacer.
"""

from typing import Any, Callable

ValueFormatter = Callable[[Any], Any]
Translator = Callable[[str, dict[str, Any]], Any]


def value_stringify(value: Any) -> str:
    """Text substituted for a token value.

    None becomes the empty string and booleans are written "true"/"false".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def value_translate(translate: Translator, placeholder: str = "@value") -> ValueFormatter:
    """Build a format_value hook that routes every token value through `translate`.

    Args:
        translate: Translation function called as translate(placeholder, {placeholder: value})
        placeholder: Message id, also used as the argument name

    Returns:
        A single-argument hook for TokenReplacer(format_value=...)
    """

    def format_value(value: Any) -> Any:
        return translate(placeholder, {placeholder: value})

    return format_value
