r"""
Token replacement engine.

Flattens a nested token tree into a flat replacement map of placeholders
("[site:name]") to values, then walks arbitrary input and substitutes every
occurrence of every placeholder.

The replacer handles:
- Flattening of nested token trees (sequences are leaves, never indexed)
- Strings and other scalars, coerced to text before substitution
- Mappings, lists and sets, replaced member by member in place
- Optional value formatting through a `format_value` hook

Example:
    replacer = TokenReplacer(store=store)
    replacer.generate({"a": {"b": "X"}})          # {"[a:b]": "X"}
    replacer.replace("value is [a:b]", {"a": {"b": "X"}})  # "value is X"
"""

from collections.abc import Mapping, MutableMapping, MutableSequence, MutableSet, Set
from typing import Any, Iterable, Self
from nbtoken.lib.log import LOG
from nbtoken.lib.replacer.formatters import ValueFormatter, value_stringify
from nbtoken.lib.store import TokenStore
from nbtoken.models.dataModel import NodeKind


class ReplacementMap(dict):
    """Flat placeholder -> value mapping produced by `TokenReplacer.generate`."""


class TokenReplacer:
    """Substitutes bracketed token placeholders in arbitrary input.

    Attributes:
        store: Default source of tokens when replace() is given none
        format_value: Optional hook applied to every leaf value while flattening
    """

    def __init__(
        self: Self,
        store: TokenStore | None = None,
        delimiter: str | None = None,
        format_value: ValueFormatter | None = None,
    ) -> None:
        """Initialize the replacer.

        Args:
            store: Token store used when replace() is called without tokens
            delimiter: Path delimiter; defaults to the store's, then ":"
            format_value: Hook turning a raw token value into its replacement value
        """
        self.store: TokenStore | None = store
        self._delimiter: str | None = delimiter
        self.format_value: ValueFormatter | None = format_value

    @property
    def delimiter(self: Self) -> str:
        if self._delimiter:
            return self._delimiter
        if self.store is not None:
            return self.store.delimiter
        return ":"

    def placeholder(self: Self, path: Iterable[str]) -> str:
        """Placeholder text for a sequence of path segments."""
        return "[" + self.delimiter.join(path) + "]"

    def generate(
        self: Self, tree: Any, path: Iterable[str] | None = None
    ) -> ReplacementMap:
        """Flatten a token tree into a replacement map.

        Every leaf reached through a non-empty path yields one entry. The root
        itself never does, so a scalar passed as `tree` gives an empty map.

        Args:
            tree: Nested token tree
            path: Segments to prefix every generated placeholder with

        Returns:
            ReplacementMap of placeholder -> (formatted) value
        """
        replacements: ReplacementMap = ReplacementMap()
        self._flatten(tree, list(path or []), replacements)
        return replacements

    def _flatten(self: Self, node: Any, path: list[str], out: ReplacementMap) -> None:
        match NodeKind.of(node):
            case NodeKind.MAPPING:
                for key, value in node.items():
                    self._flatten(value, path + [str(key)], out)
            case NodeKind.SEQUENCE | NodeKind.SCALAR:
                if path:
                    value: Any = self.format_value(node) if self.format_value else node
                    out[self.placeholder(path)] = value

    def replacements_get(self: Self, tokens: Any = None) -> Mapping[str, Any]:
        """Resolve the replacement map for one replace() call.

        Args:
            tokens: None for the store's current tree, a ReplacementMap or a
                flat placeholder mapping to use as-is, or a token tree to flatten

        Returns:
            Flat placeholder -> value mapping
        """
        if tokens is None:
            if self.store is None:
                LOG("No token store attached, nothing to replace with")
                return ReplacementMap()
            with self.store.lock:
                return self.generate(self.store.getAll())

        if isinstance(tokens, ReplacementMap):
            return tokens
        if isinstance(tokens, Mapping) and self._is_flat(tokens):
            return tokens
        return self.generate(tokens)

    @staticmethod
    def _is_flat(tokens: Mapping[Any, Any]) -> bool:
        return all(
            isinstance(key, str)
            and key.startswith("[")
            and key.endswith("]")
            and NodeKind.of(value) is not NodeKind.MAPPING
            for key, value in tokens.items()
        )

    def replace(
        self: Self, input: Any, tokens: Any = None, keep_scalars: bool = False
    ) -> Any:
        """Replace placeholders in `input`.

        Mappings, lists and mutable sets are modified in place and returned;
        callers that need the original untouched must copy it first. Tuples
        and frozensets are rebuilt as the same type. Scalars come back as
        strings (see `value_stringify`) unless `keep_scalars` is set, in which
        case only strings are touched. None is returned unchanged.

        Args:
            input: String, scalar or nested structure
            tokens: See `replacements_get`
            keep_scalars: Leave numbers, booleans and other non-string scalars as they are

        Returns:
            The replaced input
        """
        if input is None:
            return input
        replacements: Mapping[str, Any] = self.replacements_get(tokens)
        return self._substitute(input, replacements, keep_scalars)

    def _substitute(
        self: Self, value: Any, replacements: Mapping[str, Any], keep_scalars: bool
    ) -> Any:
        if value is None:
            return value

        match NodeKind.of(value):
            case NodeKind.MAPPING:
                if isinstance(value, MutableMapping):
                    for key in list(value.keys()):
                        value[key] = self._substitute(value[key], replacements, keep_scalars)
                    return value
                return {
                    key: self._substitute(item, replacements, keep_scalars)
                    for key, item in value.items()
                }
            case NodeKind.SEQUENCE:
                if isinstance(value, MutableSequence):
                    for index, item in enumerate(value):
                        value[index] = self._substitute(item, replacements, keep_scalars)
                    return value
                items: list[Any] = [
                    self._substitute(item, replacements, keep_scalars) for item in value
                ]
                if isinstance(value, MutableSet):
                    value.clear()
                    for item in items:
                        value.add(item)
                    return value
                if isinstance(value, tuple) and hasattr(value, "_fields"):
                    return type(value)(*items)
                if isinstance(value, (tuple, Set)):
                    return type(value)(items)
                return items
            case NodeKind.SCALAR:
                if isinstance(value, str):
                    return self._text_replace(value, replacements)
                if keep_scalars:
                    return value
                return self._text_replace(value_stringify(value), replacements)

    @staticmethod
    def _text_replace(text: str, replacements: Mapping[str, Any]) -> str:
        for placeholder, token in replacements.items():
            if placeholder in text:
                text = text.replace(placeholder, value_stringify(token))
        return text
