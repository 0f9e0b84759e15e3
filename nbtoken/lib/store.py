"""
Token store for nbtoken.

Holds the current nested token tree and addresses it with delimiter-joined
paths such as "site:name". The tree starts out as a deep copy of the
configured defaults and goes back to one on every reset.

Example:
    store = TokenStore(TokenConfig(defaults={"site": {"name": "Acme"}}))
    await store.init()
    store.set("page:title", "Home")
    store.get("page:title")        # "Home"
    store.get("page:missing", "-")  # "-"
"""

import copy
import threading
from typing import Any, Callable, Self
from nbtoken.lib.events import NavigationBus
from nbtoken.lib.log import LOG
from nbtoken.models.dataModel import TokenConfig


class InvalidPath(ValueError):
    """Raised when a token path is not a non-empty string."""


class TokenStore:
    """Owner of a token tree.

    `None` stands for "no value": `clear()` keeps the key but maps it to
    `None`, and `get()` answers with the default for it.

    Attributes:
        config: Delimiter and defaults tree
        tokens: The live token tree
        lock: Re-entrant lock held around every tree access
    """

    def __init__(self: Self, config: TokenConfig | None = None) -> None:
        self.config: TokenConfig = config or TokenConfig()
        self.tokens: dict[str, Any] = {}
        self.lock: threading.RLock = threading.RLock()
        self.initialized: bool = False

    @property
    def delimiter(self: Self) -> str:
        return self.config.delimiter

    async def init(self: Self) -> bool:
        """Reset to defaults the first time the store is initialized.

        Later calls leave the tree alone. Always resolves to True.
        """
        return self.init_sync()

    def init_sync(self: Self) -> bool:
        """Synchronous init() for callers that are not running a coroutine."""
        with self.lock:
            if not self.initialized:
                self.initialized = True
                self.reset()
                LOG("Token store initialized")
        return True

    def reset(self: Self) -> None:
        """Replace the tree with a fresh deep copy of the defaults."""
        with self.lock:
            self.tokens = copy.deepcopy(self.config.defaults)
        LOG("Token store reset to defaults")

    def subscribe(self: Self, bus: NavigationBus) -> Callable[[], None]:
        """Reset this store on every navigation start announced on `bus`."""
        return bus.onNavigationStart(self.reset)

    def get(self: Self, path: str, defaultValue: Any = None) -> Any:
        """Return the value at `path`, or `defaultValue` when it is unset.

        Lists are leaves: a path never indexes into one.

        Raises:
            InvalidPath: If path is not a non-empty string
        """
        segments: list[str] = self._segments(path)
        with self.lock:
            node: Any = self.tokens
            for segment in segments:
                if not isinstance(node, dict) or segment not in node:
                    return defaultValue
                node = node[segment]
        return defaultValue if node is None else node

    def getAll(self: Self) -> dict[str, Any]:
        """Return the live tree. Later mutations are visible through it."""
        return self.tokens

    def snapshot(self: Self) -> dict[str, Any]:
        """Return a deep copy of the current tree."""
        with self.lock:
            return copy.deepcopy(self.tokens)

    def set(self: Self, path: str, value: Any) -> dict[str, Any]:
        """Assign `value` at `path`, creating intermediate mappings.

        An intermediate that is not a mapping is replaced by an empty one.

        Returns:
            The root of the token tree

        Raises:
            InvalidPath: If path is not a non-empty string
        """
        segments: list[str] = self._segments(path)
        with self.lock:
            node: dict[str, Any] = self.tokens
            for segment in segments[:-1]:
                child: Any = node.get(segment)
                if not isinstance(child, dict):
                    child = {}
                    node[segment] = child
                node = child
            node[segments[-1]] = value
        LOG(f"Token {path} set")
        return self.tokens

    def clear(self: Self, path: str) -> dict[str, Any]:
        """Unset `path`. The key stays in the tree, mapped to None."""
        return self.set(path, None)

    def _segments(self: Self, path: Any) -> list[str]:
        if not isinstance(path, str) or not path:
            raise InvalidPath(f"Token path must be a non-empty string, got {path!r}")
        return path.split(self.delimiter)
