"""
Application session wiring for nbtoken.

One `TokenSession` owns the token store, the replacer reading from it and the
navigation bus that resets it. The CLI keeps a single session for the life of
the process; library users create their own.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional
import uuid
from nbtoken.lib.events import NavigationBus
from nbtoken.lib.log import LOG
from nbtoken.lib.replacer import TokenReplacer
from nbtoken.lib.store import TokenStore
from nbtoken.models.dataModel import TokenConfig


def sessionID_generate(title: str = "") -> str:
    """
    Generate a unique session ID in the format YYYYMMDDHHmmSSmmm-<uuid>[-<title>].

    :param title: Optional title to include in the session ID.
    :return: A session ID string.
    """
    now = datetime.now()
    timestamp = now.strftime("%Y%m%d%H%M%S") + f"{now.microsecond // 1000:03d}"
    session_id = f"{timestamp}-{uuid.uuid4().hex}"
    if title:
        session_id += f"-{title}"
    return session_id


@dataclass
class TokenSession:
    """Store, replacer and navigation bus for one application session.

    Attributes:
        store: The session's token store
        replacer: Replacer defaulting to the session's store
        bus: Navigation bus the store is subscribed to
        id: Session identifier
    """

    store: TokenStore
    replacer: TokenReplacer
    bus: NavigationBus
    id: str = field(default_factory=sessionID_generate)
    unsubscribe: Optional[Callable[[], None]] = None

    @classmethod
    def create(
        cls,
        config: TokenConfig | None = None,
        format_value: Callable[[Any], Any] | None = None,
    ) -> "TokenSession":
        """Build a session whose store resets on every navigation start."""
        store: TokenStore = TokenStore(config)
        bus: NavigationBus = NavigationBus()
        session = cls(
            store=store,
            replacer=TokenReplacer(store=store, format_value=format_value),
            bus=bus,
        )
        session.unsubscribe = store.subscribe(bus)
        LOG(f"Token session {session.id} created")
        return session


# Process-wide session used by the CLI commands
current_session: Optional[TokenSession] = None


def session_get() -> TokenSession:
    """Return the CLI session, creating it with the loaded configuration on first use."""
    global current_session
    if current_session is None:
        from nbtoken.config.settings import config_load

        current_session = TokenSession.create(config_load())
        current_session.store.init_sync()
    return current_session


def session_set(session: Optional[TokenSession]) -> None:
    """Install `session` as the CLI session (None drops it)."""
    global current_session
    current_session = session
