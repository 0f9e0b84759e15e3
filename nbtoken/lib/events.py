"""
Navigation event bus.

Hosts announce the start of a navigation (or any other state change that
should discard per-page tokens) through a `NavigationBus`. Token stores
subscribe to it and reset themselves to their defaults.

Example:
    bus = NavigationBus()
    unsubscribe = bus.onNavigationStart(store.reset)
    bus.navigationStart()  # store is back to its defaults
    unsubscribe()
"""

from typing import Callable, Self
from nbtoken.lib.log import LOG

NavigationCallback = Callable[[], object]


class NavigationBus:
    """Explicit subscription point for navigation-start notifications."""

    def __init__(self: Self) -> None:
        self.subscribers: list[NavigationCallback] = []

    def onNavigationStart(
        self: Self, callback: NavigationCallback
    ) -> Callable[[], None]:
        """Register `callback` for every future navigation start.

        Args:
            callback: Zero-argument callable

        Returns:
            A callable that removes this registration. Calling it twice is harmless.
        """
        self.subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self.subscribers:
                self.subscribers.remove(callback)

        return unsubscribe

    def navigationStart(self: Self) -> int:
        """Notify subscribers in registration order.

        A subscriber that raises is logged and skipped so the remaining
        subscribers are still notified.

        Returns:
            Number of subscribers notified successfully
        """
        notified: int = 0
        for callback in list(self.subscribers):
            try:
                callback()
                notified += 1
            except Exception as e:
                LOG(f"Navigation subscriber {callback!r} failed: {e}")
        return notified
