"""
Change notifications.

ChangeNotifier is the fan-out called after every committed write: the game repository notifies per game id,
the invite service per (feed, player) key.
SubscriptionRegistry keeps at most one live subscription per key for a client, so re-opening a game screen
never stacks listeners, and leaving it (or logging out) tears them down.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Hashable
from uuid import UUID

from parlor.core.models import GameModel

logger = logging.getLogger(__name__)

Listener = Callable[[Any, Any], None]
OnChange = Callable[[UUID, GameModel], None]
Unsubscribe = Callable[[], None]
SubscribeFn = Callable[[Any, Listener], Unsubscribe]


class ChangeNotifier:
    """Per key listeners, called in subscription order."""

    def __init__(self) -> None:
        self._listeners: dict[Hashable, list[Listener]] = defaultdict(list)

    def subscribe(self, key: Hashable, on_change: Listener) -> Unsubscribe:
        self._listeners[key].append(on_change)

        def unsubscribe() -> None:
            listeners = self._listeners.get(key, [])
            if on_change in listeners:
                listeners.remove(on_change)
            if not listeners:
                self._listeners.pop(key, None)

        return unsubscribe

    def notify(self, key: Hashable, payload: Any) -> None:
        # copy: a listener may unsubscribe while being notified
        for on_change in list(self._listeners.get(key, [])):
            try:
                on_change(key, payload)
            except Exception:
                # the write is already committed; one broken listener must not starve the others
                logger.exception("Listener for %s failed", key)

    def listener_count(self, key: Hashable) -> int:
        return len(self._listeners.get(key, []))


class SubscriptionRegistry:
    """Explicit lifecycle for keyed subscriptions: ensure / dispose / dispose_all"""

    def __init__(self, subscribe: SubscribeFn) -> None:
        self._subscribe = subscribe
        self._active: dict[Hashable, Unsubscribe] = {}

    def ensure(self, key: Hashable, on_change: Listener) -> bool:
        """Subscribe unless a subscription for this key is already live. Returns True if a new one was made."""
        if key in self._active:
            return False
        self._active[key] = self._subscribe(key, on_change)
        logger.debug("Subscribed to %s", key)
        return True

    def dispose(self, key: Hashable) -> bool:
        unsubscribe = self._active.pop(key, None)
        if unsubscribe is None:
            return False
        unsubscribe()
        logger.debug("Unsubscribed from %s", key)
        return True

    def dispose_all(self) -> None:
        for key in list(self._active):
            self.dispose(key)

    def active_keys(self) -> list[Hashable]:
        return list(self._active)
