"""Change notifications: tell subscribers a user's rows changed so they re-fetch."""

import logging
from collections import defaultdict
from typing import Callable, DefaultDict, List

logger = logging.getLogger(__name__)

# Called with (user_id, table)
Listener = Callable[[str, str], None]


class ChangeFeed:
    """
    In-process publish/subscribe keyed by user id.

    Delivery is best effort: a failing listener is logged and skipped so
    the write that triggered it still succeeds.
    """

    def __init__(self):
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, user_id: str, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners[user_id].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[user_id]:
                self._listeners[user_id].remove(listener)

        return unsubscribe

    def publish(self, user_id: str, table: str) -> None:
        for listener in list(self._listeners.get(user_id, [])):
            try:
                listener(user_id, table)
            except Exception:
                logger.exception("Change listener failed for %s/%s", user_id, table)
