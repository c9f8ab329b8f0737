"""Session state container with explicit subscriptions."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, fields, replace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of the credentials and storefront of a session."""

    developer_token: str | None = None
    user_token: str | None = None
    storefront: str | None = None

    @property
    def has_user_token(self) -> bool:
        return bool(self.user_token)


Subscriber = Callable[[SessionSnapshot], None]

_FIELDS = {f.name for f in fields(SessionSnapshot)}


class SessionState:
    """Holds the current session snapshot and notifies subscribers on change.

    Readers query `snapshot()` synchronously. Subscribers registered with
    `subscribe()` are called in registration order, on the caller's thread,
    after every `update()` that actually changes a value.
    """

    def __init__(self, snapshot: SessionSnapshot | None = None):
        self._snapshot = snapshot or SessionSnapshot()
        self._subscribers: list[Subscriber] = []

    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback` and return a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def update(self, **changes: str | None) -> bool:
        """Apply changes to the snapshot.

        Args:
            **changes: Any of developer_token, user_token, storefront

        Returns:
            True if the snapshot changed and subscribers were notified

        Raises:
            TypeError: If an unknown field is given
        """
        unknown = set(changes) - _FIELDS
        if unknown:
            raise TypeError(f"Unknown session fields: {sorted(unknown)}")

        updated = replace(self._snapshot, **changes)
        if updated == self._snapshot:
            return False

        self._snapshot = updated
        logger.debug(f"Session updated: {sorted(changes)}")
        for callback in list(self._subscribers):
            callback(updated)
        return True
