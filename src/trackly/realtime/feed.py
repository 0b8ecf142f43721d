"""In-process snapshot feed.

Services call ``notify(collection)`` after a successful write; every live
subscription on that collection reloads its query and receives the fresh
snapshot. Subscriptions are owned by a ``SubscriptionScope`` so that tearing
down a view (or switching its selected user/month) stops delivery into stale
state.
"""

from __future__ import annotations

import logging
from itertools import count
from typing import Any, Callable, Dict, Optional

from ..core.enums import Collection

logger = logging.getLogger(__name__)

Loader = Callable[[], Any]
Listener = Callable[[Any], None]


class Subscription:
    def __init__(self, feed: "SnapshotFeed", sub_id: int, collection: Collection, loader: Loader, listener: Listener):
        self._feed = feed
        self.sub_id = sub_id
        self.collection = collection
        self._loader = loader
        self._listener = listener
        self.active = True

    def deliver(self) -> None:
        if not self.active:
            return
        try:
            snapshot = self._loader()
        except Exception:
            logger.exception("Snapshot load failed for %s (subscription %s)", self.collection.value, self.sub_id)
            return
        try:
            self._listener(snapshot)
        except Exception:
            logger.exception("Snapshot listener failed for %s (subscription %s)", self.collection.value, self.sub_id)

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._feed._remove(self)


class SnapshotFeed:
    def __init__(self):
        self._subs: Dict[Collection, Dict[int, Subscription]] = {}
        self._ids = count(1)

    def subscribe(self, collection: Collection, loader: Loader, listener: Listener) -> Subscription:
        """Register a listener; it immediately receives the current snapshot."""
        sub = Subscription(self, next(self._ids), collection, loader, listener)
        self._subs.setdefault(collection, {})[sub.sub_id] = sub
        sub.deliver()
        return sub

    def notify(self, collection: Collection) -> None:
        for sub in list(self._subs.get(collection, {}).values()):
            sub.deliver()

    def listener_count(self, collection: Collection) -> int:
        return len(self._subs.get(collection, {}))

    def _remove(self, sub: Subscription) -> None:
        self._subs.get(sub.collection, {}).pop(sub.sub_id, None)


class SubscriptionScope:
    """Ties subscription lifetimes to a view session.

    ``track`` keys a subscription by name: tracking a new one under the same
    name (e.g. after the selected month changed) unsubscribes the old one.
    ``dispose`` cascades to every tracked subscription and child scope.
    """

    def __init__(self, feed: SnapshotFeed, *, parent: Optional["SubscriptionScope"] = None):
        self.feed = feed
        self._parent = parent
        self._subs: Dict[str, Subscription] = {}
        self._children: list[SubscriptionScope] = []
        self.disposed = False

    def subscribe(self, name: str, collection: Collection, loader: Loader, listener: Listener) -> Subscription:
        if self.disposed:
            raise RuntimeError("Cannot subscribe on a disposed scope")
        return self.track(name, self.feed.subscribe(collection, loader, listener))

    def track(self, name: str, sub: Subscription) -> Subscription:
        if self.disposed:
            sub.unsubscribe()
            raise RuntimeError("Cannot track on a disposed scope")
        previous = self._subs.pop(name, None)
        if previous and previous is not sub:
            previous.unsubscribe()
        self._subs[name] = sub
        return sub

    def child(self) -> "SubscriptionScope":
        scope = SubscriptionScope(self.feed, parent=self)
        self._children.append(scope)
        return scope

    def release(self, name: str) -> None:
        sub = self._subs.pop(name, None)
        if sub:
            sub.unsubscribe()

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        for child in list(self._children):
            child.dispose()
        self._children.clear()
        for sub in self._subs.values():
            sub.unsubscribe()
        self._subs.clear()
        if self._parent and self in self._parent._children:
            self._parent._children.remove(self)

    def __enter__(self) -> "SubscriptionScope":
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()
