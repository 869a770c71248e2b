"""In-process publish/subscribe broker."""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from seonaut.models import Message

log = logging.getLogger(__name__)

Callback = Callable[[Message], object]


@dataclass
class Subscriber:
    """A callback registered for one topic."""

    topic: str
    callback: Callback
    id: uuid.UUID = field(default_factory=uuid.uuid4)


class Broker:
    """Keeps subscribers by topic and delivers published messages to them.

    A subscriber whose callback raises is dropped from its topic; topics are
    removed once they have no subscribers left.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Subscriber]] = {}
        self._lock = threading.Lock()

    def subscribe(self, topic: str, callback: Callback) -> Subscriber:
        """Register ``callback`` for ``topic`` and return the new subscriber."""
        subscriber = Subscriber(topic=topic, callback=callback)
        with self._lock:
            self._subscribers.setdefault(topic, []).append(subscriber)
        return subscriber

    def unsubscribe(self, subscriber: Subscriber) -> None:
        """Remove a subscriber; unknown subscribers are ignored."""
        with self._lock:
            subscribers = self._subscribers.get(subscriber.topic)
            if subscribers is None:
                return
            remaining = [s for s in subscribers if s.id != subscriber.id]
            if remaining:
                self._subscribers[subscriber.topic] = remaining
            else:
                del self._subscribers[subscriber.topic]

    def publish(self, topic: str, message: Message) -> None:
        """Deliver ``message`` to every subscriber of ``topic``."""
        with self._lock:
            kept = []
            for subscriber in self._subscribers.get(topic, []):
                try:
                    subscriber.callback(message)
                except Exception as exc:
                    log.debug("dropping subscriber %s of %s: %s", subscriber.id, topic, exc)
                    continue
                kept.append(subscriber)
            if kept:
                self._subscribers[topic] = kept
            else:
                self._subscribers.pop(topic, None)

    def topics(self) -> list[str]:
        """Topics that currently have subscribers."""
        with self._lock:
            return list(self._subscribers)