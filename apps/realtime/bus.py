# apps/realtime/bus.py
"""
Szyna zdarzeń zmian w tabelach (tasks, notifications).

Publikacja jest synchroniczna i nie blokuje: każda subskrypcja ma własną,
ograniczoną kolejkę; gdy kolejka jest pełna, zdarzenie dla tej subskrypcji
przepada (klient i tak odświeży dane przy następnym zdarzeniu).
"""
import json
import logging
import queue
from dataclasses import dataclass, field
from threading import Lock, RLock
from typing import Callable, Iterable, Optional

from django.conf import settings

from apps.core.domain.entities import AuthContext

logger = logging.getLogger(__name__)

INSERT = 'INSERT'
UPDATE = 'UPDATE'
DELETE = 'DELETE'


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    action: str
    row_id: int
    payload: dict = field(default_factory=dict)

    def as_sse(self) -> str:
        data = json.dumps({'table': self.table, 'action': self.action, 'id': self.row_id, 'row': self.payload},
                          default=str)
        return f"event: {self.table}\ndata: {data}\n\n"


class Subscription:
    def __init__(self, bus, ctx: AuthContext, tables: Iterable[str],
                 visible: Callable[[AuthContext, ChangeEvent], bool], maxsize: int):
        self.bus = bus
        self.ctx = ctx
        self.tables = frozenset(tables)
        self.visible = visible
        self.dropped = 0
        self._dropped_lock = Lock()
        self._queue = queue.Queue(maxsize=maxsize)

    def wants(self, event: ChangeEvent) -> bool:
        if event.table not in self.tables:
            return False
        try:
            return bool(self.visible(self.ctx, event))
        except Exception:
            # Błąd filtra dotyczy tylko tej subskrypcji
            logger.warning("Visibility check failed for user %s", self.ctx.user_id, exc_info=True)
            return False

    def offer(self, event: ChangeEvent) -> bool:
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            with self._dropped_lock:
                self.dropped += 1
            logger.warning("Realtime queue full for user %s, dropping %s event", self.ctx.user_id, event.table)
            return False
        return True

    def get(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self):
        self.bus.unsubscribe(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class EventBus:
    def __init__(self, queue_size: int = 256):
        self.queue_size = queue_size
        self._subscriptions = []
        self._lock = RLock()

    def subscribe(self, ctx: AuthContext, tables: Iterable[str],
                  visible: Callable[[AuthContext, ChangeEvent], bool]) -> Subscription:
        subscription = Subscription(self, ctx, tables, visible, self.queue_size)
        with self._lock:
            self._subscriptions.append(subscription)
        logger.debug("User %s subscribed to %s", ctx.user_id, sorted(subscription.tables))
        return subscription

    def unsubscribe(self, subscription: Subscription):
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def publish(self, event: ChangeEvent) -> int:
        """Zwraca liczbę subskrypcji, do których trafiło zdarzenie."""
        with self._lock:
            targets = list(self._subscriptions)
        delivered = 0
        for subscription in targets:
            if subscription.wants(event) and subscription.offer(event):
                delivered += 1
        return delivered

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)


_bus = None
_bus_lock = RLock()


def get_bus() -> EventBus:
    """Wspólna szyna procesu."""
    global _bus
    with _bus_lock:
        if _bus is None:
            _bus = EventBus(queue_size=settings.REALTIME_QUEUE_SIZE)
        return _bus
