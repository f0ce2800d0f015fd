# src/leaklab/patterns.py
"""
The five leak samples.

Each class keeps the reference that causes its leak in plain sight and
carries the method that fixes it.
"""

import logging
import weakref
from decimal import Decimal
from typing import Callable, List, Optional

from .config import (
    SUBSCRIBER_PAYLOAD_BYTES,
    CACHE_ENTRY_BYTES,
    TIMER_PAYLOAD_BYTES,
    CLOSURE_PAYLOAD_BYTES,
    WINDOW_PAYLOAD_BYTES,
)
from .events import Event, WeakEvent
from .payload import Payload
from .timers import Timer


logger = logging.getLogger(__name__)


# ============================================
# Event handler leak
# ============================================

class DataPublisher:
    """Raises ``data_received`` for every published message."""

    def __init__(self, weak_events: bool = False):
        self.data_received = WeakEvent() if weak_events else Event()

    def publish_data(self, data: str):
        self.data_received.invoke(self, data)


class DataSubscriber:
    """Subscriber that leaks unless it is disposed.

    Subscribing hands the publisher a bound method, and the bound method
    references this object. The publisher now keeps the subscriber (and its
    payload) alive.
    """

    def __init__(self, name: str, publisher: DataPublisher,
                 payload_size: int = SUBSCRIBER_PAYLOAD_BYTES):
        self.name = name
        self.payload = Payload(payload_size)
        self.received: List[str] = []
        self._publisher = publisher
        publisher.data_received += self.on_data_received

    def on_data_received(self, sender, data: str):
        self.received.append(data)
        logger.info(f"{self.name} received: {data}")

    def dispose(self):
        """Unsubscribe from the publisher."""
        if self._publisher is not None:
            self._publisher.data_received -= self.on_data_received
            self._publisher = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()


# ============================================
# Static collection leak
# ============================================

class CacheManager:
    """Process-wide cache backed by a class-level list.

    Nothing is ever removed, so everything added stays alive for the
    lifetime of the process.
    """

    _cache: List[Payload] = []

    @classmethod
    def add_to_cache(cls, data: Payload):
        cls._cache.append(data)

    @classmethod
    def clear_cache(cls):
        """Drop every cached entry."""
        cls._cache.clear()

    @classmethod
    def size(cls) -> int:
        return len(cls._cache)

    @classmethod
    def total_bytes(cls) -> int:
        return sum(entry.nbytes for entry in cls._cache)


# ============================================
# Undisposed timer
# ============================================

class TimerExample:
    """Owns a timer whose handler closes over ``self``."""

    def __init__(self, payload_size: int = TIMER_PAYLOAD_BYTES, interval: float = 1.0):
        self.payload = Payload(payload_size)
        self.interval = interval
        self.process_count = 0
        self._timer: Optional[Timer] = None

    def start(self):
        self.dispose()
        self._timer = Timer(self.interval)
        # The running timer thread now reaches this object through the lambda
        self._timer.elapsed += lambda sender, fire_time: self.process_data()
        self._timer.start()

    def process_data(self):
        self.process_count += 1
        logger.info("Processing...")

    def dispose(self):
        """Stop and dispose the timer."""
        if self._timer is not None:
            self._timer.dispose()
            self._timer = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()


# ============================================
# Closure capture
# ============================================

class ClosureExample:
    """Returns actions that do or do not capture a large buffer.

    ``payload_ref`` is a weak reference to the buffer allocated by the most
    recent call, for observing whether it outlives the call.
    """

    def __init__(self):
        self.payload_ref: Optional[weakref.ref] = None

    def create_leaky_action(self, payload_size: int = CLOSURE_PAYLOAD_BYTES) -> Callable[[], int]:
        large_object = Payload(payload_size)
        self.payload_ref = weakref.ref(large_object)

        def action():
            logger.info(f"Data size: {len(large_object)}")
            return len(large_object)

        return action

    def create_action(self, payload_size: int = CLOSURE_PAYLOAD_BYTES) -> Callable[[], int]:
        """Like ``create_leaky_action`` but captures only the size."""
        large_object = Payload(payload_size)
        self.payload_ref = weakref.ref(large_object)
        size = len(large_object)

        def action():
            logger.info(f"Data size: {size}")
            return size

        return action


# ============================================
# UI subscription leak
# ============================================

class OrderService:
    """Long-lived service raising ``order_placed``."""

    def __init__(self, weak_events: bool = False):
        self.order_placed = WeakEvent() if weak_events else Event()

    def place_order(self, amount):
        if isinstance(amount, float):
            amount = str(amount)
        self.order_placed.invoke(self, Decimal(amount))


class OrderWindow:
    """Short-lived window subscribed to a long-lived service.

    Closing the window on screen does not release it: the service still
    holds its handler. ``close`` unsubscribes.
    """

    def __init__(self, window_id: str, service: OrderService,
                 payload_size: int = WINDOW_PAYLOAD_BYTES):
        self.window_id = window_id
        self.payload = Payload(payload_size)
        self.messages: List[str] = []
        self._service = service
        service.order_placed += self.on_order_placed

    @property
    def closed(self) -> bool:
        return self._service is None

    def on_order_placed(self, sender, amount: Decimal):
        message = f"Window {self.window_id}: Order placed for ${amount}"
        self.messages.append(message)
        logger.info(message)

    def close(self):
        if self._service is not None:
            self._service.order_placed -= self.on_order_placed
            self._service = None
