# src/leaklab/events.py
"""
Multicast events with strong and weak handler references.
"""

import inspect
import logging
import weakref
from typing import Any, Callable, List

logger = logging.getLogger(__name__)

Handler = Callable[[Any, Any], None]


class Event:
    """Ordered list of handlers called as ``handler(sender, args)``.

    The event holds a strong reference to every handler. For a bound method
    that includes the instance, so a subscriber stays alive for as long as
    the publisher does unless it unsubscribes.
    """

    def __init__(self):
        self._handlers: List[Handler] = []

    def subscribe(self, handler: Handler) -> None:
        """Add a handler."""
        self._handlers.append(handler)

    def unsubscribe(self, handler: Handler) -> None:
        """Remove the first handler equal to ``handler``; unknown handlers are ignored."""
        try:
            self._handlers.remove(handler)
        except ValueError:
            pass

    def __iadd__(self, handler: Handler) -> "Event":
        self.subscribe(handler)
        return self

    def __isub__(self, handler: Handler) -> "Event":
        self.unsubscribe(handler)
        return self

    def invoke(self, sender: Any, args: Any = None) -> None:
        """Call every handler. Handlers may unsubscribe while being called."""
        for handler in list(self._handlers):
            handler(sender, args)

    __call__ = invoke

    def clear(self) -> None:
        self._handlers.clear()

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} handlers)"


class WeakEvent(Event):
    """Event that does not keep its handlers alive.

    Bound methods are held through ``weakref.WeakMethod`` so the subscriber
    can be collected once nothing else references it; dead entries are
    dropped on the next invoke. Plain functions are held through
    ``weakref.ref``, which means a lambda subscribed only here is gone
    immediately.
    """

    def subscribe(self, handler: Handler) -> None:
        if inspect.ismethod(handler):
            ref = weakref.WeakMethod(handler)
        else:
            ref = weakref.ref(handler)
        self._handlers.append(ref)

    def unsubscribe(self, handler: Handler) -> None:
        for ref in self._handlers:
            if ref() == handler:
                self._handlers.remove(ref)
                return

    def _prune(self) -> None:
        alive = [ref for ref in self._handlers if ref() is not None]
        dropped = len(self._handlers) - len(alive)
        if dropped:
            logger.debug(f"Dropped {dropped} collected handler(s)")
        self._handlers = alive

    def invoke(self, sender: Any, args: Any = None) -> None:
        self._prune()
        for ref in list(self._handlers):
            handler = ref()
            if handler is not None:
                handler(sender, args)

    __call__ = invoke

    def __len__(self) -> int:
        self._prune()
        return len(self._handlers)
