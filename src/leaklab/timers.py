# src/leaklab/timers.py
"""
Interval timer that raises an event from a worker thread.
"""

import logging
import threading
import time
import weakref
from typing import Optional

from .events import Event

logger = logging.getLogger(__name__)


class Timer:
    """Raises ``elapsed(timer, fire_time)`` every ``interval`` seconds.

    While running, the worker thread references the timer, the timer
    references its handlers, and the handlers reference whatever they
    capture. None of it can be collected until the timer is stopped.
    """

    _live = weakref.WeakSet()

    def __init__(self, interval: float, auto_reset: bool = True):
        if interval <= 0:
            raise ValueError(f"timer interval must be positive, got {interval}")
        self.interval = interval
        self.auto_reset = auto_reset
        self.elapsed = Event()
        self.fire_count = 0
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._running = False
        self._disposed = False
        self._lock = threading.Lock()
        Timer._live.add(self)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def disposed(self) -> bool:
        return self._disposed

    def start(self):
        """Start raising elapsed events."""
        with self._lock:
            if self._disposed:
                raise RuntimeError("cannot start a disposed timer")
            if self._running:
                return
            self._running = True
            self._stop_event = threading.Event()
            self._thread = threading.Thread(target=self._run, args=(self._stop_event,))
            self._thread.daemon = True
            self._thread.start()

    def stop(self):
        """Stop the worker thread."""
        with self._lock:
            self._running = False
            self._stop_event.set()
            thread = self._thread
            self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def dispose(self):
        """Stop the timer and release its handlers."""
        if self._disposed:
            return
        self.stop()
        self.elapsed.clear()
        self._disposed = True
        Timer._live.discard(self)

    def _run(self, stop_event: threading.Event):
        """Worker loop."""
        while not stop_event.wait(self.interval):
            self.fire_count += 1
            try:
                self.elapsed.invoke(self, time.time())
            except Exception:
                logger.exception("Unhandled exception in timer elapsed handler")
            if not self.auto_reset:
                with self._lock:
                    self._running = False
                break

    @classmethod
    def live_timers(cls):
        return list(cls._live)

    @classmethod
    def dispose_all(cls) -> int:
        """Dispose every timer that is still alive. Returns how many were disposed."""
        timers = list(cls._live)
        for timer in timers:
            timer.dispose()
        return len(timers)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else ("running" if self._running else "stopped")
        return f"Timer(interval={self.interval}, {state})"
