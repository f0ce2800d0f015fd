# src/leaklab/__init__.py
"""
leaklab: runnable samples of reference-retention memory leaks
Each sample shows the reference that keeps garbage alive and the fix that releases it
"""

from .enums import LeakPattern
from .config import LeakConfig, LeakReport
from .payload import Payload
from .events import Event, WeakEvent
from .timers import Timer
from .patterns import (
    DataPublisher,
    DataSubscriber,
    CacheManager,
    TimerExample,
    ClosureExample,
    OrderService,
    OrderWindow,
)
from .profiler import MemoryProfiler, RetentionTracker, captured_objects
from .scenarios import run_scenario, run_all

__version__ = "0.1.0"
__all__ = [
    "LeakPattern",
    "LeakConfig",
    "LeakReport",
    "Payload",
    "Event",
    "WeakEvent",
    "Timer",
    "DataPublisher",
    "DataSubscriber",
    "CacheManager",
    "TimerExample",
    "ClosureExample",
    "OrderService",
    "OrderWindow",
    "MemoryProfiler",
    "RetentionTracker",
    "captured_objects",
    "run_scenario",
    "run_all",
]
