# src/leaklab/profiler.py
"""
Retention tracking and memory profiling for the leaklab samples.
"""

import gc
import os
import weakref
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

import psutil

from .config import LeakConfig


class RetentionTracker:
    """Tracks objects through weak references to see which survive collection."""

    def __init__(self):
        self._refs: List[Tuple[str, weakref.ref, int]] = []

    def track(self, name: str, obj: Any, nbytes: Optional[int] = None) -> None:
        """Track ``obj`` without keeping it alive."""
        if nbytes is None:
            nbytes = getattr(obj, "nbytes", 0)
        self._refs.append((name, weakref.ref(obj), nbytes))

    def track_ref(self, name: str, ref: weakref.ref, nbytes: int) -> None:
        """Track an object through an existing weak reference."""
        self._refs.append((name, ref, nbytes))

    @property
    def created(self) -> int:
        return len(self._refs)

    def collect(self, generations: int = 2) -> int:
        """Run the garbage collector; returns the number of unreachable objects found."""
        found = 0
        for _ in range(max(generations, 1)):
            found += gc.collect()
        return found

    def survivors(self) -> List[str]:
        """Names of tracked objects that are still alive."""
        return [name for name, ref, _ in self._refs if ref() is not None]

    def retained_bytes(self) -> int:
        return sum(nbytes for _, ref, nbytes in self._refs if ref() is not None)


def captured_objects(func: Callable) -> Dict[str, Any]:
    """Return the variables a function's closure keeps alive, by name."""
    cells = func.__closure__ or ()
    captured = {}
    for name, cell in zip(func.__code__.co_freevars, cells):
        try:
            captured[name] = cell.cell_contents
        except ValueError:
            # Free variable not bound yet
            continue
    return captured


class MemoryProfiler:
    """Process memory profiling and per-pattern statistics."""

    def __init__(self, config: LeakConfig):
        self.config = config
        self.memory_stats = {}
        self.peak_memory = 0
        self.profile_count = 0
        self._lock = threading.Lock()
        self._process = psutil.Process(os.getpid())

    def profile_memory(self) -> Dict[str, float]:
        """Profile current memory usage (MB)."""
        mem = self._process.memory_info()
        vm = psutil.virtual_memory()
        with self._lock:
            self.profile_count += 1
        return {
            'rss': mem.rss / 1024**2,
            'vms': mem.vms / 1024**2,
            'available': vm.available / 1024**2,
            'total': vm.total / 1024**2
        }

    def update_stats(self, name: str, memory_delta: float):
        """Update memory statistics for a pattern."""
        with self._lock:
            if name not in self.memory_stats:
                self.memory_stats[name] = {
                    'count': 0,
                    'total_memory': 0,
                    'peak_memory': 0
                }

            stats = self.memory_stats[name]
            stats['count'] += 1
            stats['total_memory'] += memory_delta
            stats['peak_memory'] = max(stats['peak_memory'], memory_delta)

            self.peak_memory = max(self.peak_memory, memory_delta)

    def get_memory_pressure(self) -> float:
        """Get current system memory pressure (0.0 to 1.0)."""
        stats = self.profile_memory()
        return 1.0 - (stats['available'] / stats['total'])
