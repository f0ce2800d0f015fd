# src/leaklab/config.py
"""
Configuration and data structures for the leaklab samples.
"""

import math
from dataclasses import dataclass, replace

from .enums import LeakPattern


# Payload sizes used by the original samples
SUBSCRIBER_PAYLOAD_BYTES = 10_000_000
CACHE_ENTRY_BYTES = 10_000_000
TIMER_PAYLOAD_BYTES = 5_000_000
CLOSURE_PAYLOAD_BYTES = 50_000_000
WINDOW_PAYLOAD_BYTES = 20_000_000


@dataclass
class LeakConfig:
    """Sizes and counts used when running the leak scenarios."""
    subscriber_payload_bytes: int = SUBSCRIBER_PAYLOAD_BYTES
    cache_entry_bytes: int = CACHE_ENTRY_BYTES
    timer_payload_bytes: int = TIMER_PAYLOAD_BYTES
    closure_payload_bytes: int = CLOSURE_PAYLOAD_BYTES
    window_payload_bytes: int = WINDOW_PAYLOAD_BYTES

    subscriber_count: int = 5
    cache_iterations: int = 3
    window_count: int = 3
    timer_count: int = 1
    timer_interval: float = 1.0  # seconds between elapsed events

    collect_generations: int = 2  # gc.collect() passes before measuring

    # Debug/Verbose mode
    verbose: bool = False

    def scaled(self, factor: float) -> "LeakConfig":
        """Return a copy with every payload size multiplied by ``factor``."""
        if not math.isfinite(factor) or factor <= 0:
            raise ValueError(f"scale factor must be a positive finite number, got {factor}")
        return replace(
            self,
            subscriber_payload_bytes=int(self.subscriber_payload_bytes * factor),
            cache_entry_bytes=int(self.cache_entry_bytes * factor),
            timer_payload_bytes=int(self.timer_payload_bytes * factor),
            closure_payload_bytes=int(self.closure_payload_bytes * factor),
            window_payload_bytes=int(self.window_payload_bytes * factor),
        )


@dataclass
class LeakReport:
    """Outcome of running one scenario."""
    pattern: LeakPattern
    fixed: bool
    created: int
    retained: int
    retained_bytes: int
    rss_delta_mb: float = 0.0

    @property
    def leaked(self) -> bool:
        return self.retained > 0

    @property
    def retained_mb(self) -> float:
        return self.retained_bytes / 1024**2
