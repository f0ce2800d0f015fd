# src/leaklab/scenarios.py
"""
Runs each leak sample in its leaky or fixed form and measures what survives
a garbage collection.
"""

import logging
from typing import Callable, Dict, List, Optional

from .enums import LeakPattern
from .config import LeakConfig, LeakReport
from .payload import Payload
from .profiler import MemoryProfiler, RetentionTracker
from .patterns import (
    CacheManager,
    ClosureExample,
    DataPublisher,
    DataSubscriber,
    OrderService,
    OrderWindow,
    TimerExample,
)


logger = logging.getLogger(__name__)


# Each builder creates its objects in its own frame so that no local survives
# it. Whatever it returns plays the part of the long-lived owner (a publisher,
# a service, a caller holding an action) and stays alive until measured.

def _build_event_handler(config: LeakConfig, tracker: RetentionTracker, fixed: bool):
    publisher = DataPublisher()
    for i in range(config.subscriber_count):
        subscriber = DataSubscriber(f"Subscriber-{i}", publisher, config.subscriber_payload_bytes)
        tracker.track(subscriber.name, subscriber.payload)
        logger.info(f"Created subscriber {i} ({subscriber.payload.nbytes} bytes)")
        if fixed:
            subscriber.dispose()
    publisher.publish_data("hello")
    return publisher


def _build_static_collection(config: LeakConfig, tracker: RetentionTracker, fixed: bool):
    for i in range(config.cache_iterations):
        entry = Payload(config.cache_entry_bytes)
        CacheManager.add_to_cache(entry)
        tracker.track(f"cache-entry-{i}", entry)
        logger.info(f"Added {entry.nbytes} bytes to static cache (iteration {i})")
    if fixed:
        CacheManager.clear_cache()
    return None


def _build_undisposed_timer(config: LeakConfig, tracker: RetentionTracker, fixed: bool):
    for i in range(config.timer_count):
        example = TimerExample(config.timer_payload_bytes, config.timer_interval)
        example.start()
        tracker.track(f"timer-{i}", example.payload)
        if fixed:
            example.dispose()
    return None


def _build_closure_capture(config: LeakConfig, tracker: RetentionTracker, fixed: bool):
    example = ClosureExample()
    if fixed:
        action = example.create_action(config.closure_payload_bytes)
    else:
        action = example.create_leaky_action(config.closure_payload_bytes)
    tracker.track_ref("closure-action", example.payload_ref, config.closure_payload_bytes)
    return action


def _build_ui_subscription(config: LeakConfig, tracker: RetentionTracker, fixed: bool):
    service = OrderService()
    for i in range(config.window_count):
        window = OrderWindow(f"Window-{i}", service, config.window_payload_bytes)
        tracker.track(window.window_id, window.payload)
        logger.info(f"User opened {window.window_id} ({window.payload.nbytes} bytes)")
        if fixed:
            window.close()
    service.place_order(100)
    return service


BUILDERS: Dict[LeakPattern, Callable] = {
    LeakPattern.EVENT_HANDLER: _build_event_handler,
    LeakPattern.STATIC_COLLECTION: _build_static_collection,
    LeakPattern.UNDISPOSED_TIMER: _build_undisposed_timer,
    LeakPattern.CLOSURE_CAPTURE: _build_closure_capture,
    LeakPattern.UI_SUBSCRIPTION: _build_ui_subscription,
}


def stats_key(pattern: LeakPattern, fixed: bool) -> str:
    """Name under which a run is recorded in ``MemoryProfiler.memory_stats``."""
    return f"{pattern.value}/{'fixed' if fixed else 'leaky'}"


def _configure_logging(config: LeakConfig):
    package_logger = logging.getLogger("leaklab")
    if config.verbose:
        package_logger.setLevel(logging.INFO)
    else:
        package_logger.setLevel(logging.WARNING)


def run_scenario(pattern: LeakPattern, config: Optional[LeakConfig] = None,
                 fixed: bool = False, profiler: Optional[MemoryProfiler] = None) -> LeakReport:
    """Run one sample and report how many of its payloads survived collection."""
    config = config or LeakConfig()
    _configure_logging(config)
    profiler = profiler or MemoryProfiler(config)
    tracker = RetentionTracker()

    rss_before = profiler.profile_memory()['rss']
    owner = BUILDERS[pattern](config, tracker, fixed)
    tracker.collect(config.collect_generations)
    survivors = tracker.survivors()
    rss_delta = profiler.profile_memory()['rss'] - rss_before
    profiler.update_stats(stats_key(pattern, fixed), rss_delta)

    report = LeakReport(
        pattern=pattern,
        fixed=fixed,
        created=tracker.created,
        retained=len(survivors),
        retained_bytes=tracker.retained_bytes(),
        rss_delta_mb=rss_delta,
    )
    if report.leaked:
        logger.info(f"{pattern.value}: {report.retained}/{report.created} still in memory after gc.collect()")
    else:
        logger.info(f"{pattern.value}: everything collected")

    del owner
    return report


def run_all(config: Optional[LeakConfig] = None, fixed: bool = False,
            patterns: Optional[List[LeakPattern]] = None,
            profiler: Optional[MemoryProfiler] = None) -> List[LeakReport]:
    """Run the given patterns (all of them by default) in declaration order."""
    config = config or LeakConfig()
    profiler = profiler or MemoryProfiler(config)
    selected = patterns or list(LeakPattern)
    return [
        run_scenario(pattern, config, fixed=fixed, profiler=profiler)
        for pattern in LeakPattern
        if pattern in selected
    ]
