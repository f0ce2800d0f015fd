# tests/test_memory_profiler.py
"""
Unit tests for MemoryProfiler and RetentionTracker.
"""

import gc
import weakref

import pytest
from unittest.mock import patch
from leaklab import LeakConfig, MemoryProfiler, Payload, RetentionTracker, captured_objects


class TestMemoryProfiler:
    """Test memory profiling functionality."""

    def test_initialization(self):
        """Test profiler initialization."""
        config = LeakConfig()
        profiler = MemoryProfiler(config)

        assert profiler.config == config
        assert profiler.memory_stats == {}
        assert profiler.peak_memory == 0
        assert profiler.profile_count == 0

    def test_profile_memory(self):
        """Test process memory profiling."""
        profiler = MemoryProfiler(LeakConfig())

        stats = profiler.profile_memory()

        assert set(stats) == {"rss", "vms", "available", "total"}
        assert all(v >= 0 for v in stats.values())
        assert stats["rss"] > 0
        assert profiler.profile_count == 1

    def test_rss_sees_large_allocation(self):
        profiler = MemoryProfiler(LeakConfig())
        before = profiler.profile_memory()["rss"]

        payload = Payload(64 * 1024**2)
        payload.data[::4096] = b"\x01" * len(payload.data[::4096])  # touch every page
        after = profiler.profile_memory()["rss"]

        assert after - before > 32
        del payload

    def test_update_stats(self):
        """Test statistics update."""
        profiler = MemoryProfiler(LeakConfig())

        profiler.update_stats("event_handler", 100.5)
        profiler.update_stats("event_handler", 150.3)
        profiler.update_stats("closure_capture", 200.0)

        assert "event_handler" in profiler.memory_stats
        assert profiler.memory_stats["event_handler"]["count"] == 2
        assert profiler.memory_stats["event_handler"]["total_memory"] == pytest.approx(250.8)
        assert profiler.memory_stats["event_handler"]["peak_memory"] == 150.3
        assert profiler.peak_memory == 200.0

    def test_memory_pressure(self):
        """Test memory pressure calculation."""
        profiler = MemoryProfiler(LeakConfig())

        with patch.object(profiler, 'profile_memory') as mock_profile:
            mock_profile.return_value = {
                'available': 2000,
                'total': 8000
            }

            pressure = profiler.get_memory_pressure()

            assert pressure == 0.75

    def test_peak_memory_tracking(self):
        """Test peak memory tracking across multiple updates."""
        profiler = MemoryProfiler(LeakConfig())

        profiler.update_stats("a", 100.0)
        assert profiler.peak_memory == 100.0

        profiler.update_stats("b", 250.0)
        assert profiler.peak_memory == 250.0

        profiler.update_stats("c", 150.0)
        assert profiler.peak_memory == 250.0

    def test_thread_safety(self):
        """Test that the profiler handles concurrent updates safely."""
        import threading

        profiler = MemoryProfiler(LeakConfig())

        def update_stats(name, iterations):
            for i in range(iterations):
                profiler.update_stats(name, float(i))

        threads = []
        for i in range(3):
            t = threading.Thread(target=update_stats, args=(f"pattern_{i}", 100))
            threads.append(t)
            t.start()

        for t in threads:
            t.join()

        for i in range(3):
            assert profiler.memory_stats[f"pattern_{i}"]["count"] == 100


class TestRetentionTracker:
    """Test weakref-based survivor tracking."""

    def test_track_and_release(self):
        tracker = RetentionTracker()
        kept = Payload(100)
        dropped = Payload(300)
        tracker.track("kept", kept)
        tracker.track("dropped", dropped)

        del dropped
        tracker.collect()

        assert tracker.created == 2
        assert tracker.survivors() == ["kept"]
        assert tracker.retained_bytes() == 100

    def test_explicit_size(self):
        class Thing:
            pass

        tracker = RetentionTracker()
        thing = Thing()
        tracker.track("thing", thing, nbytes=42)

        assert tracker.retained_bytes() == 42

    def test_object_without_size_counts_zero_bytes(self):
        class Thing:
            pass

        tracker = RetentionTracker()
        thing = Thing()
        tracker.track("thing", thing)

        assert tracker.survivors() == ["thing"]
        assert tracker.retained_bytes() == 0

    def test_track_ref(self):
        tracker = RetentionTracker()
        payload = Payload(10)
        tracker.track_ref("payload", weakref.ref(payload), 10)

        assert tracker.retained_bytes() == 10
        del payload
        gc.collect()
        assert tracker.survivors() == []

    def test_collect_finds_cycles(self):
        class Node:
            pass

        tracker = RetentionTracker()
        a, b = Node(), Node()
        a.other, b.other = b, a
        tracker.track("a", a)
        del a, b

        assert tracker.collect() > 0
        assert tracker.survivors() == []


class TestCapturedObjects:
    """Test closure inspection."""

    def test_plain_function_captures_nothing(self):
        def f():
            return 1

        assert captured_objects(f) == {}

    def test_closure_cells(self):
        big = Payload(8)
        label = "x"

        def f():
            return big, label

        assert captured_objects(f) == {"big": big, "label": "x"}

    def test_unbound_free_variable_is_skipped(self):
        def f():
            return later

        before = captured_objects(f)
        later = 1

        assert before == {}
        assert captured_objects(f) == {"later": 1}
