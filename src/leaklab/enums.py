# src/leaklab/enums.py
"""
Enumeration types for the leaklab samples.
"""

from enum import Enum


class LeakPattern(Enum):
    """Reference-retention patterns demonstrated by the samples."""
    EVENT_HANDLER = "event_handler"
    STATIC_COLLECTION = "static_collection"
    UNDISPOSED_TIMER = "undisposed_timer"
    CLOSURE_CAPTURE = "closure_capture"
    UI_SUBSCRIPTION = "ui_subscription"

    @property
    def remedy(self) -> str:
        """One-line fix for the pattern."""
        return REMEDIES[self]


REMEDIES = {
    LeakPattern.EVENT_HANDLER: "Always unsubscribe from events (dispose the subscriber)",
    LeakPattern.STATIC_COLLECTION: "Clear static collections when appropriate",
    LeakPattern.UNDISPOSED_TIMER: "Stop and dispose timers when their owner is done",
    LeakPattern.CLOSURE_CAPTURE: "Be careful with closures capturing large objects",
    LeakPattern.UI_SUBSCRIPTION: "Unsubscribe on close, or use weak event subscriptions",
}
