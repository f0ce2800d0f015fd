"""
Basic example of watching a subscription leak and its two fixes
"""

from leaklab import DataPublisher, DataSubscriber, RetentionTracker


def subscribe_and_forget(publisher, tracker, dispose=False):
    """Open a few subscribers and lose every reference to them."""
    for i in range(3):
        subscriber = DataSubscriber(f"Subscriber-{i}", publisher, payload_size=1_000_000)
        tracker.track(subscriber.name, subscriber.payload)
        if dispose:
            subscriber.dispose()


def report(title, tracker):
    tracker.collect()
    print(f"{title}: {len(tracker.survivors())}/{tracker.created} alive after gc.collect() "
          f"({tracker.retained_bytes() / 1024**2:.1f} MB)")


def main():
    print("=== Strong event, no unsubscribe ===")
    publisher = DataPublisher()
    tracker = RetentionTracker()
    subscribe_and_forget(publisher, tracker)
    report("  subscribers", tracker)

    print("\n=== Strong event, dispose() ===")
    publisher = DataPublisher()
    tracker = RetentionTracker()
    subscribe_and_forget(publisher, tracker, dispose=True)
    report("  subscribers", tracker)

    print("\n=== Weak event, no unsubscribe ===")
    publisher = DataPublisher(weak_events=True)
    tracker = RetentionTracker()
    subscribe_and_forget(publisher, tracker)
    report("  subscribers", tracker)


if __name__ == "__main__":
    main()
