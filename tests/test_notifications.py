"""Tests for the change feed and the store's notification behaviour."""

from __future__ import annotations

import logging
from collections import Counter
from uuid import uuid4

import pytest

from habitboard.domain.entities import ChangeKind
from habitboard.errors import DuplicateTitle, FutureDate
from habitboard.services.notifications import ChangeNotifier


class TestChangeNotifier:
    def test_publish_reaches_every_subscriber_once(self):
        notifier = ChangeNotifier()
        first, second = [], []
        notifier.subscribe(first.append)
        notifier.subscribe(second.append)

        delivered = notifier.publish(ChangeKind.TRACKER)

        assert first == [ChangeKind.TRACKER]
        assert second == [ChangeKind.TRACKER]
        assert delivered == 2

    def test_kind_filter(self):
        notifier = ChangeNotifier()
        seen = []
        notifier.subscribe(seen.append, kinds=[ChangeKind.RECORD])

        notifier.publish(ChangeKind.CATEGORY)
        notifier.publish(ChangeKind.RECORD)

        assert seen == [ChangeKind.RECORD]

    def test_duplicate_kinds_in_one_publish_collapse(self):
        notifier = ChangeNotifier()
        seen = []
        notifier.subscribe(seen.append)

        notifier.publish(ChangeKind.RECORD, ChangeKind.TRACKER, ChangeKind.RECORD)

        assert seen == [ChangeKind.RECORD, ChangeKind.TRACKER]

    def test_unsubscribe(self):
        notifier = ChangeNotifier()
        seen = []
        subscription = notifier.subscribe(seen.append)

        assert notifier.unsubscribe(subscription) is True
        assert notifier.unsubscribe(subscription) is False
        notifier.publish(ChangeKind.CATEGORY)

        assert seen == []
        assert notifier.subscriber_count == 0

    def test_failing_subscriber_is_logged_and_isolated(self, caplog):
        notifier = ChangeNotifier()
        seen = []

        def broken(kind):
            raise RuntimeError("subscriber exploded")

        notifier.subscribe(broken)
        notifier.subscribe(seen.append)

        with caplog.at_level(logging.ERROR, logger="habitboard"):
            delivered = notifier.publish(ChangeKind.CATEGORY)

        assert seen == [ChangeKind.CATEGORY]
        assert delivered == 1
        assert "Change subscriber failed" in caplog.text

    def test_subscriber_may_unsubscribe_during_publish(self):
        notifier = ChangeNotifier()
        seen = []
        holder = {}

        def once(kind):
            seen.append(kind)
            notifier.unsubscribe(holder["subscription"])

        holder["subscription"] = notifier.subscribe(once)
        notifier.publish(ChangeKind.CATEGORY)
        notifier.publish(ChangeKind.CATEGORY)

        assert seen == [ChangeKind.CATEGORY]


@pytest.fixture
def events(store):
    seen: list[ChangeKind] = []
    store.subscribe(seen.append)
    return seen


class TestStoreNotifications:
    def test_category_commands(self, store, events):
        category = store.create_category("Health")
        store.rename_category(category.id, "Wellbeing")
        store.delete_category(category.id)
        assert events == [ChangeKind.CATEGORY] * 3

    def test_tracker_commands(self, store, category_factory, events):
        category = category_factory("Health")
        events.clear()

        tracker = store.create_tracker("Run", "🙂", "CollectionColor1", [0], category.id)
        store.update_tracker(tracker.id, name="Jog")
        store.delete_tracker(tracker.id)

        assert events == [ChangeKind.TRACKER] * 3

    def test_toggle_notifies_record(self, store, tracker_factory, monday, events):
        tracker = tracker_factory()
        events.clear()

        store.toggle_completion(tracker.id, monday)
        store.toggle_completion(tracker.id, monday)

        assert events == [ChangeKind.RECORD, ChangeKind.RECORD]

    def test_cascading_delete_notifies_each_kind_once(self, store, tracker_factory, monday, events):
        run = tracker_factory("Run")
        tracker_factory("Read")
        store.toggle_completion(run.id, monday)
        events.clear()

        store.delete_category(run.category_id)

        assert Counter(events) == {ChangeKind.CATEGORY: 1, ChangeKind.TRACKER: 1, ChangeKind.RECORD: 1}

    def test_tracker_delete_with_records(self, store, tracker_factory, monday, events):
        tracker = tracker_factory()
        store.toggle_completion(tracker.id, monday)
        events.clear()

        store.delete_tracker(tracker.id)

        assert events == [ChangeKind.TRACKER, ChangeKind.RECORD]

    def test_failed_commands_do_not_notify(self, store, tracker_factory, today, events):
        tracker = tracker_factory()
        events.clear()

        with pytest.raises(DuplicateTitle):
            store.create_category("health")
        with pytest.raises(FutureDate):
            store.toggle_completion(tracker.id, today.replace(year=today.year + 1))

        assert events == []

    def test_subscriber_sees_committed_state(self, store, tracker_factory, monday):
        tracker = tracker_factory()
        observed = []
        store.subscribe(
            lambda kind: observed.append(store.is_completed(tracker.id, monday)),
            kinds=[ChangeKind.RECORD],
        )

        store.toggle_completion(tracker.id, monday)

        assert observed == [True]

    def test_failing_subscriber_does_not_fail_command(self, store, category_factory):
        def broken(kind):
            raise ValueError("boom")

        store.subscribe(broken)
        category = category_factory("Health")
        assert store.get_category(category.id).title == "Health"

    def test_unsubscribe_through_store(self, store):
        seen = []
        subscription = store.subscribe(seen.append)
        assert store.unsubscribe(subscription) is True
        store.create_category("Health")
        assert seen == []

    def test_multiple_subscribers_each_notified_once(self, store):
        counts = Counter()
        for name in ("list", "stats", "badge"):
            store.subscribe(lambda kind, name=name: counts.update([name]), kinds=[ChangeKind.CATEGORY])

        store.create_category(f"Health {uuid4().hex[:6]}")

        assert counts == {"list": 1, "stats": 1, "badge": 1}
