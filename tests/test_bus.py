# tests/test_bus.py
"""
Tests for EventBus.
"""

from __future__ import annotations

from docsync.sync.bus import EventBus
from docsync.sync.models import ProcessingResult


class TestEventBus:
    """Tests for fan-out and isolation."""

    def test_subscribers_receive_results(self):
        bus = EventBus()
        received = []
        bus.subscribe(received.append)
        result = ProcessingResult.converted("/s/a.txt", "/o/a.md", 10)

        bus.publish_result(result)

        assert received == [result]

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        unsubscribe = bus.subscribe(received.append)
        unsubscribe()

        bus.publish_result(ProcessingResult.skipped("/s/a.txt", "no changes detected"))

        assert received == []

    def test_failing_subscriber_isolated(self):
        bus = EventBus()
        received = []

        def broken(result):
            raise RuntimeError("subscriber bug")

        bus.subscribe(broken)
        bus.subscribe(received.append)

        bus.publish_result(ProcessingResult.deleted("/s/a.txt", "/o/a.md"))

        assert len(received) == 1

    def test_errors_go_to_error_callbacks(self):
        bus = EventBus()
        errors = []
        results = []
        bus.on_error(errors.append)
        bus.subscribe(results.append)

        bus.publish_error(OSError("disk gone"))

        assert len(errors) == 1
        assert results == []

    def test_channel_receives_both_topics(self):
        bus = EventBus()
        q = bus.channel()
        result = ProcessingResult.failed("/s/a.txt", "bad")

        bus.publish_result(result)
        bus.publish_error(ValueError("x"))

        first, second = q.get_nowait(), q.get_nowait()
        assert (first.topic, first.payload) == (EventBus.RESULT, result)
        assert second.topic == EventBus.ERROR

    def test_full_channel_drops(self):
        bus = EventBus()
        q = bus.channel(maxsize=1)

        bus.publish_result(ProcessingResult.failed("/s/a.txt", "1"))
        bus.publish_result(ProcessingResult.failed("/s/b.txt", "2"))

        assert q.qsize() == 1

    def test_closed_channel_stops_receiving(self):
        bus = EventBus()
        q = bus.channel()
        bus.close_channel(q)

        bus.publish_result(ProcessingResult.failed("/s/a.txt", "1"))

        assert q.empty()


class TestProcessingResult:
    """Tests for the serialized result shape."""

    def test_to_dict_drops_none(self):
        data = ProcessingResult.converted("/s/a.txt", "/o/a.md", 42).to_dict()

        assert data == {
            "inputPath": "/s/a.txt",
            "outputPath": "/o/a.md",
            "action": "converted",
            "success": True,
            "size": 42,
        }

    def test_failed_has_error(self):
        data = ProcessingResult.failed("/s/a.txt", "boom").to_dict()

        assert data["success"] is False
        assert data["error"] == "boom"
