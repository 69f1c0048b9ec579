"""
FILE: test/utils/test_telemetry.py
===================================
"""

import pytest
from utils.telemetry import (
    log_event,
    perf_timer,
    recent_events,
    clear_events,
    _now_ms
)


class TestLogEvent:
    """Test event logging"""

    def setup_method(self):
        clear_events()

    def test_logs_event_with_kind_and_name(self):
        log_event("TEST", "test_event")
        events = recent_events(limit=1)
        assert len(events) == 1
        assert events[0]["kind"] == "TEST"
        assert events[0]["name"] == "test_event"

    def test_event_includes_timestamp(self):
        before = _now_ms()
        log_event("TEST", "test_event")
        after = _now_ms()
        assert before <= recent_events(limit=1)[0]["ts_ms"] <= after

    def test_trace_id_from_data(self):
        log_event("TEST", "test_event", {"trace_id": "trace123"})
        assert recent_events(limit=1)[0]["trace_id"] == "trace123"

    def test_filters(self):
        log_event("A", "one")
        log_event("B", "two")
        assert [e["name"] for e in recent_events(kinds=["B"])] == ["two"]
        assert [e["kind"] for e in recent_events(names=["one"])] == ["A"]

    def test_most_recent_first(self):
        for i in range(3):
            log_event("TEST", f"e{i}")
        assert [e["name"] for e in recent_events()] == ["e2", "e1", "e0"]


class TestPerfTimer:

    def setup_method(self):
        clear_events()

    def test_start_and_end_events(self):
        with perf_timer("COLD_PATH", "job", {"user_id": "u1"}):
            pass
        end, start = recent_events(limit=2)
        assert start["name"] == "job:start"
        assert end["name"] == "job:end"
        assert end["user_id"] == "u1"
        assert end["latency_ms"] >= 0

    def test_error_recorded(self):
        with pytest.raises(ValueError):
            with perf_timer("COLD_PATH", "job"):
                raise ValueError("boom")
        end = recent_events(limit=1)[0]
        assert end["level"] == "error"
        assert "boom" in end["error"]
