"""Unit tests for ProgressTracker."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from hnessays.pipeline.progress_tracker import PipelineEvent, ProgressTracker


class TestProgressTracker:
    @pytest.fixture()
    def tracker(self) -> ProgressTracker:
        return ProgressTracker()

    @pytest.mark.asyncio
    async def test_emit_records_history(self, tracker: ProgressTracker) -> None:
        record = await tracker.emit("s1", "essay_processed", title="A", posts=2)

        assert isinstance(record, PipelineEvent)
        assert record.fields == {"title": "A", "posts": 2}
        assert tracker.events("s1") == [record]

    @pytest.mark.asyncio
    async def test_events_filter_by_name(self, tracker: ProgressTracker) -> None:
        await tracker.emit("s1", "batch_started", batch=1)
        await tracker.emit("s1", "essay_processed", title="A")
        await tracker.emit("s1", "batch_started", batch=2)

        assert [e.fields["batch"] for e in tracker.events("s1", "batch_started")] == [1, 2]

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(self, tracker: ProgressTracker) -> None:
        await tracker.emit("s1", "run_started")
        assert tracker.events("s2") == []

    def test_get_status_unknown_session(self, tracker: ProgressTracker) -> None:
        assert tracker.get_status("unknown") == {"event": "", "progress": 0.0}

    @pytest.mark.asyncio
    async def test_progress_clamped_to_0_100(self, tracker: ProgressTracker) -> None:
        await tracker.emit("s1", "essay_processed", progress=-10.0)
        assert tracker.get_status("s1")["progress"] == 0.0

        await tracker.emit("s1", "essay_processed", progress=150.0)
        assert tracker.get_status("s1")["progress"] == 100.0

    @pytest.mark.asyncio
    async def test_event_without_progress_keeps_last_value(self, tracker: ProgressTracker) -> None:
        await tracker.emit("s1", "essay_processed", progress=40.0)
        await tracker.emit("s1", "batch_started", batch=2)

        assert tracker.get_status("s1") == {"event": "batch_started", "progress": 40.0}

    @pytest.mark.asyncio
    async def test_async_and_sync_listeners(self, tracker: ProgressTracker) -> None:
        received: list[str] = []

        async def async_cb(event: PipelineEvent) -> None:
            received.append(f"async:{event.event}")

        def sync_cb(event: PipelineEvent) -> None:
            received.append(f"sync:{event.event}")

        tracker.register_listener("s1", async_cb)
        tracker.register_listener("s1", sync_cb)
        await tracker.emit("s1", "run_started")

        assert received == ["async:run_started", "sync:run_started"]

    @pytest.mark.asyncio
    async def test_duplicate_registration_ignored(self, tracker: ProgressTracker) -> None:
        received: list[PipelineEvent] = []
        tracker.register_listener("s1", received.append)
        tracker.register_listener("s1", received.append)

        await tracker.emit("s1", "run_started")

        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_failing_async_listener_is_logged(self, tracker: ProgressTracker) -> None:
        async def broken(event: PipelineEvent) -> None:
            raise KeyError(event.event)

        tracker.register_listener("s1", broken)

        with patch.object(tracker, "_logger") as logger:
            await tracker.emit("s1", "essay_processed", title="Cities and Ambition")

        logger.warning.assert_called_once()
        args, kwargs = logger.warning.call_args
        assert args == ("listener_callback_error",)
        assert kwargs["pipeline_event"] == "essay_processed"
        assert kwargs["callback"] == "broken"
        assert len(tracker.events("s1", "essay_processed")) == 1

    @pytest.mark.asyncio
    async def test_unregister_listener(self, tracker: ProgressTracker) -> None:
        received: list[PipelineEvent] = []
        tracker.register_listener("s1", received.append)
        tracker.unregister_listener("s1", received.append)

        await tracker.emit("s1", "run_started")

        assert received == []

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_block_others(self, tracker: ProgressTracker) -> None:
        received: list[PipelineEvent] = []

        def broken(event: PipelineEvent) -> None:
            raise RuntimeError("listener bug")

        tracker.register_listener("s1", broken)
        tracker.register_listener("s1", received.append)

        await tracker.emit("s1", "run_started")

        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_listener_only_sees_own_session(self, tracker: ProgressTracker) -> None:
        received: list[PipelineEvent] = []
        tracker.register_listener("s1", received.append)

        await tracker.emit("s2", "run_started")

        assert received == []
