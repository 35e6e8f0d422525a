# FILE: tests/test_stream_events.py
"""
Tests for app/generation/events.py
SSE encoding and the event channel's disconnect behaviour.
"""

import asyncio
import json
import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest


async def _events(count, finished=None):
    from app.generation.events import StreamEvent

    for i in range(count):
        await asyncio.sleep(0)
        yield StreamEvent.info("start", f"event {i}")
    if finished is not None:
        finished.set()


class TestEncoding:
    """Test event serialisation."""

    def test_content_events_use_content_key(self):
        """Non-error events carry content."""
        from app.generation.events import StreamEvent

        data = StreamEvent.progress("requirement_complete", "预览").to_dict()
        assert data["type"] == "progress"
        assert data["step"] == "requirement_complete"
        assert data["content"] == "预览"
        assert "message" not in data
        assert data["timestamp"]

    def test_error_events_use_message_key(self):
        """Error events carry message instead of content."""
        from app.generation.events import StreamEvent

        data = StreamEvent.error("boom").to_dict()
        assert data["type"] == "error"
        assert data["step"] == "error"
        assert data["message"] == "boom"
        assert "content" not in data

    def test_sse_frame(self):
        """Frames are data: <json> followed by a blank line, UTF-8 kept."""
        from app.generation.events import StreamEvent, encode_sse

        frame = encode_sse(StreamEvent.info("start", "开始生成网站..."))
        assert frame.startswith("data: ")
        assert frame.endswith("\n\n")
        assert "开始生成网站" in frame
        assert json.loads(frame[len("data: "):])["step"] == "start"

    def test_terminal_kinds(self):
        """Only success and error are terminal."""
        from app.generation.events import StreamEvent

        assert StreamEvent.success("complete", "<html>").is_terminal
        assert StreamEvent.error("x").is_terminal
        assert not StreamEvent.info("done", "").is_terminal


class TestEventChannel:
    """Test EventChannel delivery and disconnect handling."""

    @pytest.mark.asyncio
    async def test_frames_until_producer_finishes(self):
        """All published events are delivered, then iteration ends."""
        from app.generation.events import start_channel

        channel = start_channel(_events(3))
        frames = [frame async for frame in channel.frames()]

        assert len(frames) == 3
        assert channel.closed is True

    @pytest.mark.asyncio
    async def test_publish_after_close_is_dropped(self):
        """Writes after close are discarded and counted."""
        from app.generation.events import EventChannel, StreamEvent

        channel = EventChannel()
        channel.close()

        assert channel.publish(StreamEvent.info("start", "late")) is False
        assert channel.dropped == 1

    @pytest.mark.asyncio
    async def test_feed_runs_to_completion_after_close(self):
        """The producer is drained even when nobody is listening."""
        from app.generation.events import EventChannel

        finished = asyncio.Event()
        channel = EventChannel()
        channel.close()

        await channel.feed(_events(4, finished))

        assert finished.is_set()
        assert channel.dropped == 4

    @pytest.mark.asyncio
    async def test_subscriber_disconnect_does_not_cancel_producer(self):
        """Closing the frame iterator leaves the background task running."""
        from app.generation.events import start_channel

        finished = asyncio.Event()
        channel = start_channel(_events(5, finished))

        frames = channel.frames()
        first = await frames.__anext__()
        await frames.aclose()

        assert first.startswith("data: ")
        assert channel.closed is True
        await asyncio.wait_for(finished.wait(), timeout=1)
        assert channel.dropped >= 1
