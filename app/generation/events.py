# FILE: app/generation/events.py
"""
Streaming protocol for site generation.

Uses Server-Sent Events (SSE). Each event becomes one frame:

    data: {"type": "info", "step": "start", "content": "...", "timestamp": "..."}\n\n

EVENT ORDER (one request):
    start (info) -> requirement (info) -> requirement_complete (progress)
    -> html (info) -> complete (success, full HTML) -> done (info)

On failure a single error event (message instead of content) replaces the
rest of the pipeline and is followed by done. complete and error are the
terminal events; exactly one of them is emitted per request, unless the
provider could not even be resolved (then error follows start directly).

EventChannel decouples the producer from the HTTP response: a disconnecting
client closes the channel and later events are dropped, while the producer
task keeps running until the generation finishes.
"""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import AsyncIterator, Optional, Set

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    INFO = "info"
    PROGRESS = "progress"
    SUCCESS = "success"
    ERROR = "error"


class Step:
    START = "start"
    REQUIREMENT = "requirement"
    REQUIREMENT_COMPLETE = "requirement_complete"
    HTML = "html"
    COMPLETE = "complete"
    ERROR = "error"
    DONE = "done"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class StreamEvent:
    kind: EventKind
    step: str
    content: str = ""
    timestamp: str = field(default_factory=_now_iso)

    @property
    def is_terminal(self) -> bool:
        return self.kind in (EventKind.SUCCESS, EventKind.ERROR)

    def to_dict(self) -> dict:
        body_key = "message" if self.kind is EventKind.ERROR else "content"
        return {
            "type": self.kind.value,
            "step": self.step,
            body_key: self.content,
            "timestamp": self.timestamp,
        }

    @classmethod
    def info(cls, step: str, content: str) -> "StreamEvent":
        return cls(EventKind.INFO, step, content)

    @classmethod
    def progress(cls, step: str, content: str) -> "StreamEvent":
        return cls(EventKind.PROGRESS, step, content)

    @classmethod
    def success(cls, step: str, content: str) -> "StreamEvent":
        return cls(EventKind.SUCCESS, step, content)

    @classmethod
    def error(cls, message: str, step: str = Step.ERROR) -> "StreamEvent":
        return cls(EventKind.ERROR, step, message)


def encode_sse(event: StreamEvent) -> str:
    return "data: " + json.dumps(event.to_dict(), ensure_ascii=False) + "\n\n"


# =============================================================================
# CHANNEL
# =============================================================================

_SENTINEL = None

# Strong references to producer tasks; asyncio only keeps weak ones.
_BACKGROUND_TASKS: Set[asyncio.Task] = set()


class EventChannel:
    """One producer, one subscriber. Writes after close() are dropped."""

    def __init__(self):
        self._queue: "asyncio.Queue[Optional[StreamEvent]]" = asyncio.Queue()
        self._closed = False
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, event: StreamEvent) -> bool:
        if self._closed:
            self.dropped += 1
            return False
        self._queue.put_nowait(event)
        return True

    def finish(self) -> None:
        if not self._closed:
            self._queue.put_nowait(_SENTINEL)

    def close(self) -> None:
        self._closed = True

    async def feed(self, source: AsyncIterator[StreamEvent]) -> None:
        """Drain source into the channel; runs to completion even after close()."""
        try:
            async for event in source:
                self.publish(event)
        finally:
            self.finish()
            if self.dropped:
                logger.info("[stream] Discarded %d event(s) after disconnect", self.dropped)

    async def frames(self) -> AsyncIterator[str]:
        """Encoded SSE frames until the producer finishes or the channel closes."""
        finished = False
        try:
            while not self._closed:
                event = await self._queue.get()
                if event is _SENTINEL:
                    finished = True
                    return
                yield encode_sse(event)
        finally:
            if not finished:
                logger.info("[stream] Channel closed by subscriber")
            self.close()


def start_channel(source: AsyncIterator[StreamEvent]) -> EventChannel:
    """Run source in a background task and return the channel it feeds."""
    channel = EventChannel()
    task = asyncio.create_task(channel.feed(source))
    _BACKGROUND_TASKS.add(task)
    task.add_done_callback(_BACKGROUND_TASKS.discard)
    return channel


__all__ = [
    "EventKind",
    "Step",
    "StreamEvent",
    "EventChannel",
    "encode_sse",
    "start_channel",
]
