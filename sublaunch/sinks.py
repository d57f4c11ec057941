"""
Output sinks for launched programs.

This module provides:
- EventOutputSink, which turns output bodies into ``output`` events on an
  async ``send_event`` callback (the shape used by DAP servers)
- CallbackOutputSink, a synchronous sink around a plain callable
- OutputLoggingHandler, a logging.Handler that forwards launcher log records
  to a sink so they show up in the debug console
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass
import logging
from typing import Any
from typing import Callable

from sublaunch.protocol import OutputEventBody
from sublaunch.protocol import OutputSink

logger = logging.getLogger(__name__)

SendEvent = Callable[[str, OutputEventBody], Coroutine[Any, Any, None]]


class EventOutputSink:
    """Schedule ``send_event("output", body)`` for every output body.

    Must be used from the thread running ``loop``. Scheduled tasks are kept
    referenced until they finish so they are not garbage collected mid-send.
    """

    def __init__(self, send_event: SendEvent, loop: asyncio.AbstractEventLoop | None = None):
        self._send_event = send_event
        self._loop = loop
        self._tasks: set[asyncio.Task[None]] = set()

    def output(self, body: OutputEventBody) -> None:
        loop = self._loop or asyncio.get_running_loop()
        task = loop.create_task(self._send_event("output", body))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Failed to send output event", exc_info=exc)

    async def drain(self) -> None:
        """Wait for every scheduled send to complete."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


@dataclass
class CallbackOutputSink:
    """Sink that hands every body to a synchronous callable."""

    callback: Callable[[OutputEventBody], None]

    def output(self, body: OutputEventBody) -> None:
        self.callback(body)


@dataclass
class SinkLaunchContext:
    """Minimal launch context carrying only the output sink."""

    dap: OutputSink


class OutputLoggingHandler(logging.Handler):
    """A logging handler that forwards log records to an output sink.

    Only forwards records at or above the configured level, and only for
    loggers within the 'sublaunch' namespace to avoid noise.
    """

    def __init__(
        self,
        sink: OutputSink,
        level: int = logging.INFO,
        namespace: str = "sublaunch",
    ):
        super().__init__(level)
        self._sink = sink
        self._namespace = namespace

    def emit(self, record: logging.LogRecord) -> None:
        # Sink failures are logged from this module; forwarding them would loop
        if not record.name.startswith(self._namespace) or record.name == __name__:
            return

        try:
            message = self.format(record)
            category = "stderr" if record.levelno >= logging.ERROR else "console"
            self._sink.output({"category": category, "output": message + "\n"})
        except Exception:
            # Don't let logging errors break the launch
            self.handleError(record)
