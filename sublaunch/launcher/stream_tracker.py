"""Turn raw stdio chunks into line-based output events."""

from __future__ import annotations

import codecs
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sublaunch.protocol import OutputCategory
    from sublaunch.protocol import OutputSink


class StdStreamTracker:
    """Accumulate bytes from one std stream and emit one event per line.

    Chunks are decoded incrementally, so a multi-byte character or a line
    split across chunks is reassembled before it is emitted. Bytes that are
    not valid in ``encoding`` are replaced rather than raising.
    """

    def __init__(self, category: OutputCategory, sink: OutputSink, encoding: str = "utf-8"):
        self.category = category
        self._sink = sink
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending = ""

    def consume(self, chunk: bytes) -> None:
        text = self._pending + self._decoder.decode(chunk)
        *lines, self._pending = text.split("\n")
        for line in lines:
            self._emit(line + "\n")

    def flush(self) -> None:
        """Emit whatever is left once the stream has ended."""
        text = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        if text:
            self._emit(text)

    def _emit(self, text: str) -> None:
        self._sink.output({"category": self.category, "output": text})
