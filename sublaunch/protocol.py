"""
Shapes exchanged with the controlling debug session: output event bodies and the sink they are sent through.
"""

from __future__ import annotations

from typing import Literal
from typing import Protocol
from typing import TypedDict

OutputCategory = Literal["console", "stdout", "stderr"]


class OutputEventBody(TypedDict):
    """Body of a DAP ``output`` event."""

    category: OutputCategory  # console for launcher messages, stdout/stderr for program output
    output: str  # The text to show, including any trailing newline


class OutputSink(Protocol):
    """Receives output events destined for the debug console."""

    def output(self, body: OutputEventBody) -> None: ...


class LaunchContext(Protocol):
    """Per-launch collaborators supplied by the caller."""

    @property
    def dap(self) -> OutputSink: ...
