"""
Launcher that starts the debuggee as a plain subprocess.

The launcher handles the ``internalConsole`` console mode: the program runs
without a terminal and its stdio is either forwarded to the debug console
(capture) or thrown away once the debugger attaches (discard).
"""

from __future__ import annotations

from enum import Enum
import logging
import os
import traceback
from typing import TYPE_CHECKING

from sublaunch.config import ConsoleMode
from sublaunch.config import OutputSource
from sublaunch.launcher.arguments import format_arguments
from sublaunch.launcher.arguments import get_launch_args
from sublaunch.launcher.child_process import ChildProcess
from sublaunch.launcher.program import SubprocessProgram
from sublaunch.launcher.stream_tracker import StdStreamTracker
from sublaunch.utils.env import EnvironmentVars

if TYPE_CHECKING:
    from sublaunch.config import LaunchConfiguration
    from sublaunch.protocol import LaunchContext
    from sublaunch.protocol import OutputSink

logger = logging.getLogger(__name__)

# Written to stderr by the runtime once a debugger has connected
ATTACH_MARKER = b"Debugger attached."


class DiscardState(Enum):
    BUFFERING = "buffering"
    DISCARDED = "discarded"


class DiscardRouter:
    """Hold early stderr output until the debugger attaches.

    Output written before the debugger attaches (for example a "module not
    found" error) would otherwise be lost, so stderr is buffered until the
    attach marker shows up. From then on the runtime reports output itself
    and the buffer is dropped for good. If the process fails to start or
    exits with a positive code first, the buffer is written to the sink.
    """

    def __init__(self, sink: OutputSink, child: ChildProcess) -> None:
        self._sink = sink
        self.state = DiscardState.BUFFERING
        self._chunks: list[bytes] | None = []
        self._unsubscribe_stderr = child.stderr.on_data(self._on_stderr)
        child.on_error(self._on_error)
        child.on_exit(self._on_exit)

    @property
    def buffered(self) -> bytes | None:
        """Buffered stderr, or None once discarded."""
        if self._chunks is None:
            return None
        return b"".join(self._chunks)

    def _on_stderr(self, data: bytes) -> None:
        if ATTACH_MARKER in data:
            self.state = DiscardState.DISCARDED
            self._chunks = None
            self._unsubscribe_stderr()
        elif self._chunks is not None:
            self._chunks.append(data)

    def _flush(self) -> None:
        if self.state is DiscardState.BUFFERING and self._chunks is not None:
            text = b"".join(self._chunks).decode("utf-8", errors="replace")
            self._sink.output({"category": "stderr", "output": text})

    def _on_error(self, error: BaseException) -> None:
        self._flush()
        if error.__traceback__ is not None:
            message = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        else:
            message = str(error)
        self._sink.output({"category": "stderr", "output": message})

    def _on_exit(self, code: int | None) -> None:
        if code is not None and code > 0:
            self._flush()
            self._sink.output(
                {"category": "stderr", "output": f"Process exited with code {code}\r\n"}
            )


class SubprocessProgramLauncher:
    """Launcher that boots a subprocess."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.logger = log or logger

    def can_launch(self, config: LaunchConfiguration) -> bool:
        return config.console == ConsoleMode.INTERNAL_CONSOLE

    async def launch_program(
        self,
        binary: str,
        config: LaunchConfiguration,
        context: LaunchContext,
    ) -> SubprocessProgram:
        """Start ``binary`` for ``config`` and wire its stdio to ``context.dap``.

        Raises:
            NotADirectoryError: If the working directory does not exist.
        """
        executable, args, shell, cwd = format_arguments(
            binary,
            get_launch_args(config),
            config.cwd or os.getcwd(),
        )

        # Send an approximation of the command we're running to the
        # console, for cosmetic purposes.
        try:
            context.dap.output(
                {"category": "console", "output": " ".join([executable, *args]) + "\n"}
            )
        except Exception:
            self.logger.exception("Failed to echo launch command")

        self.logger.debug("Spawning %s %s (shell=%s, cwd=%s)", executable, args, shell, cwd)
        child = await ChildProcess.spawn(
            executable,
            args,
            shell=shell,
            cwd=cwd,
            env=EnvironmentVars.merge(EnvironmentVars.process_env(), config.env).defined(),
        )

        if config.output_capture == OutputSource.CONSOLE:
            self.discard_stdio(context.dap, child)
        else:
            self.capture_stdio(context.dap, child)

        return SubprocessProgram(child, self.logger, config.kill_behavior)

    def capture_stdio(self, dap: OutputSink, child: ChildProcess) -> None:
        """Called for a child process when the stdio should be written over DAP."""
        for stream in (child.stdout, child.stderr):
            tracker = StdStreamTracker(stream.name, dap)
            stream.on_data(tracker.consume)
            stream.on_end(tracker.flush)
        child.stdout.resume()
        child.stderr.resume()

    def discard_stdio(self, dap: OutputSink, child: ChildProcess) -> DiscardRouter:
        """Called for a child process when the stdio is not supposed to be captured."""
        router = DiscardRouter(dap, child)
        # Unread pipes eventually block the child, so both must flow
        child.stdout.resume()
        child.stderr.resume()
        return router
