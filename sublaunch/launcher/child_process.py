"""
Event-style wrapper around an asyncio subprocess.

A ChildProcess exposes the launched program the way the stdio routers
consume it:

- ``stdout`` / ``stderr`` are ProcessStream objects. They stay paused until
  ``resume()`` is called; after that every chunk read from the pipe is handed
  to the registered data listeners in the order the OS produced it, and
  chunks arriving while no listener is registered are dropped.
- ``on_error`` fires with the exception when the process could not be
  created (missing executable, permission denied).
- ``on_exit`` fires once with the return code after the process has exited
  and every resumed stream has been read to the end, or after
  ``STDIO_DRAIN_TIMEOUT`` seconds if something else still holds the pipes.

Everything runs on the event loop that called :meth:`ChildProcess.spawn`.
"""

from __future__ import annotations

import asyncio
import contextlib
import errno
import logging
from pathlib import Path
from typing import TYPE_CHECKING
from typing import Callable
from typing import Mapping
from typing import Sequence

from sublaunch.utils.events import EventEmitter
from sublaunch.utils.events import Unsubscribe

if TYPE_CHECKING:
    from asyncio.subprocess import Process

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024

# Seconds to keep reading stdio after the process exits before reporting the exit
STDIO_DRAIN_TIMEOUT = 0.5


class ProcessStream:
    """Readable byte stream of a child process, paused until resumed."""

    def __init__(self, name: str, reader: asyncio.StreamReader | None = None) -> None:
        self.name = name
        self._reader = reader
        self._on_data = EventEmitter()
        self._on_end = EventEmitter()
        self._task: asyncio.Task[None] | None = None

    @property
    def reader_task(self) -> asyncio.Task[None] | None:
        """The task pumping the pipe, or None while paused."""
        return self._task

    def on_data(self, listener: Callable[[bytes], None]) -> Unsubscribe:
        """Register ``listener`` for data chunks and return its unsubscribe handle."""
        return self._on_data.add_listener(listener)

    def on_end(self, listener: Callable[[], None]) -> Unsubscribe:
        return self._on_end.add_listener(listener)

    def resume(self) -> None:
        """Start reading the pipe. Calling it again has no effect."""
        if self._task is not None or self._reader is None:
            return
        self._task = asyncio.get_running_loop().create_task(self._pump(self._reader))

    async def _pump(self, reader: asyncio.StreamReader) -> None:
        try:
            while True:
                chunk = await reader.read(READ_CHUNK_SIZE)
                if not chunk:
                    break
                self._on_data.emit(chunk)
        except (OSError, ValueError):
            logger.debug("Error reading %s", self.name, exc_info=True)
        finally:
            self._on_end.emit()


class _ExitAwareProtocol(asyncio.subprocess.SubprocessStreamProtocol):
    """Stream protocol that resolves ``exited`` as soon as the process exits.

    ``Process.wait()`` may not return until every pipe is closed, which
    never happens while a grandchild keeps them open.
    """

    def __init__(self, limit: int, loop: asyncio.AbstractEventLoop) -> None:
        super().__init__(limit=limit, loop=loop)
        self.exited: asyncio.Future[int | None] = loop.create_future()

    def process_exited(self) -> None:
        super().process_exited()
        if not self.exited.done():
            self.exited.set_result(self._transport.get_returncode())


class ChildProcess:
    """A launched OS process with event-style stdio, error and exit hooks."""

    def __init__(
        self,
        process: Process | None,
        error: OSError | None = None,
        exited: asyncio.Future[int | None] | None = None,
    ) -> None:
        self._process = process
        self._exited = exited
        self.stdout = ProcessStream("stdout", process.stdout if process else None)
        self.stderr = ProcessStream("stderr", process.stderr if process else None)
        self._on_exit = EventEmitter()
        self._on_error = EventEmitter()
        self._loop = asyncio.get_running_loop()
        self._done: asyncio.Future[int | None] = self._loop.create_future()
        self._watcher: asyncio.Task[None] | None = None

        if process is not None:
            self._watcher = self._loop.create_task(self._watch(process))
        elif error is not None:
            # Deferred so listeners attached right after spawn() see it
            self._loop.call_soon(self._report_error, error)

    @classmethod
    async def spawn(
        cls,
        executable: str,
        args: Sequence[str],
        *,
        shell: bool,
        cwd: str,
        env: Mapping[str, str],
    ) -> ChildProcess:
        """Start ``executable`` and return the running ChildProcess.

        Raises:
            NotADirectoryError: If ``cwd`` is not an existing directory.

        Any other failure to create the process is delivered through the
        ``on_error`` event instead of being raised.
        """
        if not Path(cwd).is_dir():
            raise NotADirectoryError(errno.ENOTDIR, "Working directory does not exist", cwd)

        loop = asyncio.get_running_loop()

        def protocol_factory() -> _ExitAwareProtocol:
            return _ExitAwareProtocol(limit=READ_CHUNK_SIZE, loop=loop)

        options = {
            "stdin": asyncio.subprocess.PIPE,
            "stdout": asyncio.subprocess.PIPE,
            "stderr": asyncio.subprocess.PIPE,
            "cwd": cwd,
            "env": dict(env),
        }
        try:
            if shell:
                transport, protocol = await loop.subprocess_shell(
                    protocol_factory, " ".join([executable, *args]), **options
                )
            else:
                transport, protocol = await loop.subprocess_exec(
                    protocol_factory, executable, *args, **options
                )
        except OSError as exc:
            logger.debug("Failed to start %s", executable, exc_info=True)
            return cls(None, error=exc)

        process = asyncio.subprocess.Process(transport, protocol, loop)
        logger.debug("Started %s (pid=%s)", executable, process.pid)
        return cls(process, exited=protocol.exited)

    @property
    def pid(self) -> int | None:
        return self._process.pid if self._process is not None else None

    @property
    def returncode(self) -> int | None:
        return self._process.returncode if self._process is not None else None

    def on_exit(self, listener: Callable[[int | None], None]) -> Unsubscribe:
        return self._on_exit.add_listener(listener)

    def on_error(self, listener: Callable[[BaseException], None]) -> Unsubscribe:
        return self._on_error.add_listener(listener)

    async def wait(self) -> int | None:
        """Wait for the exit event and return the exit code (None if never started)."""
        return await asyncio.shield(self._done)

    def terminate(self) -> None:
        if self._process is not None:
            with contextlib.suppress(ProcessLookupError):
                self._process.terminate()

    def kill(self) -> None:
        if self._process is not None:
            with contextlib.suppress(ProcessLookupError):
                self._process.kill()

    def _report_error(self, error: BaseException) -> None:
        self._on_error.emit(error)
        if not self._done.done():
            self._done.set_result(None)

    async def _watch(self, process: Process) -> None:
        code = await (self._exited if self._exited is not None else process.wait())
        readers = [s.reader_task for s in (self.stdout, self.stderr) if s.reader_task is not None]
        if readers:
            # A grandchild that inherited the pipes can keep them open long
            # after the child itself is gone
            _, pending = await asyncio.wait(readers, timeout=STDIO_DRAIN_TIMEOUT)
            if pending:
                logger.debug("Process %s exited but its stdio is still open", process.pid)
        logger.debug("Process %s exited with code %s", process.pid, code)
        self._on_exit.emit(code)
        if not self._done.done():
            self._done.set_result(code)
