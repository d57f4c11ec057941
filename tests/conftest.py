from __future__ import annotations

# isort: skip-file
import logging
import sys
from pathlib import Path

import pytest

# Make the package importable when the tests run from a source checkout
_PARENT_DIR = str(Path(__file__).resolve().parent.parent)
if _PARENT_DIR not in sys.path:
    sys.path.insert(0, _PARENT_DIR)

from sublaunch.utils.events import EventEmitter  # noqa: E402

logger = logging.getLogger(__name__)


class RecordingSink:
    """Output sink that keeps every body it receives."""

    def __init__(self) -> None:
        self.events: list[dict] = []

    def output(self, body) -> None:
        self.events.append(dict(body))

    def outputs(self, category: str | None = None) -> list[str]:
        return [e["output"] for e in self.events if category is None or e["category"] == category]

    def text(self, category: str) -> str:
        return "".join(self.outputs(category))


class FakeStream:
    """Stand-in for ProcessStream that lets tests push chunks by hand."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.resumed = False
        self._data = EventEmitter()
        self._end = EventEmitter()

    @property
    def listener_count(self) -> int:
        return len(self._data)

    def on_data(self, listener):
        return self._data.add_listener(listener)

    def on_end(self, listener):
        return self._end.add_listener(listener)

    def resume(self) -> None:
        self.resumed = True

    def push(self, chunk: bytes) -> None:
        self._data.emit(chunk)

    def end(self) -> None:
        self._end.emit()


class FakeChild:
    """Stand-in for ChildProcess driven synchronously by the test."""

    def __init__(self, pid: int | None = 4242) -> None:
        self.pid = pid
        self.returncode: int | None = None
        self.stdout = FakeStream("stdout")
        self.stderr = FakeStream("stderr")
        self._exit = EventEmitter()
        self._error = EventEmitter()
        self.killed = False
        self.terminated = False

    def on_exit(self, listener):
        return self._exit.add_listener(listener)

    def on_error(self, listener):
        return self._error.add_listener(listener)

    def fail(self, error: BaseException) -> None:
        self._error.emit(error)

    def exit(self, code: int | None) -> None:
        self.returncode = code
        self._exit.emit(code)

    def kill(self) -> None:
        self.killed = True

    def terminate(self) -> None:
        self.terminated = True

    async def wait(self) -> int | None:
        return self.returncode


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def fake_child() -> FakeChild:
    return FakeChild()


@pytest.fixture
def python_exe() -> str:
    return sys.executable
