"""Tests for buffering stderr until the debugger attaches."""

from __future__ import annotations

from sublaunch.launcher.subprocess_launcher import DiscardRouter
from sublaunch.launcher.subprocess_launcher import DiscardState
from sublaunch.launcher.subprocess_launcher import SubprocessProgramLauncher


def _error_with_traceback() -> FileNotFoundError:
    try:
        raise FileNotFoundError(2, "No such file or directory", "missing-node")
    except FileNotFoundError as exc:
        return exc


class TestDiscardRouter:
    def test_marker_discards_buffer_and_later_output(self, sink, fake_child):
        router = DiscardRouter(sink, fake_child)

        fake_child.stderr.push(b"starting...")
        fake_child.stderr.push(b"Debugger attached.\n")
        fake_child.stderr.push(b"late noise")
        fake_child.exit(1)

        assert router.state is DiscardState.DISCARDED
        assert router.buffered is None
        assert fake_child.stderr.listener_count == 0
        assert sink.text("stderr") == "Process exited with code 1\r\n"

    def test_flushes_only_pre_marker_output(self, sink, fake_child):
        DiscardRouter(sink, fake_child)

        fake_child.stderr.push(b"starting...")
        fake_child.exit(1)

        assert sink.events == [
            {"category": "stderr", "output": "starting..."},
            {"category": "stderr", "output": "Process exited with code 1\r\n"},
        ]

    def test_marker_inside_larger_chunk(self, sink, fake_child):
        router = DiscardRouter(sink, fake_child)

        fake_child.stderr.push(b"Debugger listening on ws://x\nDebugger attached.\nhello")

        assert router.state is DiscardState.DISCARDED

    def test_chunks_are_kept_in_arrival_order(self, sink, fake_child):
        router = DiscardRouter(sink, fake_child)

        fake_child.stderr.push(b"a")
        fake_child.stderr.push(b"b")
        fake_child.stderr.push(b"c")

        assert router.state is DiscardState.BUFFERING
        assert router.buffered == b"abc"

    def test_error_before_marker_flushes_buffer_and_error(self, sink, fake_child):
        DiscardRouter(sink, fake_child)
        error = _error_with_traceback()

        fake_child.stderr.push(b"Cannot find module 'x'\n")
        fake_child.fail(error)

        stderr = sink.outputs("stderr")
        assert len(stderr) == 2
        assert stderr[0] == "Cannot find module 'x'\n"
        assert "Traceback" in stderr[1]
        assert "FileNotFoundError" in stderr[1]
        assert "missing-node" in stderr[1]

    def test_error_without_traceback_uses_message(self, sink, fake_child):
        DiscardRouter(sink, fake_child)

        fake_child.fail(PermissionError("permission denied"))

        assert sink.outputs("stderr") == ["", "permission denied"]

    def test_error_after_marker_reports_only_error(self, sink, fake_child):
        DiscardRouter(sink, fake_child)

        fake_child.stderr.push(b"early")
        fake_child.stderr.push(b"Debugger attached.")
        fake_child.fail(OSError("gone"))

        assert sink.outputs("stderr") == ["gone"]

    def test_zero_exit_is_silent(self, sink, fake_child):
        DiscardRouter(sink, fake_child)

        fake_child.stderr.push(b"warning: something")
        fake_child.exit(0)

        assert sink.events == []

    def test_null_and_negative_exit_are_silent(self, sink, fake_child):
        DiscardRouter(sink, fake_child)

        fake_child.stderr.push(b"killed")
        fake_child.exit(None)
        fake_child.exit(-9)

        assert sink.events == []

    def test_discarded_state_never_flushes_again(self, sink, fake_child):
        DiscardRouter(sink, fake_child)

        fake_child.stderr.push(b"early")
        fake_child.stderr.push(b"Debugger attached.")
        fake_child.fail(OSError("first"))
        fake_child.exit(2)
        fake_child.exit(3)

        assert "early" not in sink.text("stderr")
        assert sink.outputs("stderr") == [
            "first",
            "Process exited with code 2\r\n",
            "Process exited with code 3\r\n",
        ]


class TestDiscardStdio:
    def test_resumes_both_streams(self, sink, fake_child):
        SubprocessProgramLauncher().discard_stdio(sink, fake_child)

        assert fake_child.stdout.resumed
        assert fake_child.stderr.resumed

    def test_stdout_is_never_forwarded(self, sink, fake_child):
        SubprocessProgramLauncher().discard_stdio(sink, fake_child)

        fake_child.stdout.push(b"hello\n")
        fake_child.exit(0)

        assert sink.events == []
        assert fake_child.stdout.listener_count == 0
