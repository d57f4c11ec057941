"""
Command line entry point: launch a program and print its output events.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import TYPE_CHECKING

from sublaunch.config import ConsoleMode
from sublaunch.config import KillBehavior
from sublaunch.config import LaunchConfiguration
from sublaunch.config import OutputSource
from sublaunch.errors import SublaunchError
from sublaunch.launcher import SubprocessProgramLauncher
from sublaunch.launcher import select_launcher
from sublaunch.sinks import CallbackOutputSink
from sublaunch.sinks import OutputLoggingHandler
from sublaunch.sinks import SinkLaunchContext

if TYPE_CHECKING:
    from sublaunch.protocol import OutputEventBody

logger = logging.getLogger(__name__)

# Eventually this can just be logging.getLevelNamesMapping()
NAME_TO_LEVEL: dict[str, int] = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def parse_env(pairs: list[str]) -> dict[str, str | None]:
    """Parse ``KEY=VALUE`` pairs; a bare ``KEY`` unsets the variable."""
    env: dict[str, str | None] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        env[key] = value if sep else None
    return env


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sublaunch",
        description="Launch a program as a subprocess and print its output events",
    )
    parser.add_argument(
        "--console",
        choices=[mode.value for mode in ConsoleMode],
        default=ConsoleMode.INTERNAL_CONSOLE.value,
        help="Console mode (default: internalConsole)",
    )
    parser.add_argument(
        "--output-capture",
        choices=[source.value for source in OutputSource],
        default=OutputSource.CONSOLE.value,
        help="'std' forwards stdout/stderr; 'console' only reports early failures",
    )
    parser.add_argument(
        "--kill-behavior",
        choices=[behavior.value for behavior in KillBehavior],
        default=KillBehavior.FORCEFUL.value,
        help="How to stop the program on Ctrl+C (default: forceful)",
    )
    parser.add_argument("--cwd", type=str, help="Working directory for the program")
    parser.add_argument(
        "--env",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Environment override; a bare KEY removes the variable",
    )
    parser.add_argument(
        "--runtime-arg",
        action="append",
        default=[],
        help="Argument passed to the executable before the program",
    )
    parser.add_argument("--json", action="store_true", help="Print events as JSON lines")
    parser.add_argument(
        "--forward-logs",
        action="store_true",
        help="Also send launcher log records through the output events",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=list(NAME_TO_LEVEL),
        help="Log level (default: WARNING)",
    )
    parser.add_argument("executable", help="Executable to run, e.g. python or node")
    parser.add_argument("program", nargs=argparse.REMAINDER, help="Program and its arguments")
    return parser


def make_printer(as_json: bool):
    def _print_event(body: OutputEventBody) -> None:
        if as_json:
            sys.stdout.write(json.dumps(body) + "\n")
            sys.stdout.flush()
            return
        stream = sys.stderr if body["category"] == "stderr" else sys.stdout
        stream.write(body["output"])
        stream.flush()

    return _print_event


async def run(args: argparse.Namespace) -> int:
    program_and_args: list[str] = list(args.program)
    config = LaunchConfiguration(
        console=args.console,
        program=program_and_args[0] if program_and_args else "",
        args=program_and_args[1:],
        runtime_args=list(args.runtime_arg),
        cwd=args.cwd,
        env=parse_env(args.env),
        output_capture=args.output_capture,
        kill_behavior=args.kill_behavior,
    )
    config.validate()

    sink = CallbackOutputSink(make_printer(args.json))
    if args.forward_logs:
        logging.getLogger("sublaunch").addHandler(
            OutputLoggingHandler(sink, level=NAME_TO_LEVEL[args.log_level])
        )

    launcher = select_launcher([SubprocessProgramLauncher()], config)
    program = await launcher.launch_program(args.executable, config, SinkLaunchContext(sink))
    try:
        code = await program.stopped()
    except asyncio.CancelledError:
        program.stop()
        raise

    if code is None or code < 0:
        return 1
    return code


def main(argv: list[str] | None = None) -> None:
    """
    Main entry point for the launcher CLI
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=NAME_TO_LEVEL.get(args.log_level, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )

    try:
        exit_code = asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Launch interrupted by user")
        exit_code = 130
    except SublaunchError as exc:
        if args.json:
            sys.stdout.write(json.dumps(exc.to_dict()) + "\n")
        else:
            logger.error("%s", exc)  # noqa: TRY400
        exit_code = 2
    except NotADirectoryError as exc:
        logger.error("%s", exc)  # noqa: TRY400
        exit_code = 2
    sys.exit(exit_code)
