"""Launch configuration for subprocess programs.

The configuration is built from the ``arguments`` of a DAP ``launch``
request and describes one program launch: where its output goes, how it is
started and how it should later be stopped.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import Mapping

from sublaunch.errors import ConfigurationError


class ConsoleMode(str, Enum):
    """Where the launched program's console lives."""

    INTERNAL_CONSOLE = "internalConsole"
    INTEGRATED_TERMINAL = "integratedTerminal"
    EXTERNAL_TERMINAL = "externalTerminal"


class OutputSource(str, Enum):
    """Which channel delivers program output to the debug console.

    ``CONSOLE`` means the runtime reports output itself once a debugger is
    attached, so the raw stdio pipes are discarded. ``STDIO`` means the raw
    stdout/stderr pipes are captured and forwarded.
    """

    CONSOLE = "console"
    STDIO = "std"


class KillBehavior(str, Enum):
    """How the program should be stopped when the session ends."""

    FORCEFUL = "forceful"
    POLITE = "polite"
    NONE = "none"


def _coerce_enum(enum_type: type[Enum], value: Any, config_key: str) -> Any:
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(
            f"Invalid value {value!r} for {config_key} (expected one of: {allowed})",
            config_key=config_key,
            details={"value": value},
        ) from None


@dataclass
class LaunchConfiguration:
    """Configuration for a single program launch."""

    console: ConsoleMode = ConsoleMode.INTERNAL_CONSOLE
    program: str = ""
    args: list[str] = field(default_factory=list)
    runtime_args: list[str] = field(default_factory=list)
    cwd: str | None = None
    # A value of None removes the variable from the inherited environment.
    env: dict[str, str | None] = field(default_factory=dict)
    output_capture: OutputSource = OutputSource.CONSOLE
    kill_behavior: KillBehavior = KillBehavior.FORCEFUL

    def __post_init__(self) -> None:
        self.console = _coerce_enum(ConsoleMode, self.console, "console")
        self.output_capture = _coerce_enum(OutputSource, self.output_capture, "outputCapture")
        self.kill_behavior = _coerce_enum(KillBehavior, self.kill_behavior, "killBehavior")

    @classmethod
    def from_launch_request(cls, request: Mapping[str, Any]) -> LaunchConfiguration:
        """Create config from launch request arguments."""
        args = request.get("arguments", {})

        return cls(
            console=args.get("console", ConsoleMode.INTERNAL_CONSOLE),
            program=args.get("program", ""),
            args=list(args.get("args", [])),
            runtime_args=list(args.get("runtimeArgs", [])),
            cwd=args.get("cwd"),
            env=dict(args.get("env", {})),
            output_capture=args.get("outputCapture", OutputSource.CONSOLE),
            kill_behavior=args.get("killBehavior", KillBehavior.FORCEFUL),
        )

    def validate(self) -> None:
        """Validate configuration and raise errors for invalid setups."""
        if not self.program and not self.runtime_args:
            raise ConfigurationError(
                "Either a program or runtime arguments are required to launch",
                config_key="program",
            )

        for key, values in (("args", self.args), ("runtimeArgs", self.runtime_args)):
            bad = [value for value in values if not isinstance(value, str)]
            if bad:
                raise ConfigurationError(
                    f"All {key} entries must be strings",
                    config_key=key,
                    details={"invalid": bad},
                )

        bad_env = [
            key
            for key, value in self.env.items()
            if not isinstance(key, str) or (value is not None and not isinstance(value, str))
        ]
        if bad_env:
            raise ConfigurationError(
                "Environment values must be strings or null",
                config_key="env",
                details={"invalid": bad_env},
            )
