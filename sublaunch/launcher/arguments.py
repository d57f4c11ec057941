"""Argument handling for launched programs.

``format_arguments`` turns an executable, its arguments and a working
directory into the exact invocation handed to process creation. The
platform is a parameter so Windows quoting rules can be exercised anywhere.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING
from typing import NamedTuple
from typing import Sequence

from sublaunch.utils.paths import is_windows
from sublaunch.utils.paths import platform_path_to_preferred_case

if TYPE_CHECKING:
    from sublaunch.config import LaunchConfiguration

POWERSHELL_EXECUTABLE = "powershell.exe"
POWERSHELL_SCRIPT_SUFFIX = ".ps1"


class InvocationTuple(NamedTuple):
    """Fully resolved command ready for process creation."""

    executable: str
    args: list[str]
    shell: bool
    cwd: str


def get_launch_args(config: LaunchConfiguration) -> list[str]:
    """Build the runtime's argument list: runtime args, program, program args."""
    args = list(config.runtime_args)
    if config.program:
        args.append(config.program)
    args.extend(config.args)
    return args


def _quote(value: str) -> str:
    return f'"{value}"'


def format_arguments(
    executable: str,
    args: Sequence[str],
    cwd: str,
    platform: str = sys.platform,
) -> InvocationTuple:
    """Resolve the invocation for ``executable`` on ``platform``.

    On Windows the drive letter casing is normalized and ``.ps1`` scripts
    are run through PowerShell. When both the executable path and at least
    one argument contain a space, everything with a space is quoted and the
    command runs through the shell, since the direct Windows command line is
    split incorrectly in that case. An executable with a space but no
    argument with a space is left alone and run without the shell.
    """
    args = list(args)
    windows = is_windows(platform)

    if windows:
        executable = platform_path_to_preferred_case(executable, platform)
        cwd = platform_path_to_preferred_case(cwd, platform)

        if executable.endswith(POWERSHELL_SCRIPT_SUFFIX):
            args = ["-File", executable, *args]
            executable = POWERSHELL_EXECUTABLE

    if not windows or " " not in executable:
        return InvocationTuple(executable, args, False, cwd)

    found_arg_with_space = False
    quoted: list[str] = []
    for arg in args:
        if " " in arg:
            quoted.append(_quote(arg))
            found_arg_with_space = True
        else:
            quoted.append(arg)

    if found_arg_with_space:
        return InvocationTuple(_quote(executable), quoted, True, cwd)

    return InvocationTuple(executable, args, False, cwd)
