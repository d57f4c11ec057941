"""Program launchers: argument handling, process spawning and stdio routing."""

from sublaunch.launcher.arguments import InvocationTuple
from sublaunch.launcher.arguments import format_arguments
from sublaunch.launcher.arguments import get_launch_args
from sublaunch.launcher.child_process import ChildProcess
from sublaunch.launcher.dispatch import select_launcher
from sublaunch.launcher.program import SubprocessProgram
from sublaunch.launcher.subprocess_launcher import SubprocessProgramLauncher

__all__ = [
    "ChildProcess",
    "InvocationTuple",
    "SubprocessProgram",
    "SubprocessProgramLauncher",
    "format_arguments",
    "get_launch_args",
    "select_launcher",
]
