"""Configuration for program launches."""

from sublaunch.config.launch_config import ConsoleMode
from sublaunch.config.launch_config import KillBehavior
from sublaunch.config.launch_config import LaunchConfiguration
from sublaunch.config.launch_config import OutputSource

__all__ = [
    "ConsoleMode",
    "KillBehavior",
    "LaunchConfiguration",
    "OutputSource",
]
