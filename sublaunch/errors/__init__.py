"""Error handling for the subprocess launcher."""

from sublaunch.errors.sublaunch_errors import ConfigurationError
from sublaunch.errors.sublaunch_errors import LaunchError
from sublaunch.errors.sublaunch_errors import SublaunchError

__all__ = [
    "ConfigurationError",
    "LaunchError",
    "SublaunchError",
]
