"""Pick the launcher responsible for a configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Iterable
from typing import Protocol

from sublaunch.errors import LaunchError

if TYPE_CHECKING:
    from sublaunch.config import LaunchConfiguration
    from sublaunch.launcher.program import SubprocessProgram
    from sublaunch.protocol import LaunchContext

logger = logging.getLogger(__name__)


class ProgramLauncher(Protocol):
    def can_launch(self, config: LaunchConfiguration) -> bool: ...

    async def launch_program(
        self,
        binary: str,
        config: LaunchConfiguration,
        context: LaunchContext,
    ) -> SubprocessProgram: ...


def select_launcher(
    launchers: Iterable[ProgramLauncher],
    config: LaunchConfiguration,
) -> ProgramLauncher:
    """Return the first launcher that accepts ``config``.

    Raises:
        LaunchError: If no launcher handles the configured console mode.
    """
    launchers = list(launchers)
    for launcher in launchers:
        if launcher.can_launch(config):
            logger.debug("Using %s for console=%s", type(launcher).__name__, config.console.value)
            return launcher

    raise LaunchError(
        f"No launcher available for console mode {config.console.value!r}",
        console=config.console.value,
        details={"launchers": [type(launcher).__name__ for launcher in launchers]},
    )
