"""Handle returned to callers for a program started by a launcher."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sublaunch.config import KillBehavior

if TYPE_CHECKING:
    from sublaunch.launcher.child_process import ChildProcess


class SubprocessProgram:
    """A running program plus the policy for stopping it.

    The launcher only passes ``kill_behavior`` through; it is consulted
    here when the session asks the program to stop.
    """

    def __init__(
        self,
        child: ChildProcess,
        logger: logging.Logger,
        kill_behavior: KillBehavior,
    ) -> None:
        self.child = child
        self.logger = logger
        self.kill_behavior = kill_behavior

    @property
    def pid(self) -> int | None:
        return self.child.pid

    async def stopped(self) -> int | None:
        """Wait for the program to exit and return its exit code."""
        return await self.child.wait()

    def stop(self) -> None:
        """Stop the program according to its kill behavior."""
        if self.child.pid is None or self.child.returncode is not None:
            self.logger.debug("Program already exited, nothing to stop")
            return

        if self.kill_behavior is KillBehavior.FORCEFUL:
            self.logger.info("Killing program (pid=%s)", self.child.pid)
            self.child.kill()
        elif self.kill_behavior is KillBehavior.POLITE:
            self.logger.info("Terminating program (pid=%s)", self.child.pid)
            self.child.terminate()
        else:
            self.logger.info("Leaving program running (pid=%s)", self.child.pid)
