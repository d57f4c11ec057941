"""Environment variable merging for launched programs."""

from __future__ import annotations

import os
import sys
from typing import Mapping
from typing import Optional

from sublaunch.utils.paths import is_windows

EnvValue = Optional[str]


class EnvironmentVars:
    """Immutable set of environment variables.

    Values may be ``None``, meaning "unset this variable". ``None`` entries
    survive merges so an override can remove an inherited variable, and are
    dropped by :meth:`defined` right before the mapping is handed to the OS.
    On Windows variable names are matched case-insensitively.
    """

    def __init__(
        self,
        values: Mapping[str, EnvValue] | None = None,
        platform: str = sys.platform,
    ) -> None:
        self._values: dict[str, EnvValue] = dict(values or {})
        self._platform = platform

    @classmethod
    def process_env(cls, platform: str = sys.platform) -> EnvironmentVars:
        """Return the environment of the current process."""
        return cls(os.environ, platform=platform)

    @classmethod
    def merge(
        cls,
        *sources: EnvironmentVars | Mapping[str, EnvValue] | None,
        platform: str = sys.platform,
    ) -> EnvironmentVars:
        """Merge ``sources`` left to right; later sources win on collision."""
        result = cls(platform=platform)
        for source in sources:
            if source is None:
                continue
            values = source.as_dict() if isinstance(source, EnvironmentVars) else source
            for key, value in values.items():
                result._set(key, value)
        return result

    def _set(self, key: str, value: EnvValue) -> None:
        if is_windows(self._platform):
            folded = key.lower()
            for existing in [k for k in self._values if k.lower() == folded]:
                del self._values[existing]
        self._values[key] = value

    def as_dict(self) -> dict[str, EnvValue]:
        return dict(self._values)

    def defined(self) -> dict[str, str]:
        """Return the variables that have a value, ready for process creation."""
        return {key: value for key, value in self._values.items() if value is not None}
