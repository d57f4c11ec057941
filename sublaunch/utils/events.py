"""Small event utilities used by the launcher.

Provides a minimal synchronous EventEmitter with add_listener/remove_listener/emit.
"""

from __future__ import annotations

import logging
from typing import Any
from typing import Callable

logger = logging.getLogger(__name__)

Unsubscribe = Callable[[], None]


class EventEmitter:
    """Tiny synchronous event emitter.

    API:
    - add_listener(callable) -> unsubscribe callable
    - remove_listener(callable)
    - emit(*args, **kwargs)
    """

    def __init__(self) -> None:
        self._listeners: list[Any] = []

    def __len__(self) -> int:
        return len(self._listeners)

    def add_listener(self, fn: Any) -> Unsubscribe:
        self._listeners.append(fn)

        def _unsubscribe() -> None:
            self.remove_listener(fn)

        return _unsubscribe

    def remove_listener(self, fn: Any) -> None:
        try:
            self._listeners.remove(fn)
        except ValueError:
            pass

    def emit(self, *args: Any, **kwargs: Any) -> None:
        listeners = list(self._listeners)
        for fn in listeners:
            try:
                fn(*args, **kwargs)
            except Exception:
                logger.exception("error in event listener")
