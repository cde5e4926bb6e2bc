"""Throttle for callbacks fired on every keystroke."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(kw_only=True)
class Throttle:
    """Call ``func`` at most once per ``interval`` seconds.

    The first call runs immediately; calls made during the interval are
    collapsed into a single trailing call with the latest arguments.
    Must be called from a running event loop.
    """

    func: Callable[..., None]
    interval: float
    _last_call: float | None = field(default=None, init=False)
    _pending: tuple[tuple[Any, ...], dict[str, Any]] | None = field(
        default=None, init=False
    )
    _handle: asyncio.TimerHandle | None = field(default=None, init=False, repr=False)

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        loop = asyncio.get_running_loop()
        now = loop.time()

        if self._handle is not None:
            self._pending = (args, kwargs)
            return

        last_call = self._last_call
        if last_call is None or now - last_call >= self.interval:
            self._last_call = now
            self.func(*args, **kwargs)
            return

        self._pending = (args, kwargs)
        delay = max(self.interval - (now - last_call), 0)
        self._handle = loop.call_later(delay, self._flush, loop)

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def cancel(self) -> None:
        """Drop the trailing call, if any."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending = None

    def _flush(self, loop: asyncio.AbstractEventLoop) -> None:
        self._handle = None
        if self._pending is None:
            return
        args, kwargs = self._pending
        self._pending = None
        self._last_call = loop.time()
        self.func(*args, **kwargs)
