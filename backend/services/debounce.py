"""Trailing-edge debounce helpers for asyncio code."""
import asyncio
import functools
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """Hold a value that only changes once input has settled for `delay` seconds.

    Every call to set() cancels the pending commit and restarts the timer, so a
    burst of updates commits exactly one value: the last one. Must be used from
    inside a running event loop.
    """

    def __init__(self, initial: Any, delay: float, on_change: Callable[[Any], None] | None = None):
        if delay < 0:
            raise ValueError("delay must be non-negative")
        self.delay = delay
        self.on_change = on_change
        self._value = initial
        self._handle: asyncio.TimerHandle | None = None

    @property
    def value(self) -> Any:
        return self._value

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def set(self, value: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._commit, value)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _commit(self, value: Any) -> None:
        self._handle = None
        self._value = value
        if self.on_change is not None:
            self.on_change(value)

    async def __aenter__(self) -> "Debouncer":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.cancel()


def debounce(delay: float):
    """Decorate an async function so only the last call in a burst runs.

    Only the waiting period can be superseded: once a call's delay has
    elapsed the wrapped function runs to completion. Superseded calls return
    None without running the wrapped function.
    """

    def decorator(func):
        state: dict[str, asyncio.Future | None] = {"timer": None}

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            previous = state["timer"]
            if previous is not None and not previous.done():
                previous.cancel()
            timer = asyncio.ensure_future(asyncio.sleep(delay))
            state["timer"] = timer
            try:
                await timer
            except asyncio.CancelledError:
                if timer.cancelled() and state["timer"] is not timer:
                    logger.debug("Debounced call to %s superseded", func.__name__)
                    return None
                raise
            return await func(*args, **kwargs)

        def cancel() -> None:
            timer = state["timer"]
            if timer is not None and not timer.done():
                timer.cancel()

        wrapper.cancel = cancel  # type: ignore[attr-defined]
        return wrapper

    return decorator
