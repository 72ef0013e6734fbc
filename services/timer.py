"""One-shot answer countdown bound to the active question."""
from __future__ import annotations

import asyncio
import inspect
import time
from typing import Any, Awaitable, Callable, Optional, Union

ExpiryCallback = Callable[[], Union[None, Awaitable[Any]]]


class SessionTimer:
    """Fire ``on_expire`` once after ``arm(duration)`` unless cancelled first.

    A timer is armed at most once; sessions create a fresh instance per
    question. ``cancel`` is idempotent and a no-op once the timer has fired,
    so an expiry callback may cancel its own timer.
    """

    def __init__(self, on_expire: ExpiryCallback) -> None:
        self._on_expire = on_expire
        self._task: Optional[asyncio.Task] = None
        self._deadline: Optional[float] = None
        self._fired = False
        self._cancelled = False

    @property
    def armed(self) -> bool:
        return self._task is not None and not self._fired and not self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def arm(self, duration_s: float) -> None:
        if self._task is not None:
            raise RuntimeError("timer already armed")
        self._deadline = time.monotonic() + duration_s
        self._task = asyncio.get_running_loop().create_task(self._run(duration_s))

    def time_left(self) -> float:
        if self._deadline is None or self._fired or self._cancelled:
            return 0.0
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self) -> None:
        if self._fired or self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def _run(self, duration_s: float) -> None:
        await asyncio.sleep(duration_s)
        if self._cancelled:
            return
        self._fired = True
        result = self._on_expire()
        if inspect.isawaitable(result):
            await result


__all__ = ["SessionTimer"]
