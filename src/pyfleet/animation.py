"""Marker animation between committed positions.

Each call to :meth:`Animator.animate` starts an independent asyncio task that
glides a marker from one position to the next, one step per frame. Calls are
non-blocking; the reconciler never waits for an animation.

A newer animation for the same vehicle supersedes the older one: every call
bumps a per-vehicle generation counter and a running sequence stops before
its next frame once its generation is stale, so two animations never move
the same marker at once.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pyfleet._constants import ANIMATION_DURATION_S, FRAME_INTERVAL_S
from pyfleet.models.position import Position
from pyfleet.rendering import MarkerHandle

_logger = logging.getLogger(__name__)


def interpolate(from_: Position, to: Position, t: float) -> Position:
    """Position at fraction *t* (clamped to ``[0, 1]``) of the way to *to*."""
    return from_.lerp(to, max(0.0, min(1.0, t)))


class Animator:
    """Run per-vehicle marker animations on the running event loop."""

    def __init__(
        self,
        *,
        frame_interval: float = FRAME_INTERVAL_S,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._frame_interval = frame_interval
        self._clock = clock
        self._sleep = sleep
        self._generations: dict[str, int] = {}
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def running(self) -> int:
        """Number of animation tasks not yet finished."""
        return sum(1 for task in self._tasks if not task.done())

    def generation(self, key: str) -> int:
        return self._generations.get(key, 0)

    def animate(
        self,
        key: str,
        handle: MarkerHandle | None,
        from_: Position | None,
        to: Position | None,
        duration: float = ANIMATION_DURATION_S,
    ) -> asyncio.Task[None] | None:
        """Start gliding *handle* from *from_* to *to* over *duration* seconds.

        Returns the animation task, or ``None`` when nothing was scheduled
        (missing handle or position, or no running event loop, in which case
        the marker is moved straight to *to*).
        """
        if handle is None or from_ is None or to is None:
            return None

        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._move(key, handle, to)
            return None

        task = loop.create_task(self._run(key, generation, handle, from_, to, duration, loop))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def forget(self, key: str) -> None:
        """Supersede any running animation for *key* and drop its counter."""
        self._generations.pop(key, None)

    async def aclose(self) -> None:
        """Cancel every running animation."""
        tasks = [task for task in self._tasks if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    def _move(self, key: str, handle: MarkerHandle, position: Position) -> bool:
        try:
            handle.set_position(position)
        except Exception:
            _logger.warning("Failed to move marker for %s", key, exc_info=True)
            return False
        return True

    async def _run(
        self,
        key: str,
        generation: int,
        handle: MarkerHandle,
        from_: Position,
        to: Position,
        duration: float,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        clock = self._clock or loop.time
        start = clock()
        while True:
            if self._generations.get(key) != generation:
                _logger.debug("Animation for %s superseded (generation %d)", key, generation)
                return
            elapsed = clock() - start
            t = 1.0 if duration <= 0 else min(1.0, elapsed / duration)
            if not self._move(key, handle, interpolate(from_, to, t)):
                return
            if t >= 1.0:
                return
            await self._sleep(self._frame_interval)
