"""Constant-velocity scrolling driven by a discrete up/down/none state.

The animator knows nothing about commands: a voice intent, a key binding or
a button can all set the state. While the state is up or down, every frame
moves the target by a fixed step; setting it back to none cancels the
pending frame at once.
"""

import asyncio
from collections.abc import Callable
from typing import Any

from voicebook.core.constants import DEFAULT_FRAME_INTERVAL, DEFAULT_SCROLL_STEP
from voicebook.core.protocols import FrameScheduler, ScrollTarget
from voicebook.core.types import ScrollState


class AsyncioFrameScheduler:
    """Schedules frame callbacks on the running event loop."""

    __slots__ = ("interval", "_loop")

    def __init__(
        self,
        interval: float = DEFAULT_FRAME_INTERVAL,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.interval = interval
        self._loop = loop

    def request(self, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(self.interval, callback)

    def cancel(self, handle: Any) -> None:
        handle.cancel()


class ScrollAnimator:
    """Three-state scroll machine: idle, scrolling up, scrolling down."""

    __slots__ = ("_target", "_scheduler", "_step", "_state", "_handle", "_generation", "_closed")

    def __init__(
        self,
        target: ScrollTarget,
        scheduler: FrameScheduler,
        step: float = DEFAULT_SCROLL_STEP,
    ) -> None:
        self._target = target
        self._scheduler = scheduler
        self._step = step
        self._state = ScrollState.IDLE
        self._handle: Any = None
        # Bumped on every transition so frames queued under an older state
        # are ignored even if their cancellation lost a race.
        self._generation = 0
        self._closed = False

    @property
    def state(self) -> ScrollState:
        return self._state

    @property
    def running(self) -> bool:
        return self._handle is not None

    def set_state(self, state: ScrollState | str) -> None:
        state = ScrollState(state)
        if self._closed or state == self._state:
            return
        self._cancel_frame()
        self._state = state
        self._generation += 1
        if state is not ScrollState.IDLE:
            self._request_frame()

    def close(self) -> None:
        """Stop for good; called when the owning view unmounts."""
        self._cancel_frame()
        self._state = ScrollState.IDLE
        self._generation += 1
        self._closed = True

    def _request_frame(self) -> None:
        generation = self._generation
        self._handle = self._scheduler.request(lambda: self._on_frame(generation))

    def _cancel_frame(self) -> None:
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None

    def _on_frame(self, generation: int) -> None:
        if generation != self._generation or self._state is ScrollState.IDLE:
            return
        self._handle = None
        delta = self._step if self._state is ScrollState.DOWN else -self._step
        self._target.scroll_by(delta)
        self._request_frame()
