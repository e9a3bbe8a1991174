"""One-shot completion signalling for submitted commands.

Every command that enters the pipeline must end in exactly one call to the
input controller's completion callback, otherwise the controller never
listens again.
"""

import contextlib
from collections.abc import Callable, Generator

from voicebook.core.env import LOGGER


class CompletionSignal:
    """Wraps a completion callback so it fires at most once."""

    __slots__ = ("_callback", "_fired")

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._fired = False

    @property
    def fired(self) -> bool:
        return self._fired

    def fire(self) -> None:
        if self._fired:
            LOGGER.warning("Completion signal fired more than once; ignored")
            return
        self._fired = True
        try:
            self._callback()
        except Exception:
            LOGGER.exception("Completion callback raised")


@contextlib.contextmanager
def completion_scope(
    callback: Callable[[], None],
) -> Generator[CompletionSignal, None, None]:
    """Fire *callback* exactly once when the block exits, however it exits."""
    signal = CompletionSignal(callback)
    try:
        yield signal
    finally:
        if not signal.fired:
            signal.fire()
