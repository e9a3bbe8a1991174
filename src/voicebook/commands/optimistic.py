"""Optimistic local updates with exact rollback on remote failure.

A mutation is applied to screen state before the backend confirms it. The
``apply`` step returns a snapshot of whatever it overwrote; if the remote
call fails, ``revert`` receives that snapshot and puts it back verbatim
rather than re-fetching from the store.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from voicebook.core.env import LOGGER
from voicebook.core.types import ActionResult, MutationResult


@dataclass(frozen=True, slots=True)
class OptimisticMutation:
    """Declarative description of one state-changing remote call.

    Attributes:
        commit: Async remote call returning a :class:`MutationResult`.
        apply: Synchronous local change; returns the pre-change snapshot.
            ``None`` for plain remote calls with nothing to show early.
        revert: Restores the snapshot returned by *apply*.
        success_message: Feedback on success (``None`` stays silent).
        failure_messages: Feedback keyed by collaborator failure reason.
        failure_message: Feedback for failures without a known reason.
        name: Label used in log lines.
    """

    commit: Callable[[], Awaitable[MutationResult]]
    apply: Callable[[], Any] | None = None
    revert: Callable[[Any], None] | None = None
    success_message: str | None = None
    failure_messages: Mapping[str, str] = field(default_factory=dict)
    failure_message: str | None = None
    name: str = "mutation"


class MutationExecutor:
    """Runs :class:`OptimisticMutation` descriptors for one screen.

    *on_change* is called right after the local state changes (apply and
    revert) so the owning screen can re-render immediately.
    """

    def __init__(self, on_change: Callable[[], None] | None = None) -> None:
        self._on_change = on_change

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    async def execute(self, mutation: OptimisticMutation) -> ActionResult:
        optimistic = mutation.apply is not None and mutation.revert is not None
        snapshot: Any = None
        if optimistic:
            snapshot = mutation.apply()
            self._changed()

        try:
            result = await mutation.commit()
        except asyncio.CancelledError:
            if optimistic:
                mutation.revert(snapshot)
                self._changed()
            raise
        except Exception as exc:
            LOGGER.warning("%s raised: %s", mutation.name, exc)
            result = MutationResult.error()

        if result.success:
            LOGGER.debug("%s committed", mutation.name)
            return ActionResult.succeeded(mutation.success_message)

        if optimistic:
            mutation.revert(snapshot)
            self._changed()
            LOGGER.info("%s failed (%s); local state rolled back", mutation.name, result.reason)
        else:
            LOGGER.info("%s failed (%s)", mutation.name, result.reason)

        message = mutation.failure_message
        if result.reason and result.reason in mutation.failure_messages:
            message = mutation.failure_messages[result.reason]
        return ActionResult.failed(result.reason or "mutation_failed", message)
