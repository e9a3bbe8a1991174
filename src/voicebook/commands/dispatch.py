"""Generic action dispatch over declarative per-screen intent tables.

Each screen declares a list of :class:`Action` entries. Actions that need a
target entity are looked up only when the slot bound to something on
screen; the rest form the screen's global table (navigation, reload,
scrolling). The same intent may appear in both halves.
"""

from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from voicebook.commands.feedback import tts_prompt
from voicebook.core.env import LOGGER
from voicebook.core.types import (
    ActionResult,
    BindStatus,
    BoundSlot,
    IntentResult,
    SlotValue,
)

Handler = Callable[[Any, Mapping[str, SlotValue]], Awaitable[ActionResult]]


@dataclass(frozen=True, slots=True)
class Action:
    """One row of a screen's intent table."""

    intent: str
    handler: Handler
    requires_entity: bool = False


class ScreenTable:
    """A screen's recognized intents, split into targeted and global maps."""

    __slots__ = ("name", "_targeted", "_global")

    def __init__(self, name: str, actions: Iterable[Action]) -> None:
        self.name = name
        targeted: dict[str, Handler] = {}
        global_: dict[str, Handler] = {}
        for action in actions:
            table = targeted if action.requires_entity else global_
            if action.intent in table:
                raise ValueError(
                    f"{name}: duplicate {'targeted' if action.requires_entity else 'global'} "
                    f"action for {action.intent}"
                )
            table[action.intent] = action.handler
        self._targeted = MappingProxyType(targeted)
        self._global = MappingProxyType(global_)

    @property
    def targeted(self) -> Mapping[str, Handler]:
        return self._targeted

    @property
    def global_(self) -> Mapping[str, Handler]:
        return self._global

    def recognizes(self, intent: str) -> bool:
        return intent in self._targeted or intent in self._global


async def dispatch(
    intent_result: IntentResult,
    bound: BoundSlot,
    table: ScreenTable,
) -> ActionResult:
    """Route an intent to the screen's handler.

    Order:

    1. A bound entity with a targeted handler wins outright.
    2. A slot that names nothing on screen stops any targeted intent: the
       command is not applicable and no entity is guessed.
    3. Otherwise the global table is consulted.
    4. Anything left over was not understood.
    """
    intent = intent_result.intent
    targeted = table.targeted.get(intent)

    if targeted is not None:
        if bound.is_resolved:
            LOGGER.debug("%s: %s -> targeted handler", table.name, intent)
            return await targeted(bound.entity, intent_result.slots)
        if bound.status is BindStatus.UNRESOLVED:
            LOGGER.info(
                "%s: %s target %r is not on screen", table.name, intent, bound.value
            )
            return ActionResult.not_applicable(
                "unresolved_target", tts_prompt("action_failed")
            )

    handler = table.global_.get(intent)
    if handler is not None:
        LOGGER.debug("%s: %s -> global handler", table.name, intent)
        return await handler(None, intent_result.slots)

    return ActionResult.not_applicable("unrecognized", tts_prompt("not_understood"))
