"""Shared plumbing for screens that accept spoken or typed commands."""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from voicebook.commands.dispatch import Action, ScreenTable
from voicebook.commands.optimistic import MutationExecutor
from voicebook.commands.pipeline import CommandPipeline
from voicebook.core.protocols import Navigator
from voicebook.core.types import (
    ActionResult,
    EntityContext,
    Intent,
    ScrollState,
    SlotValue,
)
from voicebook.models import AppView

Slots = Mapping[str, SlotValue]

# Global "open X" intents and the view each one opens.
NAVIGATION_VIEWS: dict[Intent, AppView] = {
    Intent.OPEN_ADS_CENTER: AppView.ADS_CENTER,
    Intent.OPEN_MESSAGES: AppView.CONVERSATIONS,
    Intent.OPEN_ROOMS_HUB: AppView.ROOMS_HUB,
    Intent.OPEN_AUDIO_ROOMS: AppView.ROOMS_LIST,
    Intent.OPEN_VIDEO_ROOMS: AppView.VIDEO_ROOMS_LIST,
}

_SCROLL_INTENTS: dict[Intent, ScrollState] = {
    Intent.SCROLL_UP: ScrollState.UP,
    Intent.SCROLL_DOWN: ScrollState.DOWN,
    Intent.STOP_SCROLL: ScrollState.IDLE,
}


def navigation_actions(
    navigator: Navigator,
    set_scroll: Callable[[ScrollState], None] | None = None,
) -> list[Action]:
    """Global actions every command screen shares: back, open views, scroll."""

    async def go_back(_entity: Any, _slots: Slots) -> ActionResult:
        navigator.go_back()
        return ActionResult.succeeded()

    def open_view(view: AppView):
        async def handler(_entity: Any, _slots: Slots) -> ActionResult:
            navigator.navigate(view)
            return ActionResult.succeeded()

        return handler

    def scroll_to(state: ScrollState):
        async def handler(_entity: Any, _slots: Slots) -> ActionResult:
            set_scroll(state)
            return ActionResult.succeeded()

        return handler

    actions = [Action(Intent.GO_BACK, go_back)]
    actions.extend(Action(intent, open_view(view)) for intent, view in NAVIGATION_VIEWS.items())
    if set_scroll is not None:
        actions.extend(
            Action(intent, scroll_to(state)) for intent, state in _SCROLL_INTENTS.items()
        )
    return actions


class CommandScreen:
    """Base for a screen with its own entity context and intent table.

    Subclasses implement :meth:`entity_context` and :meth:`actions`. The
    table is built once; the context is rebuilt on every command from
    whatever the screen currently shows.
    """

    name = "screen"

    def __init__(
        self,
        navigator: Navigator,
        set_scroll: Callable[[ScrollState], None] | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.navigator = navigator
        self.set_scroll = set_scroll
        self.on_change = on_change
        self.executor = MutationExecutor(on_change=self._changed)
        self._table: ScreenTable | None = None

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def entity_context(self) -> EntityContext:
        raise NotImplementedError

    def actions(self) -> Iterable[Action]:
        raise NotImplementedError

    @property
    def table(self) -> ScreenTable:
        if self._table is None:
            self._table = ScreenTable(self.name, self.actions())
        return self._table

    async def handle_command(
        self,
        pipeline: CommandPipeline,
        utterance: str,
        complete: Callable[[], None],
    ) -> ActionResult:
        return await pipeline.run(utterance, self.entity_context(), self.table, complete)


class ViewScreen(CommandScreen):
    """A destination with nothing nameable on it; only global commands apply."""

    def __init__(
        self,
        view: AppView,
        navigator: Navigator,
        set_scroll: Callable[[ScrollState], None] | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(navigator, set_scroll=set_scroll, on_change=on_change)
        self.view = view
        self.name = str(view)

    def entity_context(self) -> EntityContext:
        return EntityContext()

    def actions(self) -> list[Action]:
        return navigation_actions(self.navigator, self.set_scroll)
