"""Host wiring shared by the TUI and the console REPL.

A Session owns the screen stack for one signed-in user and is the
Navigator every screen talks to. Screens pushed by a command are loaded
before that command reports completion, so the next command sees their
content.
"""

import asyncio
from collections.abc import Callable

from voicebook.apps.config import VoicebookConfig
from voicebook.backend import InMemorySocialStore
from voicebook.commands.completion import completion_scope
from voicebook.commands.feedback import FeedbackChannel
from voicebook.commands.nlu import LitellmNluClient
from voicebook.commands.pipeline import CommandPipeline
from voicebook.commands.resolver import IntentResolver
from voicebook.core.env import LOGGER
from voicebook.core.protocols import FeedbackSurface, NluClient
from voicebook.core.types import ActionResult, ScrollState
from voicebook.models import AppView, User
from voicebook.screens import (
    CommandScreen,
    FeedScreen,
    FriendsScreen,
    ProfileScreen,
    ViewScreen,
)


def create_pipeline(
    config: VoicebookConfig,
    surface: FeedbackSurface | None = None,
    client: NluClient | None = None,
) -> CommandPipeline:
    """Build the command pipeline from configuration."""
    if client is None:
        client = LitellmNluClient(
            model=config.nlu.model,
            prompt=config.nlu.prompt,
            max_tokens=config.nlu.max_tokens,
            flags=config.nlu.flags,
        )
    resolver = IntentResolver(
        client,
        timeout=config.nlu.timeout,
        corrections=config.corrections,
    )
    return CommandPipeline(resolver, FeedbackChannel(surface))


def _noop() -> None:
    pass


class Session:
    """Screen stack and navigation for one user."""

    def __init__(
        self,
        store: InMemorySocialStore,
        current_user: User,
        pipeline: CommandPipeline,
        set_scroll: Callable[[ScrollState], None] | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.store = store
        self.current_user = current_user
        self.pipeline = pipeline
        self.set_scroll = set_scroll
        self.on_change = on_change
        self.stack: list[CommandScreen] = []
        self._pending: list[CommandScreen] = []

    @property
    def current(self) -> CommandScreen:
        if not self.stack:
            raise RuntimeError("session has not been started")
        return self.stack[-1]

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _push(self, screen: CommandScreen) -> None:
        self.stack.append(screen)
        self._pending.append(screen)
        LOGGER.debug("Navigated to %s (depth %d)", screen.name, len(self.stack))
        self._changed()

    def _make_screen(self, view: AppView) -> CommandScreen:
        common = {"set_scroll": self.set_scroll, "on_change": self._changed}
        if view is AppView.FRIENDS:
            return FriendsScreen(self.current_user, self.store, self, **common)
        if view is AppView.FEED:
            return FeedScreen(self.current_user, self.store, self, **common)
        if view is AppView.PROFILE:
            return ProfileScreen(
                self.current_user, self.current_user.username, self.store, self, **common
            )
        return ViewScreen(view, self, **common)

    # -- Navigator ---------------------------------------------------------

    def navigate(self, view: AppView | str) -> None:
        self._push(self._make_screen(AppView(view)))

    def go_back(self) -> None:
        if len(self.stack) <= 1:
            LOGGER.debug("Already at the first screen")
            return
        screen = self.stack.pop()
        if screen in self._pending:
            self._pending.remove(screen)
        self._changed()

    def open_profile(self, username: str) -> None:
        self._push(
            ProfileScreen(
                self.current_user,
                username,
                self.store,
                self,
                set_scroll=self.set_scroll,
                on_change=self._changed,
            )
        )

    # -- lifecycle ---------------------------------------------------------

    async def _load(self, screen: CommandScreen) -> str | None:
        if isinstance(screen, FriendsScreen):
            uid = self.current_user.id
            screen.set_requests(await self.store.get_friend_requests(uid))
            screen.set_friends(await self.store.get_friends(uid))
            return await screen.load()
        if isinstance(screen, (FeedScreen, ProfileScreen)):
            return await screen.load()
        return None

    async def settle(self) -> None:
        """Load every screen pushed since the last call and announce it."""
        while self._pending:
            screen = self._pending.pop(0)
            if screen not in self.stack:
                continue
            try:
                message = await self._load(screen)
            except asyncio.CancelledError:
                self._pending.insert(0, screen)
                raise
            except Exception:
                LOGGER.exception("Failed to load %s", screen.name)
                message = None
            if screen is self.current:
                self.pipeline.feedback.emit(message)

    async def start(self, view: AppView | str = AppView.FRIENDS) -> None:
        self.navigate(view)
        await self.settle()

    async def submit(
        self,
        utterance: str,
        complete: Callable[[], None] | None = None,
    ) -> ActionResult:
        """Run one command on the current screen, then load what it opened.

        *complete* fires once the opened screen has loaded, so the host
        does not take the next command while that screen is still empty.
        """
        with completion_scope(complete or _noop):
            result = await self.current.handle_command(self.pipeline, utterance, _noop)
            await self.settle()
        return result
