"""Textual TUI: the current screen, a caption line and a command input.

Typing a command and pressing Enter submits it. The input is disabled
until the command's completion fires, so only one command is in flight
at a time. Scrolling (voice or keys) drives the body through a
ScrollAnimator running on Textual's event loop.
"""

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widget import Widget
from textual.widgets import Header, Input, Static

from voicebook.apps.config import VoicebookConfig
from voicebook.apps.session import Session, create_pipeline
from voicebook.apps.ui import render_caption, render_screen, render_status
from voicebook.backend import InMemorySocialStore
from voicebook.core.env import LOGGER
from voicebook.core.protocols import NluClient
from voicebook.core.types import ScrollState
from voicebook.models import AppView, User
from voicebook.screens import FriendsScreen, FriendsTab
from voicebook.scroll import AsyncioFrameScheduler, ScrollAnimator

_TAB_ORDER = (FriendsTab.REQUESTS, FriendsTab.SUGGESTIONS, FriendsTab.ALL_FRIENDS)


class WidgetScrollTarget:
    """Adapts a Textual widget to the animator's ScrollTarget."""

    __slots__ = ("_widget",)

    def __init__(self, widget: Widget) -> None:
        self._widget = widget

    def scroll_by(self, delta: float) -> None:
        self._widget.scroll_relative(y=delta, animate=False)


class VoicebookApp(App):
    """Command-driven social feed client."""

    TITLE = "Voicebook"

    CSS = """
    #body {
        height: 1fr;
        border: solid $primary;
    }
    #caption {
        height: auto;
        min-height: 1;
        padding: 0 2;
    }
    #command {
        dock: bottom;
    }
    #status-bar {
        height: 1;
        dock: bottom;
        background: $surface;
        color: $text-muted;
        padding: 0 2;
    }
    """

    BINDINGS = [
        Binding("ctrl+up", "scroll_state('up')", "Scroll up", priority=True),
        Binding("ctrl+down", "scroll_state('down')", "Scroll down", priority=True),
        Binding("escape", "scroll_state('none')", "Stop", priority=True),
        Binding("ctrl+t", "next_tab", "Next tab", priority=True),
        Binding("ctrl+b", "go_back", "Back", priority=True),
    ]

    def __init__(
        self,
        config: VoicebookConfig,
        store: InMemorySocialStore,
        current_user: User,
        start_view: AppView = AppView.FRIENDS,
        client: NluClient | None = None,
    ) -> None:
        super().__init__()
        self._config = config
        self._start_view = start_view
        self._caption: str | None = None
        self._busy = False
        self._scroller: ScrollAnimator | None = None
        self._mounted = False
        pipeline = create_pipeline(config, surface=self._show_caption, client=client)
        self._session = Session(
            store,
            current_user,
            pipeline,
            set_scroll=self._set_scroll,
            on_change=self._refresh_display,
        )

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll(id="body"):
            yield Static("", id="screen-view")
        yield Static("", id="caption")
        yield Static("", id="status-bar")
        yield Input(placeholder='Try "accept Alice" or "scroll down"', id="command")

    async def on_mount(self) -> None:
        self._mounted = True
        body = self.query_one("#body", VerticalScroll)
        self._scroller = ScrollAnimator(
            WidgetScrollTarget(body),
            AsyncioFrameScheduler(self._config.scroll.frame_interval),
            step=self._config.scroll.step,
        )
        await self._session.start(self._start_view)
        self._refresh_display()
        self.query_one("#command", Input).focus()

    def on_unmount(self) -> None:
        self._mounted = False
        if self._scroller is not None:
            self._scroller.close()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def scroll_state(self) -> ScrollState:
        return self._scroller.state if self._scroller is not None else ScrollState.IDLE

    # ── Rendering ────────────────────────────────────────────────────

    def _refresh_display(self) -> None:
        if not self._mounted or not self._session.stack:
            return
        screen = self._session.current
        self.query_one("#screen-view", Static).update(render_screen(screen))
        self.query_one("#caption", Static).update(render_caption(self._caption))
        self.query_one("#status-bar", Static).update(
            render_status(
                screen.name,
                self._config.nlu.model,
                busy=self._busy,
                scroll=self.scroll_state,
            )
        )

    def _show_caption(self, message: str) -> None:
        self._caption = message
        self._refresh_display()

    # ── Scrolling ────────────────────────────────────────────────────

    def _set_scroll(self, state: ScrollState) -> None:
        if self._scroller is None:
            return
        self._scroller.set_state(state)
        self._refresh_display()

    def action_scroll_state(self, state: str) -> None:
        self._set_scroll(ScrollState(state))

    # ── Commands ─────────────────────────────────────────────────────

    def on_input_submitted(self, event: Input.Submitted) -> None:
        text = event.value.strip()
        if not text or self._busy:
            return
        event.input.value = ""
        event.input.disabled = True
        self._busy = True
        self._refresh_display()
        self.run_worker(self._run_command(text), exclusive=True, group="command")

    async def _run_command(self, text: str) -> None:
        await self._session.submit(text, complete=self._on_complete)
        self._refresh_display()

    def _on_complete(self) -> None:
        self._busy = False
        command = self.query_one("#command", Input)
        command.disabled = False
        command.focus()
        self._refresh_display()

    def action_next_tab(self) -> None:
        screen = self._session.current
        if not isinstance(screen, FriendsScreen):
            return
        index = _TAB_ORDER.index(screen.active_tab)
        screen.select_tab(_TAB_ORDER[(index + 1) % len(_TAB_ORDER)])

    def action_go_back(self) -> None:
        if self._busy:
            LOGGER.debug("Ignoring back while a command is running")
            return
        self._session.go_back()
