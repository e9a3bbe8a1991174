"""Tests for the rich render functions."""

from __future__ import annotations

import asyncio

from rich.console import Console

from voicebook.apps.ui import (
    render_caption,
    render_screen,
    render_status,
    short_model_name,
)
from voicebook.core.types import ScrollState
from voicebook.models import AppView
from voicebook.screens import FeedScreen, FriendsScreen, FriendsTab, ProfileScreen, ViewScreen


def _text(renderable) -> str:
    console = Console(width=100, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestRenderScreens:
    def test_friends(self, store, me, navigator) -> None:
        screen = FriendsScreen(me, store, navigator, requests=[store.get_user("u2")])
        asyncio.run(screen.load())
        out = _text(render_screen(screen))
        assert "Requests (1)" in out
        assert "Alice" in out
        assert "Wants to be friends" in out

    def test_friends_loading(self, store, me, navigator) -> None:
        screen = FriendsScreen(me, store, navigator)
        assert "Loading..." in _text(render_screen(screen))

    def test_friends_empty_tab(self, store, me, navigator) -> None:
        screen = FriendsScreen(me, store, navigator, initial_tab=FriendsTab.ALL_FRIENDS)
        asyncio.run(screen.load())
        assert "Nobody here yet." in _text(render_screen(screen))

    def test_profile(self, store, me, navigator) -> None:
        screen = ProfileScreen(me, "dave", store, navigator)
        assert "Loading @dave" in _text(render_screen(screen))
        asyncio.run(screen.load())
        out = _text(render_screen(screen))
        assert "@dave" in out
        assert "Friends" in out

    def test_feed_with_poll(self, store, me, navigator) -> None:
        screen = FeedScreen(me, store, navigator)
        asyncio.run(screen.load())
        asyncio.run(screen.next_post())
        asyncio.run(screen.vote(screen.active_post.poll.options[0]))
        out = _text(render_screen(screen))
        assert "Feed 2/3" in out
        assert "Dinner?" in out
        assert "Pizza \N{CHECK MARK}" in out

    def test_view(self, navigator) -> None:
        out = _text(render_screen(ViewScreen(AppView.ADS_CENTER, navigator)))
        assert "Ads Center" in out


class TestStatus:
    def test_short_model_name(self) -> None:
        assert short_model_name("ollama/llama3.2") == "llama3.2"
        assert short_model_name(None) == "--"

    def test_status_line(self) -> None:
        text = render_status("all_friends", "ollama/llama3.2", busy=True, scroll=ScrollState.DOWN)
        assert text.plain == "Screen: All Friends | Working... | NLU: llama3.2 | Scrolling down"

    def test_caption(self) -> None:
        assert render_caption(None).plain == ""
        assert "Friend request sent" in render_caption("Friend request sent to Erin.").plain
