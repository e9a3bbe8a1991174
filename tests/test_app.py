"""Headless tests for the Textual app using Textual's pilot."""

from __future__ import annotations

import asyncio

from conftest import FakeNluClient, reply
from textual.widgets import Input

from voicebook.apps.app import VoicebookApp
from voicebook.apps.config import VoicebookConfig
from voicebook.backend import demo_store
from voicebook.core.types import Intent, ScrollState
from voicebook.models import FriendshipStatus
from voicebook.screens import FriendsScreen, FriendsTab, ProfileScreen


def _app(store, me, replies=None) -> VoicebookApp:
    return VoicebookApp(VoicebookConfig(), store, me, client=FakeNluClient(replies))


class TestVoicebookApp:
    def test_command_runs_and_input_reenabled(self, store, me) -> None:
        app = _app(
            store, me, {"accept alice": reply(Intent.ACCEPT_REQUEST, target_name="Alice")}
        )

        async def main() -> tuple[bool, list[str]]:
            async with app.run_test() as pilot:
                await pilot.pause()
                command = app.query_one("#command", Input)
                command.value = "accept alice"
                await pilot.press("enter")
                await app.workers.wait_for_complete()
                await pilot.pause()
                screen = app.session.current
                assert isinstance(screen, FriendsScreen)
                return command.disabled, [u.name for u in screen.friends]

        disabled, friends = asyncio.run(main())
        assert not disabled
        assert "Alice" in friends

    def test_scroll_keys(self, store, me) -> None:
        app = _app(store, me)

        async def main() -> list[ScrollState]:
            states = []
            async with app.run_test() as pilot:
                await pilot.pause()
                await pilot.press("ctrl+down")
                states.append(app.scroll_state)
                await pilot.press("escape")
                states.append(app.scroll_state)
            return states

        assert asyncio.run(main()) == [ScrollState.DOWN, ScrollState.IDLE]

    def test_next_tab_key(self, store, me) -> None:
        app = _app(store, me)

        async def main() -> FriendsTab:
            async with app.run_test() as pilot:
                await pilot.pause()
                await pilot.press("ctrl+t")
                return app.session.current.active_tab

        assert asyncio.run(main()) is FriendsTab.SUGGESTIONS

    def test_mount_keeps_textual_animator(self, store, me) -> None:
        app = _app(store, me)

        async def main() -> bool:
            async with app.run_test() as pilot:
                await pilot.pause()
                return app.animator is not None and app.scroll_state is ScrollState.IDLE

        assert asyncio.run(main())

    def test_next_command_waits_for_opened_profile(self, me) -> None:
        slow = demo_store(latency=0.3)
        client = FakeNluClient(
            {
                "open alice": reply(Intent.OPEN_PROFILE, target_name="Alice"),
                "accept": reply(Intent.ACCEPT_REQUEST),
            }
        )
        app = VoicebookApp(VoicebookConfig(), slow, slow.get_user(me.id), client=client)

        async def main() -> tuple[ProfileScreen, list[str]]:
            async with app.run_test() as pilot:
                await pilot.pause(3.0)
                command = app.query_one("#command", Input)
                command.value = "open alice"
                await pilot.press("enter")
                await pilot.pause(0.1)
                # Still loading the profile: the input takes nothing new.
                assert command.disabled
                await app.workers.wait_for_complete()
                await pilot.pause()
                profile = app.session.current
                assert isinstance(profile, ProfileScreen)
                assert profile.profile_user is not None
                assert not command.disabled

                command.value = "accept"
                await pilot.press("enter")
                await app.workers.wait_for_complete()
                await pilot.pause()
                return profile, [text for text, _ in client.calls]

        profile, calls = asyncio.run(main())
        assert calls == ["open alice", "accept"]
        assert profile.friendship_status is FriendshipStatus.FRIENDS
