"""Tests for the host session: screen stack, navigation and loading."""

from __future__ import annotations

import asyncio

import pytest
from conftest import FakeNluClient, reply

from voicebook.apps.config import VoicebookConfig
from voicebook.apps.session import Session, create_pipeline
from voicebook.backend import demo_store
from voicebook.commands.nlu import LitellmNluClient
from voicebook.core.types import Intent
from voicebook.models import AppView, FriendshipStatus
from voicebook.screens import FeedScreen, FriendsScreen, ProfileScreen, ViewScreen

_REPLIES = {
    "open bob": reply(Intent.OPEN_PROFILE, target_name="Bob"),
    "back": reply(Intent.GO_BACK),
    "messages": reply(Intent.OPEN_MESSAGES),
    "down": reply(Intent.SCROLL_DOWN),
}


@pytest.fixture
def scroll_states() -> list[str]:
    return []


@pytest.fixture
def session(store, me, make_pipeline, scroll_states) -> Session:
    return Session(store, me, make_pipeline(_REPLIES), set_scroll=scroll_states.append)


class TestSession:
    def test_not_started(self, session: Session) -> None:
        with pytest.raises(RuntimeError):
            session.current

    def test_start_loads_friends(self, session: Session, surface) -> None:
        asyncio.run(session.start())
        screen = session.current
        assert isinstance(screen, FriendsScreen)
        assert [u.name for u in screen.requests] == ["Alice", "Bob"]
        assert [u.name for u in screen.friends] == ["Dave"]
        assert surface.messages == ["Here are your friends and requests."]

    def test_open_profile_then_back(self, session: Session, surface, complete) -> None:
        asyncio.run(session.start())
        asyncio.run(session.submit("open bob", complete))
        profile = session.current
        assert isinstance(profile, ProfileScreen)
        assert profile.friendship_status is FriendshipStatus.PENDING_APPROVAL
        assert surface.messages[-1] == "Showing Bob's profile."
        assert complete.count == 1

        asyncio.run(session.submit("back"))
        assert isinstance(session.current, FriendsScreen)
        assert len(session.stack) == 1

    def test_view_without_content(self, session: Session, scroll_states) -> None:
        asyncio.run(session.start())
        asyncio.run(session.submit("messages"))
        assert isinstance(session.current, ViewScreen)
        assert session.current.name == "conversations"
        asyncio.run(session.submit("down"))
        assert scroll_states == ["down"]

    def test_back_at_root_stays(self, session: Session) -> None:
        asyncio.run(session.start(AppView.FEED))
        session.go_back()
        assert isinstance(session.current, FeedScreen)

    def test_screen_left_before_load_is_skipped(self, session: Session, surface) -> None:
        asyncio.run(session.start())
        session.open_profile("erin")
        session.go_back()
        asyncio.run(session.settle())
        assert surface.messages == ["Here are your friends and requests."]

    def test_on_change_notified(self, store, me, make_pipeline) -> None:
        changes: list[None] = []
        session = Session(store, me, make_pipeline(), on_change=lambda: changes.append(None))
        asyncio.run(session.start(AppView.PROFILE))
        assert isinstance(session.current, ProfileScreen)
        assert session.current.is_own_profile
        assert changes


class TestCreatePipeline:
    def test_uses_config(self) -> None:
        config = VoicebookConfig(corrections={"ally": "Alice"})
        pipeline = create_pipeline(config)
        assert isinstance(pipeline.resolver.client, LitellmNluClient)
        assert pipeline.resolver.client.model == config.nlu.model
        assert pipeline.resolver.timeout == config.nlu.timeout
        assert pipeline.resolver.corrections == {"ally": "Alice"}

    def test_custom_client(self) -> None:
        client = FakeNluClient()
        assert create_pipeline(VoicebookConfig(), client=client).resolver.client is client


class TestCompletionAfterLoad:
    def test_complete_fires_after_pushed_screen_loads(self, store, me, make_pipeline) -> None:
        seen: list[object] = []
        session = Session(store, me, make_pipeline(_REPLIES))
        asyncio.run(session.start())

        def complete() -> None:
            screen = session.current
            assert isinstance(screen, ProfileScreen)
            seen.append(screen.profile_user)

        asyncio.run(session.submit("open bob", complete))
        assert len(seen) == 1
        assert seen[0] is not None
        assert seen[0].name == "Bob"

    def test_cancelled_load_is_retried(self, me, make_pipeline) -> None:
        slow = demo_store(latency=0.2)
        user = slow.get_user(me.id)
        session = Session(slow, user, make_pipeline(_REPLIES))

        async def main() -> ProfileScreen:
            await session.start()
            session.open_profile("bob")
            task = asyncio.create_task(session.settle())
            await asyncio.sleep(0.05)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            profile = session.current
            assert isinstance(profile, ProfileScreen)
            assert profile.profile_user is None
            await session.settle()
            return profile

        profile = asyncio.run(main())
        assert profile.profile_user is not None
        assert profile.friendship_status is FriendshipStatus.PENDING_APPROVAL

    def test_cancelled_submit_still_completes(self, me, make_pipeline, complete) -> None:
        slow = demo_store(latency=0.2)
        session = Session(slow, slow.get_user(me.id), make_pipeline(_REPLIES))

        async def main() -> None:
            await session.start()
            task = asyncio.create_task(session.submit("open bob", complete))
            await asyncio.sleep(0.05)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(main())
        assert complete.count == 1
