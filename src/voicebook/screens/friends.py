"""Friends screen: incoming requests, suggestions and the friend list.

Commands can only name people on the active tab. Requests are pushed in
by the host's real-time subscription; suggestions are fetched here.
"""

from collections.abc import Callable, Iterable
from enum import StrEnum

from voicebook.commands.context import user_context, visible_requests
from voicebook.commands.dispatch import Action
from voicebook.commands.feedback import tts_prompt
from voicebook.commands.optimistic import OptimisticMutation
from voicebook.core.env import LOGGER
from voicebook.core.protocols import FriendService, Navigator
from voicebook.core.types import ActionResult, EntityContext, Intent, ScrollState
from voicebook.models import FriendshipStatus, User
from voicebook.screens.base import CommandScreen, Slots, navigation_actions


class FriendsTab(StrEnum):
    REQUESTS = "requests"
    SUGGESTIONS = "suggestions"
    ALL_FRIENDS = "all_friends"


def _contains(users: Iterable[User], user: User) -> bool:
    return any(u.id == user.id for u in users)


class FriendsScreen(CommandScreen):
    """Friend management by voice or by tap."""

    name = "friends"

    def __init__(
        self,
        current_user: User,
        service: FriendService,
        navigator: Navigator,
        requests: Iterable[User] = (),
        friends: Iterable[User] = (),
        initial_tab: FriendsTab | None = None,
        set_scroll: Callable[[ScrollState], None] | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(navigator, set_scroll=set_scroll, on_change=on_change)
        self.current_user = current_user
        self.service = service
        self.requests: list[User] = list(requests)
        self.friends: list[User] = list(friends)
        self.suggestions: list[User] = []
        self.initial_tab = initial_tab
        self.active_tab = initial_tab or FriendsTab.REQUESTS
        self.loading = True

    # -- state -------------------------------------------------------------

    async def load(self) -> str:
        """Fetch suggestions and pick the opening tab. Returns the greeting."""
        self.loading = True
        self._changed()
        self.suggestions = await self.service.get_recommended_friends(self.current_user.id)
        self.loading = False
        if self.initial_tab is None:
            if self.visible_requests():
                self.active_tab = FriendsTab.REQUESTS
            elif self.suggestions:
                self.active_tab = FriendsTab.SUGGESTIONS
            else:
                self.active_tab = FriendsTab.ALL_FRIENDS
        self._changed()
        return tts_prompt("friends_loaded")

    def set_requests(self, requests: Iterable[User]) -> None:
        self.requests = list(requests)
        self._changed()

    def set_friends(self, friends: Iterable[User]) -> None:
        self.friends = list(friends)
        self._changed()

    def select_tab(self, tab: FriendsTab | str) -> None:
        self.active_tab = FriendsTab(tab)
        self._changed()

    def visible_requests(self) -> list[User]:
        return visible_requests(self.requests, self.friends)

    def visible_users(self) -> list[User]:
        if self.active_tab is FriendsTab.REQUESTS:
            return self.visible_requests()
        if self.active_tab is FriendsTab.SUGGESTIONS:
            return [u for u in self.suggestions if u is not None]
        return [u for u in self.friends if u is not None]

    def entity_context(self) -> EntityContext:
        return user_context(self.visible_users())

    # -- handlers ----------------------------------------------------------

    def _snapshot_lists(self) -> tuple[list[User], list[User]]:
        return list(self.requests), list(self.friends)

    def _restore_lists(self, snapshot: tuple[list[User], list[User]]) -> None:
        self.requests, self.friends = snapshot

    async def accept(self, user: User, _slots: Slots | None = None) -> ActionResult:
        if not _contains(self.visible_requests(), user):
            return ActionResult.not_applicable("no_request", tts_prompt("action_failed"))

        def apply() -> tuple[list[User], list[User]]:
            snapshot = self._snapshot_lists()
            self.requests = [r for r in self.requests if r.id != user.id]
            if not _contains(self.friends, user):
                self.friends = [*self.friends, user]
            return snapshot

        return await self.executor.execute(
            OptimisticMutation(
                name=f"accept {user.id}",
                commit=lambda: self.service.accept_friend_request(self.current_user.id, user.id),
                apply=apply,
                revert=self._restore_lists,
                success_message=tts_prompt("friend_request_accepted", name=user.name),
                failure_message=tts_prompt("action_failed"),
            )
        )

    async def decline(self, user: User, _slots: Slots | None = None) -> ActionResult:
        if not _contains(self.visible_requests(), user):
            return ActionResult.not_applicable("no_request", tts_prompt("action_failed"))

        def apply() -> tuple[list[User], list[User]]:
            snapshot = self._snapshot_lists()
            self.requests = [r for r in self.requests if r.id != user.id]
            return snapshot

        return await self.executor.execute(
            OptimisticMutation(
                name=f"decline {user.id}",
                commit=lambda: self.service.decline_friend_request(self.current_user.id, user.id),
                apply=apply,
                revert=self._restore_lists,
                success_message=tts_prompt("friend_request_declined", name=user.name),
                failure_message=tts_prompt("action_failed"),
            )
        )

    async def add_friend(self, user: User, _slots: Slots | None = None) -> ActionResult:
        if not _contains(self.suggestions, user):
            return ActionResult.not_applicable("not_suggested", tts_prompt("action_failed"))
        if user.friendship_status is FriendshipStatus.REQUEST_SENT:
            return ActionResult.not_applicable(
                "already_requested",
                tts_prompt("friend_request_already_sent", name=user.name),
            )

        def apply() -> FriendshipStatus:
            previous = user.friendship_status
            user.friendship_status = FriendshipStatus.REQUEST_SENT
            return previous

        def revert(previous: FriendshipStatus) -> None:
            user.friendship_status = previous

        return await self.executor.execute(
            OptimisticMutation(
                name=f"add friend {user.id}",
                commit=lambda: self.service.add_friend(self.current_user.id, user.id),
                apply=apply,
                revert=revert,
                success_message=tts_prompt("friend_request_sent", name=user.name),
                failure_messages={
                    "friends_of_friends": tts_prompt(
                        "friend_request_privacy_block", name=user.name
                    ),
                },
                failure_message=tts_prompt("friend_request_failed"),
            )
        )

    async def unfriend(self, user: User, _slots: Slots | None = None) -> ActionResult:
        if not _contains(self.friends, user):
            return ActionResult.not_applicable("not_friends", tts_prompt("action_failed"))

        def apply() -> tuple[list[User], list[User]]:
            snapshot = self._snapshot_lists()
            self.friends = [f for f in self.friends if f.id != user.id]
            return snapshot

        return await self.executor.execute(
            OptimisticMutation(
                name=f"unfriend {user.id}",
                commit=lambda: self.service.unfriend_user(self.current_user.id, user.id),
                apply=apply,
                revert=self._restore_lists,
                success_message=tts_prompt("friend_removed", name=user.name),
                failure_message=tts_prompt("action_failed"),
            )
        )

    async def open_profile(self, user: User, _slots: Slots | None = None) -> ActionResult:
        self.navigator.open_profile(user.username)
        return ActionResult.succeeded()

    async def reload(self, _entity: None = None, _slots: Slots | None = None) -> ActionResult:
        LOGGER.info("Reloading friends for %s", self.current_user.id)
        await self.load()
        return ActionResult.succeeded(tts_prompt("friends_reloading"))

    def actions(self) -> list[Action]:
        return [
            Action(Intent.ACCEPT_REQUEST, self.accept, requires_entity=True),
            Action(Intent.DECLINE_REQUEST, self.decline, requires_entity=True),
            Action(Intent.ADD_FRIEND, self.add_friend, requires_entity=True),
            Action(Intent.OPEN_PROFILE, self.open_profile, requires_entity=True),
            Action(Intent.UNFRIEND_USER, self.unfriend, requires_entity=True),
            Action(Intent.RELOAD_PAGE, self.reload),
            *navigation_actions(self.navigator, self.set_scroll),
        ]
