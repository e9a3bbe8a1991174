"""Profile screen: one user's page and the friendship controls on it.

The only nameable entity is the profile owner, so friend commands work
with or without the name ("add friend", "add Alice as a friend"). A name
that is not the owner's stops the command instead of acting on the owner.
"""

from collections.abc import Callable
from functools import partial

from voicebook.commands.completion import completion_scope
from voicebook.commands.context import user_context
from voicebook.commands.dispatch import Action
from voicebook.commands.feedback import tts_prompt
from voicebook.commands.optimistic import OptimisticMutation
from voicebook.commands.pipeline import CommandPipeline
from voicebook.core.env import LOGGER
from voicebook.core.protocols import FriendService, Navigator
from voicebook.core.types import ActionResult, EntityContext, Intent, ScrollState
from voicebook.models import FriendshipStatus, User
from voicebook.screens.base import CommandScreen, Slots, navigation_actions


class ProfileScreen(CommandScreen):
    name = "profile"

    def __init__(
        self,
        current_user: User,
        username: str,
        service: FriendService,
        navigator: Navigator,
        set_scroll: Callable[[ScrollState], None] | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(navigator, set_scroll=set_scroll, on_change=on_change)
        self.current_user = current_user
        self.username = username
        self.service = service
        self.profile_user: User | None = None
        self.friendship_status = FriendshipStatus.NOT_FRIENDS

    @property
    def is_own_profile(self) -> bool:
        return self.profile_user is not None and self.profile_user.id == self.current_user.id

    async def load(self) -> str:
        """Fetch the profile owner and our friendship status with them."""
        self.profile_user = await self.service.get_user_by_username(self.username)
        if self.profile_user is None:
            self._changed()
            return tts_prompt("profile_not_found", username=self.username)

        if not self.is_own_profile:
            try:
                self.friendship_status = FriendshipStatus(
                    await self.service.check_friendship_status(
                        self.current_user.id, self.profile_user.id
                    )
                )
            except Exception as exc:
                LOGGER.warning("Failed to check friendship status: %s", exc)
                self.friendship_status = FriendshipStatus.NOT_FRIENDS
        self._changed()
        if self.is_own_profile:
            return tts_prompt("profile_loaded_own")
        return tts_prompt("profile_loaded", name=self.profile_user.name)

    def entity_context(self) -> EntityContext:
        if self.profile_user is None:
            return EntityContext()
        return user_context([self.profile_user])

    async def handle_command(
        self,
        pipeline: CommandPipeline,
        utterance: str,
        complete: Callable[[], None],
    ) -> ActionResult:
        if self.profile_user is None:
            with completion_scope(complete):
                return ActionResult.not_applicable("profile_not_loaded")
        return await super().handle_command(pipeline, utterance, complete)

    # -- handlers ----------------------------------------------------------

    def _set_status(self, status: FriendshipStatus) -> Callable[[], FriendshipStatus]:
        def apply() -> FriendshipStatus:
            previous = self.friendship_status
            self.friendship_status = status
            return previous

        return apply

    def _restore_status(self, previous: FriendshipStatus) -> None:
        self.friendship_status = previous

    async def add_friend(self, _user: User | None = None, _slots: Slots | None = None) -> ActionResult:
        user = self.profile_user
        if user is None or self.is_own_profile:
            return ActionResult.not_applicable("own_profile")
        if self.friendship_status is not FriendshipStatus.NOT_FRIENDS:
            return ActionResult.not_applicable(f"status_{self.friendship_status}")

        return await self.executor.execute(
            OptimisticMutation(
                name=f"add friend {user.id}",
                commit=lambda: self.service.add_friend(self.current_user.id, user.id),
                apply=self._set_status(FriendshipStatus.REQUEST_SENT),
                revert=self._restore_status,
                success_message=tts_prompt("friend_request_sent", name=user.name),
                failure_messages={
                    "friends_of_friends": tts_prompt(
                        "friend_request_privacy_block", name=user.name
                    ),
                },
                failure_message=tts_prompt("friend_request_failed"),
            )
        )

    async def _respond(self, accept: bool) -> ActionResult:
        user = self.profile_user
        if user is None or self.friendship_status is not FriendshipStatus.PENDING_APPROVAL:
            return ActionResult.not_applicable("no_pending_request")

        if accept:
            commit = partial(self.service.accept_friend_request, self.current_user.id, user.id)
            status, key = FriendshipStatus.FRIENDS, "friend_request_accepted"
        else:
            commit = partial(self.service.decline_friend_request, self.current_user.id, user.id)
            status, key = FriendshipStatus.NOT_FRIENDS, "friend_request_declined"

        return await self.executor.execute(
            OptimisticMutation(
                name=f"{'accept' if accept else 'decline'} {user.id}",
                commit=commit,
                apply=self._set_status(status),
                revert=self._restore_status,
                success_message=tts_prompt(key, name=user.name),
                failure_message=tts_prompt("action_failed"),
            )
        )

    async def accept(self, _user: User | None = None, _slots: Slots | None = None) -> ActionResult:
        return await self._respond(accept=True)

    async def decline(self, _user: User | None = None, _slots: Slots | None = None) -> ActionResult:
        return await self._respond(accept=False)

    async def reload(self, _entity: None = None, _slots: Slots | None = None) -> ActionResult:
        return ActionResult.succeeded(await self.load())

    def actions(self) -> list[Action]:
        friendship = [
            (Intent.ADD_FRIEND, self.add_friend),
            (Intent.ACCEPT_REQUEST, self.accept),
            (Intent.DECLINE_REQUEST, self.decline),
        ]
        return [
            *(Action(intent, fn, requires_entity=True) for intent, fn in friendship),
            *(Action(intent, fn) for intent, fn in friendship),
            Action(Intent.RELOAD_PAGE, self.reload),
            *navigation_actions(self.navigator, self.set_scroll),
        ]
