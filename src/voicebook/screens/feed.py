"""Feed screen: one active post at a time, with reactions and polls.

The nameable entities are the active post's author and its poll options.
"""

from collections.abc import Callable, Iterable

from voicebook.commands.context import build_context
from voicebook.commands.dispatch import Action
from voicebook.commands.feedback import tts_prompt
from voicebook.commands.optimistic import OptimisticMutation
from voicebook.core.constants import DEFAULT_REACTION
from voicebook.core.protocols import Navigator, PostService
from voicebook.core.types import ActionResult, EntityContext, Intent, ScrollState
from voicebook.models import PollOption, Post, User
from voicebook.screens.base import CommandScreen, Slots, navigation_actions


def _entity_name(item: User | PollOption) -> str:
    return item.name if isinstance(item, User) else item.text


class FeedScreen(CommandScreen):
    name = "feed"

    def __init__(
        self,
        current_user: User,
        service: PostService,
        navigator: Navigator,
        posts: Iterable[Post] = (),
        set_scroll: Callable[[ScrollState], None] | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(navigator, set_scroll=set_scroll, on_change=on_change)
        self.current_user = current_user
        self.service = service
        self.posts: list[Post] = list(posts)
        self.active_index = 0

    @property
    def active_post(self) -> Post | None:
        if 0 <= self.active_index < len(self.posts):
            return self.posts[self.active_index]
        return None

    async def load(self) -> str | None:
        self.posts = await self.service.get_feed(self.current_user.id)
        self.active_index = min(self.active_index, max(len(self.posts) - 1, 0))
        self._changed()
        if not self.posts:
            return tts_prompt("no_posts")
        return None

    def entity_context(self) -> EntityContext:
        post = self.active_post
        if post is None:
            return EntityContext()
        items: list[User | PollOption] = [post.author]
        if post.poll is not None:
            items.extend(post.poll.options)
        return build_context(items, _entity_name)

    # -- handlers ----------------------------------------------------------

    async def react(self, _entity: None = None, slots: Slots | None = None) -> ActionResult:
        post = self.active_post
        if post is None:
            return ActionResult.not_applicable("no_post", tts_prompt("no_posts"))
        emoji = str((slots or {}).get("emoji") or DEFAULT_REACTION)
        user_id = self.current_user.id
        removing = post.reactions.get(user_id) == emoji

        def apply() -> dict[str, str]:
            previous = dict(post.reactions)
            if removing:
                del post.reactions[user_id]
            else:
                post.reactions[user_id] = emoji
            return previous

        def revert(previous: dict[str, str]) -> None:
            post.reactions.clear()
            post.reactions.update(previous)

        if removing:
            message = tts_prompt("reaction_removed", name=post.author.name)
        else:
            message = tts_prompt("reaction_added", emoji=emoji, name=post.author.name)
        return await self.executor.execute(
            OptimisticMutation(
                name=f"react {post.id}",
                commit=lambda: self.service.react_to_post(post.id, user_id, emoji),
                apply=apply,
                revert=revert,
                success_message=message,
                failure_message=tts_prompt("action_failed"),
            )
        )

    async def vote(self, option: User | PollOption, _slots: Slots | None = None) -> ActionResult:
        post = self.active_post
        poll = post.poll if post is not None else None
        if poll is None or not isinstance(option, PollOption):
            return ActionResult.not_applicable("no_poll", tts_prompt("no_poll"))
        index = next((i for i, o in enumerate(poll.options) if o is option), -1)
        if index == -1:
            return ActionResult.not_applicable("stale_option", tts_prompt("action_failed"))
        user_id = self.current_user.id
        if poll.voted_index(user_id) != -1:
            return ActionResult.not_applicable("already_voted", tts_prompt("already_voted"))

        def apply() -> tuple[int, list[str]]:
            previous = (option.votes, list(option.voted_by))
            option.votes += 1
            option.voted_by.append(user_id)
            return previous

        def revert(previous: tuple[int, list[str]]) -> None:
            option.votes = previous[0]
            option.voted_by[:] = previous[1]

        return await self.executor.execute(
            OptimisticMutation(
                name=f"vote {post.id}#{index}",
                commit=lambda: self.service.vote_on_poll(post.id, user_id, index),
                apply=apply,
                revert=revert,
                success_message=tts_prompt("vote_recorded", option=option.text),
                failure_messages={"already_voted": tts_prompt("already_voted")},
                failure_message=tts_prompt("action_failed"),
            )
        )

    async def open_author(self, entity: User | PollOption | None = None, _slots: Slots | None = None) -> ActionResult:
        if entity is None:
            post = self.active_post
            if post is None:
                return ActionResult.not_applicable("no_post", tts_prompt("no_posts"))
            entity = post.author
        if not isinstance(entity, User):
            return ActionResult.not_applicable("not_a_person", tts_prompt("action_failed"))
        self.navigator.open_profile(entity.username)
        return ActionResult.succeeded()

    def _move(self, step: int) -> ActionResult:
        if not self.posts:
            return ActionResult.not_applicable("no_post", tts_prompt("no_posts"))
        target = self.active_index + step
        if target >= len(self.posts):
            return ActionResult.not_applicable("end_of_feed", tts_prompt("end_of_feed"))
        if target < 0:
            return ActionResult.not_applicable("start_of_feed", tts_prompt("start_of_feed"))
        self.active_index = target
        self._changed()
        post = self.posts[target]
        return ActionResult.succeeded(
            tts_prompt("post_changed", index=target + 1, count=len(self.posts), name=post.author.name)
        )

    async def next_post(self, _entity: None = None, _slots: Slots | None = None) -> ActionResult:
        return self._move(1)

    async def previous_post(self, _entity: None = None, _slots: Slots | None = None) -> ActionResult:
        return self._move(-1)

    async def reload(self, _entity: None = None, _slots: Slots | None = None) -> ActionResult:
        return ActionResult.succeeded(await self.load())

    def actions(self) -> list[Action]:
        return [
            Action(Intent.VOTE_POLL, self.vote, requires_entity=True),
            Action(Intent.OPEN_PROFILE, self.open_author, requires_entity=True),
            Action(Intent.OPEN_PROFILE, self.open_author),
            Action(Intent.REACT_TO_POST, self.react),
            Action(Intent.NEXT_POST, self.next_post),
            Action(Intent.PREVIOUS_POST, self.previous_post),
            Action(Intent.RELOAD_PAGE, self.reload),
            *navigation_actions(self.navigator, self.set_scroll),
        ]
