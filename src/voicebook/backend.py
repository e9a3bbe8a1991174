"""In-memory stand-in for the remote document store.

Implements the FriendService and PostService protocols with the same
observable rules the hosted backend enforces (privacy-gated friend
requests, toggle reactions, one vote per poll). Reads hand out copies so
that optimistic edits on a screen never leak into the store.
"""

import asyncio
import copy
from dataclasses import replace

from voicebook.core.env import LOGGER
from voicebook.core.types import MutationResult
from voicebook.models import FriendshipStatus, Poll, PollOption, Post, User


class InMemorySocialStore:
    """Users, friend requests and posts held in process memory."""

    def __init__(self, latency: float = 0.0) -> None:
        self.latency = latency
        self._users: dict[str, User] = {}
        # recipient id -> requester ids, oldest first
        self._incoming: dict[str, list[str]] = {}
        self._posts: dict[str, Post] = {}

    async def _delay(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)

    # -- seeding -----------------------------------------------------------

    def add_user(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def add_post(self, post: Post) -> Post:
        self._posts[post.id] = post
        return post

    def add_request(self, requester_id: str, recipient_id: str) -> None:
        pending = self._incoming.setdefault(recipient_id, [])
        if requester_id not in pending:
            pending.append(requester_id)

    def make_friends(self, a: str, b: str) -> None:
        ua, ub = self._users[a], self._users[b]
        if b not in ua.friend_ids:
            ua.friend_ids.append(b)
        if a not in ub.friend_ids:
            ub.friend_ids.append(a)

    # -- reads -------------------------------------------------------------

    def get_user(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return replace(user, friend_ids=list(user.friend_ids)) if user else None

    async def get_user_by_username(self, username: str) -> User | None:
        await self._delay()
        for user in self._users.values():
            if user.username == username:
                return self.get_user(user.id)
        return None

    async def get_friend_requests(self, user_id: str) -> list[User]:
        await self._delay()
        return [
            self.get_user(uid)
            for uid in self._incoming.get(user_id, [])
            if uid in self._users
        ]

    async def get_friends(self, user_id: str) -> list[User]:
        await self._delay()
        user = self._users.get(user_id)
        if user is None:
            return []
        return [self.get_user(uid) for uid in user.friend_ids if uid in self._users]

    async def get_recommended_friends(self, user_id: str) -> list[User]:
        await self._delay()
        me = self._users.get(user_id)
        if me is None:
            return []
        incoming = set(self._incoming.get(user_id, []))
        suggestions = []
        for user in self._users.values():
            if user.id == user_id or user.id in me.friend_ids or user.id in incoming:
                continue
            suggestion = self.get_user(user.id)
            if user_id in self._incoming.get(user.id, []):
                suggestion.friendship_status = FriendshipStatus.REQUEST_SENT
            else:
                suggestion.friendship_status = FriendshipStatus.NOT_FRIENDS
            suggestions.append(suggestion)
        return suggestions

    async def check_friendship_status(self, user_id: str, other_id: str) -> FriendshipStatus:
        await self._delay()
        me = self._users.get(user_id)
        if me is not None and other_id in me.friend_ids:
            return FriendshipStatus.FRIENDS
        if user_id in self._incoming.get(other_id, []):
            return FriendshipStatus.REQUEST_SENT
        if other_id in self._incoming.get(user_id, []):
            return FriendshipStatus.PENDING_APPROVAL
        return FriendshipStatus.NOT_FRIENDS

    async def get_feed(self, user_id: str) -> list[Post]:
        await self._delay()
        me = self._users.get(user_id)
        visible = set(me.friend_ids) | {user_id} if me else {user_id}
        return [
            copy.deepcopy(post)
            for post in self._posts.values()
            if post.author.id in visible
        ]

    # -- friend mutations --------------------------------------------------

    async def accept_friend_request(self, user_id: str, requester_id: str) -> MutationResult:
        await self._delay()
        pending = self._incoming.get(user_id, [])
        if requester_id not in pending:
            return MutationResult.error("no_request")
        pending.remove(requester_id)
        self.make_friends(user_id, requester_id)
        LOGGER.debug("store: %s accepted %s", user_id, requester_id)
        return MutationResult.ok()

    async def decline_friend_request(self, user_id: str, requester_id: str) -> MutationResult:
        await self._delay()
        pending = self._incoming.get(user_id, [])
        if requester_id not in pending:
            return MutationResult.error("no_request")
        pending.remove(requester_id)
        return MutationResult.ok()

    async def add_friend(self, user_id: str, target_id: str) -> MutationResult:
        await self._delay()
        me, target = self._users.get(user_id), self._users.get(target_id)
        if me is None or target is None:
            return MutationResult.error("not_found")
        if target_id in me.friend_ids:
            return MutationResult.error("already_friends")
        if target.friend_request_privacy == "friends_of_friends":
            if not set(me.friend_ids) & set(target.friend_ids):
                return MutationResult.error("friends_of_friends")
        self.add_request(user_id, target_id)
        return MutationResult.ok()

    async def unfriend_user(self, user_id: str, target_id: str) -> MutationResult:
        await self._delay()
        me, target = self._users.get(user_id), self._users.get(target_id)
        if me is None or target is None or target_id not in me.friend_ids:
            return MutationResult.error("not_friends")
        me.friend_ids.remove(target_id)
        if user_id in target.friend_ids:
            target.friend_ids.remove(user_id)
        return MutationResult.ok()

    # -- post mutations ----------------------------------------------------

    async def react_to_post(self, post_id: str, user_id: str, emoji: str) -> MutationResult:
        await self._delay()
        post = self._posts.get(post_id)
        if post is None:
            return MutationResult.error("not_found")
        if post.reactions.get(user_id) == emoji:
            del post.reactions[user_id]
        else:
            post.reactions[user_id] = emoji
        return MutationResult.ok()

    async def vote_on_poll(self, post_id: str, user_id: str, option_index: int) -> MutationResult:
        await self._delay()
        post = self._posts.get(post_id)
        if post is None or post.poll is None:
            return MutationResult.error("no_poll")
        if post.poll.voted_index(user_id) != -1:
            return MutationResult.error("already_voted")
        if not 0 <= option_index < len(post.poll.options):
            return MutationResult.error("invalid_option")
        option = post.poll.options[option_index]
        option.votes += 1
        option.voted_by.append(user_id)
        return MutationResult.ok()


def demo_store(latency: float = 0.4) -> InMemorySocialStore:
    """A small seeded network used by the CLI."""
    store = InMemorySocialStore(latency=latency)
    me = store.add_user(User(id="u1", name="Sam Rivera", username="sam"))
    alice = store.add_user(User(id="u2", name="Alice", username="alice"))
    bob = store.add_user(User(id="u3", name="Bob", username="bob"))
    carol = store.add_user(
        User(id="u4", name="Carol", username="carol", friend_request_privacy="friends_of_friends")
    )
    dave = store.add_user(User(id="u5", name="Dave", username="dave"))
    store.add_user(User(id="u6", name="Erin", username="erin"))

    store.make_friends(me.id, dave.id)
    store.add_request(alice.id, me.id)
    store.add_request(bob.id, me.id)

    store.add_post(Post(id="p1", author=dave, caption="Morning run done!"))
    store.add_post(
        Post(
            id="p2",
            author=me,
            caption="Where should we eat tonight?",
            poll=Poll(
                question="Dinner?",
                options=[PollOption("Pizza"), PollOption("Sushi"), PollOption("Tacos")],
            ),
        )
    )
    store.add_post(Post(id="p3", author=dave, caption="New song out", reactions={carol.id: "❤️"}))
    return store
