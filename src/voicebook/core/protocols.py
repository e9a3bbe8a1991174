"""Structural type protocols for the collaborators the pipeline talks to."""

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol

from voicebook.core.types import MutationResult


class NluClient(Protocol):
    """Structural type for the external intent-classification service."""

    def process_intent(
        self, text: str, candidate_names: Sequence[str]
    ) -> Mapping[str, Any]: ...


class FeedbackSurface(Protocol):
    """Caption or text-to-speech sink for status messages."""

    def __call__(self, message: str) -> None: ...


class FriendService(Protocol):
    """Friend-graph mutations and queries against the document store."""

    async def accept_friend_request(
        self, user_id: str, requester_id: str
    ) -> MutationResult: ...

    async def decline_friend_request(
        self, user_id: str, requester_id: str
    ) -> MutationResult: ...

    async def add_friend(self, user_id: str, target_id: str) -> MutationResult: ...

    async def unfriend_user(self, user_id: str, target_id: str) -> MutationResult: ...

    async def get_recommended_friends(self, user_id: str) -> list[Any]: ...

    async def get_friend_requests(self, user_id: str) -> list[Any]: ...

    async def get_friends(self, user_id: str) -> list[Any]: ...

    async def get_user_by_username(self, username: str) -> Any | None: ...

    async def check_friendship_status(self, user_id: str, other_id: str) -> str: ...


class PostService(Protocol):
    """Feed reads, post reactions and poll votes."""

    async def get_feed(self, user_id: str) -> list[Any]: ...

    async def react_to_post(
        self, post_id: str, user_id: str, emoji: str
    ) -> MutationResult: ...

    async def vote_on_poll(
        self, post_id: str, user_id: str, option_index: int
    ) -> MutationResult: ...


class Navigator(Protocol):
    """Global navigation owned by the host application."""

    def navigate(self, view: str) -> None: ...

    def go_back(self) -> None: ...

    def open_profile(self, username: str) -> None: ...


class ScrollTarget(Protocol):
    """Scrollable surface moved by the scroll animator."""

    def scroll_by(self, delta: float) -> None: ...


class FrameScheduler(Protocol):
    """requestAnimationFrame-style frame scheduling."""

    def request(self, callback: Callable[[], None]) -> Any: ...

    def cancel(self, handle: Any) -> None: ...
