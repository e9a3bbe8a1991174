"""Domain records read and written by the command screens.

Only the fields the controller touches are modelled; everything else the
document store holds is out of reach here.
"""

from dataclasses import dataclass, field
from enum import StrEnum


class FriendshipStatus(StrEnum):
    NOT_FRIENDS = "not_friends"
    REQUEST_SENT = "request_sent"
    PENDING_APPROVAL = "pending_approval"
    FRIENDS = "friends"


class AppView(StrEnum):
    FEED = "feed"
    PROFILE = "profile"
    FRIENDS = "friends"
    CONVERSATIONS = "conversations"
    ADS_CENTER = "ads_center"
    ROOMS_HUB = "rooms_hub"
    ROOMS_LIST = "rooms_list"
    VIDEO_ROOMS_LIST = "video_rooms_list"


@dataclass(slots=True)
class User:
    id: str
    name: str
    username: str
    friend_ids: list[str] = field(default_factory=list)
    # "everyone" or "friends_of_friends"
    friend_request_privacy: str = "everyone"
    # Only populated for friend suggestions.
    friendship_status: FriendshipStatus = FriendshipStatus.NOT_FRIENDS


@dataclass(slots=True)
class PollOption:
    text: str
    votes: int = 0
    voted_by: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Poll:
    question: str
    options: list[PollOption] = field(default_factory=list)

    def voted_index(self, user_id: str) -> int:
        """Index of the option *user_id* voted for, or -1."""
        for i, option in enumerate(self.options):
            if user_id in option.voted_by:
                return i
        return -1

    @property
    def total_votes(self) -> int:
        return sum(option.votes for option in self.options)


@dataclass(slots=True)
class Post:
    id: str
    author: User
    caption: str = ""
    # user id -> emoji
    reactions: dict[str, str] = field(default_factory=dict)
    poll: Poll | None = None
