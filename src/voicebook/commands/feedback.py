"""Short spoken/captioned status messages and the channel that delivers them."""

from typing import Final

from voicebook.core.env import LOGGER
from voicebook.core.protocols import FeedbackSurface

PROMPTS: Final[dict[str, str]] = {
    "friends_loaded": "Here are your friends and requests.",
    "friends_reloading": "Reloading friends list...",
    "friend_request_accepted": "You are now friends with {name}.",
    "friend_request_declined": "Declined the friend request from {name}.",
    "friend_request_sent": "Friend request sent to {name}.",
    "friend_request_privacy_block": (
        "{name} only accepts friend requests from friends of friends."
    ),
    "friend_request_failed": "Failed to send friend request. Please try again later.",
    "friend_removed": "{name} has been removed from your friends.",
    "profile_loaded": "Showing {name}'s profile.",
    "profile_loaded_own": "This is your profile.",
    "reaction_added": "You reacted {emoji} to {name}'s post.",
    "reaction_removed": "Removed your reaction from {name}'s post.",
    "vote_recorded": "Your vote for {option} was recorded.",
    "already_voted": "You have already voted on this poll.",
    "no_poll": "This post has no poll.",
    "no_posts": "There are no posts to show.",
    "post_changed": "Post {index} of {count}, by {name}.",
    "end_of_feed": "You're at the end of the feed.",
    "start_of_feed": "You're at the top of the feed.",
    "friend_request_already_sent": "You already sent {name} a friend request.",
    "profile_not_found": "Profile for {username} not found.",
    "action_failed": "That didn't work. Please try again.",
    "error_generic": "Sorry, something went wrong. Please try again.",
    "not_understood": "Sorry, I didn't understand that command.",
}


def tts_prompt(key: str, **fields: object) -> str:
    """Look up a prompt by key and fill in its fields."""
    template = PROMPTS.get(key)
    if template is None:
        LOGGER.debug("Unknown prompt key %r", key)
        return PROMPTS["error_generic"]
    return template.format(**fields)


class FeedbackChannel:
    """Hands messages to a presentation surface; never raises."""

    def __init__(self, surface: FeedbackSurface | None = None) -> None:
        self._surface = surface
        self.last_message: str | None = None

    def emit(self, message: str | None) -> None:
        if not message:
            return
        self.last_message = message
        if self._surface is None:
            LOGGER.info("%s", message)
            return
        try:
            self._surface(message)
        except Exception:
            LOGGER.exception("Feedback surface failed for %r", message)
