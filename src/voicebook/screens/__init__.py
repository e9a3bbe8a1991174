"""Command screens: each pairs what it shows with what it can do."""

from voicebook.screens.base import CommandScreen, ViewScreen, navigation_actions
from voicebook.screens.feed import FeedScreen
from voicebook.screens.friends import FriendsScreen, FriendsTab
from voicebook.screens.profile import ProfileScreen

__all__ = [
    "CommandScreen",
    "FeedScreen",
    "FriendsScreen",
    "FriendsTab",
    "ProfileScreen",
    "ViewScreen",
    "navigation_actions",
]
