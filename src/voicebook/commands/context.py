"""Entity context construction for the active screen.

Contexts are rebuilt from current screen state on every command and never
cached: whatever the screen is showing right now is what a command may
refer to.
"""

from collections.abc import Callable, Iterable
from typing import TypeVar

from voicebook.core.types import ContextEntry, EntityContext
from voicebook.models import User

T = TypeVar("T")


def build_context(items: Iterable[T], name_of: Callable[[T], str]) -> EntityContext:
    """Build an ordered context from *items*, skipping blank names."""
    entries = []
    for item in items:
        if item is None:
            continue
        name = name_of(item)
        if name:
            entries.append(ContextEntry(display_name=name, ref=item))
    return EntityContext(tuple(entries))


def user_context(users: Iterable[User]) -> EntityContext:
    return build_context(users, lambda u: u.name)


def visible_requests(requests: Iterable[User], friends: Iterable[User]) -> list[User]:
    """Friend requests minus anyone already confirmed as a friend.

    The store can briefly hold a request from a user who is already in the
    friend list; those rows are never shown and never targetable.
    """
    friend_ids = {f.id for f in friends if f is not None}
    return [r for r in requests if r is not None and r.id and r.id not in friend_ids]
