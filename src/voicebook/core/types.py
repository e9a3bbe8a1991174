"""Core data types shared across voicebook modules."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Self

SlotValue = str | int | float


class Intent(StrEnum):
    """Fixed intent vocabulary understood by the screens."""

    ACCEPT_REQUEST = "intent_accept_request"
    DECLINE_REQUEST = "intent_decline_request"
    ADD_FRIEND = "intent_add_friend"
    OPEN_PROFILE = "intent_open_profile"
    UNFRIEND_USER = "intent_unfriend_user"
    REACT_TO_POST = "intent_react_to_post"
    VOTE_POLL = "intent_vote_poll"
    NEXT_POST = "intent_next_post"
    PREVIOUS_POST = "intent_previous_post"
    GO_BACK = "intent_go_back"
    RELOAD_PAGE = "intent_reload_page"
    OPEN_ADS_CENTER = "intent_open_ads_center"
    OPEN_MESSAGES = "intent_open_messages"
    OPEN_ROOMS_HUB = "intent_open_rooms_hub"
    OPEN_AUDIO_ROOMS = "intent_open_audio_rooms"
    OPEN_VIDEO_ROOMS = "intent_open_video_rooms"
    SCROLL_UP = "intent_scroll_up"
    SCROLL_DOWN = "intent_scroll_down"
    STOP_SCROLL = "intent_stop_scroll"
    UNRECOGNIZED = "intent_unrecognized"


class ScrollState(StrEnum):
    """Discrete scroll direction driving the animator."""

    IDLE = "none"
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True, slots=True)
class IntentResult:
    """Immutable result of intent resolution."""

    intent: str = Intent.UNRECOGNIZED
    slots: Mapping[str, SlotValue] = field(default_factory=dict)

    @classmethod
    def unrecognized(cls) -> Self:
        return cls(intent=Intent.UNRECOGNIZED)

    @property
    def recognized(self) -> bool:
        return self.intent != Intent.UNRECOGNIZED


@dataclass(frozen=True, slots=True)
class ContextEntry:
    """One nameable on-screen entity a command may refer to."""

    display_name: str
    ref: Any = None


@dataclass(frozen=True, slots=True)
class EntityContext:
    """Ordered set of entities currently visible on the active screen."""

    entries: tuple[ContextEntry, ...] = ()

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def names(self) -> list[str]:
        """Display names in context order, used as NLU disambiguation hints."""
        return [entry.display_name for entry in self.entries]


class BindStatus(StrEnum):
    ABSENT = "absent"
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"


@dataclass(frozen=True, slots=True)
class BoundSlot:
    """Outcome of matching a slot value against an entity context."""

    status: BindStatus = BindStatus.ABSENT
    value: SlotValue | None = None
    entity: Any = None

    @classmethod
    def absent(cls) -> Self:
        return cls()

    @classmethod
    def unresolved(cls, value: SlotValue) -> Self:
        return cls(status=BindStatus.UNRESOLVED, value=value)

    @classmethod
    def resolved(cls, value: SlotValue, entity: Any) -> Self:
        return cls(status=BindStatus.RESOLVED, value=value, entity=entity)

    @property
    def is_resolved(self) -> bool:
        return self.status is BindStatus.RESOLVED


class ActionStatus(StrEnum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Tri-state outcome of a dispatched action.

    *message* is the feedback text for this branch; ``None`` means the
    branch is silent.
    """

    status: ActionStatus
    reason: str | None = None
    message: str | None = None

    @classmethod
    def succeeded(cls, message: str | None = None) -> Self:
        return cls(ActionStatus.SUCCEEDED, message=message)

    @classmethod
    def failed(cls, reason: str | None, message: str | None = None) -> Self:
        return cls(ActionStatus.FAILED, reason=reason, message=message)

    @classmethod
    def not_applicable(cls, reason: str, message: str | None = None) -> Self:
        return cls(ActionStatus.NOT_APPLICABLE, reason=reason, message=message)


@dataclass(frozen=True, slots=True)
class MutationResult:
    """What a backend mutation collaborator reports back."""

    success: bool
    reason: str | None = None

    @classmethod
    def ok(cls) -> Self:
        return cls(success=True)

    @classmethod
    def error(cls, reason: str | None = None) -> Self:
        return cls(success=False, reason=reason)
