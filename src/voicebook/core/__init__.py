"""Core types and protocols: no UI or LLM dependencies.

Re-exports key symbols for convenience.
"""

from voicebook.core.protocols import (
    FeedbackSurface,
    FrameScheduler,
    FriendService,
    Navigator,
    NluClient,
    PostService,
    ScrollTarget,
)
from voicebook.core.text import apply_corrections, normalize_utterance
from voicebook.core.types import (
    ActionResult,
    ActionStatus,
    BindStatus,
    BoundSlot,
    ContextEntry,
    EntityContext,
    Intent,
    IntentResult,
    MutationResult,
    ScrollState,
)

__all__ = [
    "ActionResult",
    "ActionStatus",
    "BindStatus",
    "BoundSlot",
    "ContextEntry",
    "EntityContext",
    "FeedbackSurface",
    "FrameScheduler",
    "FriendService",
    "Intent",
    "IntentResult",
    "MutationResult",
    "Navigator",
    "NluClient",
    "PostService",
    "ScrollState",
    "ScrollTarget",
    "apply_corrections",
    "normalize_utterance",
]
