"""Command-driven interaction pipeline.

Re-exports key symbols for convenience.
"""

from voicebook.commands.binder import bind
from voicebook.commands.completion import CompletionSignal, completion_scope
from voicebook.commands.context import build_context, user_context, visible_requests
from voicebook.commands.dispatch import Action, ScreenTable, dispatch
from voicebook.commands.feedback import FeedbackChannel, tts_prompt
from voicebook.commands.optimistic import MutationExecutor, OptimisticMutation
from voicebook.commands.pipeline import CommandPipeline
from voicebook.commands.resolver import IntentResolver

__all__ = [
    "Action",
    "CommandPipeline",
    "CompletionSignal",
    "FeedbackChannel",
    "IntentResolver",
    "MutationExecutor",
    "OptimisticMutation",
    "ScreenTable",
    "bind",
    "build_context",
    "completion_scope",
    "dispatch",
    "tts_prompt",
    "user_context",
    "visible_requests",
]
