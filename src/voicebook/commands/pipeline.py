"""Command pipeline: resolve, bind, dispatch, give feedback, complete.

CommandPipeline.run() is the single entry point for one submitted command.
The screen passes in what it currently shows (an EntityContext) and what it
can do (a ScreenTable); nothing is read from shared state.
"""

from collections.abc import Callable

from voicebook.commands.binder import bind
from voicebook.commands.completion import completion_scope
from voicebook.commands.dispatch import ScreenTable, dispatch
from voicebook.commands.feedback import FeedbackChannel, tts_prompt
from voicebook.commands.resolver import IntentResolver
from voicebook.core.constants import DEFAULT_TARGET_SLOT
from voicebook.core.env import LOGGER
from voicebook.core.types import ActionResult, EntityContext


class CommandPipeline:
    """Runs one command at a time from utterance to completion signal."""

    def __init__(
        self,
        resolver: IntentResolver,
        feedback: FeedbackChannel,
        target_slot: str = DEFAULT_TARGET_SLOT,
    ) -> None:
        self.resolver = resolver
        self.feedback = feedback
        self.target_slot = target_slot

    async def run(
        self,
        utterance: str,
        context: EntityContext,
        table: ScreenTable,
        complete: Callable[[], None],
    ) -> ActionResult:
        """Process *utterance* against the screen's context and table.

        *complete* fires exactly once on every path, including exceptions
        and cancellation. Errors never propagate to the caller; they end in
        a generic feedback message instead.
        """
        with completion_scope(complete):
            try:
                intent_result = await self.resolver.resolve(utterance, context)
                bound = bind(intent_result.slots.get(self.target_slot), context)
                result = await dispatch(intent_result, bound, table)
                if not isinstance(result, ActionResult):
                    raise TypeError(f"handler returned {type(result).__name__}, not ActionResult")
                LOGGER.info(
                    "%s: %r -> %s%s",
                    table.name,
                    utterance,
                    result.status,
                    f" ({result.reason})" if result.reason else "",
                )
            except Exception:
                LOGGER.exception("Error processing command %r on %s", utterance, table.name)
                result = ActionResult.failed("internal_error", tts_prompt("error_generic"))

            self.feedback.emit(result.message)
            return result
