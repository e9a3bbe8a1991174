"""Intent resolution: utterance plus on-screen names in, IntentResult out."""

import asyncio
from collections.abc import Mapping
from typing import Any

from voicebook.core.constants import DEFAULT_NLU_TIMEOUT
from voicebook.core.env import LOGGER
from voicebook.core.protocols import NluClient
from voicebook.core.text import apply_corrections, normalize_utterance
from voicebook.core.types import EntityContext, Intent, IntentResult, SlotValue

_VOCABULARY = frozenset(i.value for i in Intent)


def coerce_intent_result(raw: Mapping[str, Any]) -> IntentResult:
    """Turn a raw collaborator reply into an IntentResult.

    Tags outside the vocabulary become the unrecognized sentinel. Slot
    values that are not strings or numbers are dropped.
    """
    intent = raw.get("intent")
    if not isinstance(intent, str) or intent not in _VOCABULARY:
        if intent is not None:
            LOGGER.info("NLU returned unknown intent %r", intent)
        return IntentResult.unrecognized()

    slots: dict[str, SlotValue] = {}
    raw_slots = raw.get("slots") or {}
    if isinstance(raw_slots, Mapping):
        for name, value in raw_slots.items():
            # bool is an int subclass but never a meaningful slot value
            if isinstance(value, (str, int, float)) and not isinstance(value, bool):
                slots[str(name)] = value
    return IntentResult(intent=Intent(intent), slots=slots)


class IntentResolver:
    """Resolves utterances through the NLU collaborator, never raising.

    The collaborator call runs in a worker thread and is bounded by
    *timeout* seconds; expiry, errors and malformed replies all resolve to
    ``IntentResult.unrecognized()``.
    """

    def __init__(
        self,
        client: NluClient,
        timeout: float | None = DEFAULT_NLU_TIMEOUT,
        corrections: dict[str, str] | None = None,
    ) -> None:
        self.client = client
        self.timeout = timeout
        self.corrections = dict(corrections or {})

    async def resolve(self, utterance: str, context: EntityContext) -> IntentResult:
        text = normalize_utterance(utterance)
        if self.corrections:
            text = apply_corrections(text, self.corrections)
        if not text:
            return IntentResult.unrecognized()

        try:
            raw = await asyncio.wait_for(
                asyncio.to_thread(self.client.process_intent, text, context.names()),
                timeout=self.timeout,
            )
        except TimeoutError:
            LOGGER.warning("NLU timed out after %ss for %r", self.timeout, text)
            return IntentResult.unrecognized()
        except Exception as exc:
            LOGGER.warning("NLU call failed for %r: %s", text, exc)
            return IntentResult.unrecognized()

        if not isinstance(raw, Mapping):
            LOGGER.warning("NLU returned %s, expected a mapping", type(raw).__name__)
            return IntentResult.unrecognized()
        result = coerce_intent_result(raw)
        LOGGER.debug("Resolved %r -> %s %s", text, result.intent, dict(result.slots))
        return result
