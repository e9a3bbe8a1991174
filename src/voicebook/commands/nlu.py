"""LLM-backed intent classification for typed or transcribed commands.

Uses litellm for provider-agnostic LLM access (Ollama, OpenAI, Claude, etc.).
The model is asked for a single JSON object ``{"intent": ..., "slots": ...}``
and is given the on-screen entity names so it can spell slot values the way
the screen does.
"""

import json
import re
from collections.abc import Sequence
from typing import Any

from voicebook.core.constants import (
    DEFAULT_NLU_MAX_TOKENS,
    DEFAULT_NLU_MODEL,
    DEFAULT_NLU_PROMPT,
)
from voicebook.core.env import LOGGER
from voicebook.core.types import Intent

_THINK_RE = re.compile(r"<think>.*?</think>", re.DOTALL)
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def build_system_prompt(
    candidate_names: Sequence[str],
    template: str | None = None,
) -> str:
    """Fill the classification prompt with the vocabulary and candidates.

    A custom *template* may use the ``{intents}``, ``{candidates}`` and
    ``{unrecognized}`` placeholders.
    """
    intents = ", ".join(i.value for i in Intent if i is not Intent.UNRECOGNIZED)
    candidates = ", ".join(candidate_names) if candidate_names else "(none)"
    return (template or DEFAULT_NLU_PROMPT).format(
        intents=intents,
        candidates=candidates,
        unrecognized=Intent.UNRECOGNIZED.value,
    )


def parse_nlu_reply(content: str) -> dict[str, Any]:
    """Extract the JSON object from a model reply.

    Reasoning blocks and markdown fences some models emit are ignored.
    Raises ``ValueError`` when no JSON object can be recovered.
    """
    content = _THINK_RE.sub("", content).strip()
    match = _OBJECT_RE.search(content)
    if not match:
        raise ValueError(f"no JSON object in NLU reply: {content[:80]!r}")
    data = json.loads(match.group(0))
    if not isinstance(data, dict):
        raise ValueError("NLU reply is not a JSON object")
    return data


class LitellmNluClient:
    """NLU collaborator that classifies utterances through litellm."""

    def __init__(
        self,
        model: str = DEFAULT_NLU_MODEL,
        prompt: str | None = None,
        max_tokens: int = DEFAULT_NLU_MAX_TOKENS,
        flags: dict[str, Any] | None = None,
    ) -> None:
        self.model = model
        self.prompt = prompt
        self.max_tokens = max_tokens
        self.flags = dict(flags or {})

    def process_intent(
        self, text: str, candidate_names: Sequence[str]
    ) -> dict[str, Any]:
        """Classify *text* into ``{"intent": str, "slots": {...}}``.

        This is a blocking call designed to be run via ``asyncio.to_thread``.
        The litellm import is deferred to avoid import-time overhead when
        only the pipeline types are needed.
        """
        from litellm import completion  # deferred import

        system_prompt = build_system_prompt(candidate_names, self.prompt)
        response = completion(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": text},
            ],
            max_tokens=self.max_tokens,
            **self.flags,
        )
        content = response.choices[0].message.content or ""
        LOGGER.debug("NLU reply for %r: %s", text, content)
        return parse_nlu_reply(content)
