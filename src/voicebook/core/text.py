"""Text cleanup applied to utterances before intent resolution."""

import re


def apply_corrections(text: str, corrections: dict[str, str]) -> str:
    """Apply vocabulary corrections to an utterance.

    Each key in *corrections* is matched as a case-insensitive whole word
    (or phrase) and replaced with the corresponding value, so a
    transcription slip like "ally" can be mapped onto a friend's name.
    """
    for wrong, correct in corrections.items():
        if not wrong:
            continue
        pattern = re.compile(rf"\b{re.escape(wrong)}\b", re.IGNORECASE)
        text = pattern.sub(lambda _m, c=correct: c, text)
    return text


def normalize_utterance(text: str) -> str:
    """Collapse runs of whitespace and trim the ends."""
    return " ".join(text.split())
