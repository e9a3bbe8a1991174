"""Application-level configuration loaded from JSON."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from voicebook.core.constants import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_CONFIG_DIR_ENV,
    DEFAULT_CONFIG_FILE,
    DEFAULT_FRAME_INTERVAL,
    DEFAULT_NLU_MAX_TOKENS,
    DEFAULT_NLU_MODEL,
    DEFAULT_NLU_TIMEOUT,
    DEFAULT_PROMPT_FILE,
    DEFAULT_SCROLL_STEP,
    DEFAULT_USER_ID,
)

_log = logging.getLogger("voicebook")


# ---------------------------------------------------------------------------
# Nested config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NluConfig:
    """Intent-classification LLM settings."""

    model: str = DEFAULT_NLU_MODEL
    # None disables the bound entirely.
    timeout: float | None = DEFAULT_NLU_TIMEOUT
    prompt: str | None = None
    max_tokens: int = DEFAULT_NLU_MAX_TOKENS
    flags: dict[str, Any] = field(default_factory=lambda: {"temperature": 0})


@dataclass(frozen=True, slots=True)
class ScrollConfig:
    """Scroll animator step and frame rate."""

    step: float = DEFAULT_SCROLL_STEP
    frame_interval: float = DEFAULT_FRAME_INTERVAL


@dataclass(frozen=True, slots=True)
class VoicebookConfig:
    """Top-level configuration loaded from ~/.config/voicebook/config.json."""

    user_id: str = DEFAULT_USER_ID
    nlu: NluConfig = field(default_factory=NluConfig)
    scroll: ScrollConfig = field(default_factory=ScrollConfig)
    corrections: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Config loading helpers
# ---------------------------------------------------------------------------


def config_dir() -> Path:
    return Path(
        os.environ.get(DEFAULT_CONFIG_DIR_ENV, "") or DEFAULT_CONFIG_DIR,
    ).expanduser()


def _resolve_config_path(base: Path, path_str: str) -> Path:
    """Resolve a path relative to *base*. Absolute paths used as-is."""
    p = Path(path_str).expanduser()
    if p.is_absolute():
        return p
    return base / p


def _resolve_prompt(base: Path, section: dict[str, Any]) -> str | None:
    """Resolve ``prompt`` / ``prompt_file`` from the nlu section."""
    prompt = section.get("prompt")
    prompt_file = section.get("prompt_file")
    if prompt and prompt_file:
        _log.debug("Both 'prompt' and 'prompt_file' in nlu; using 'prompt_file'")
    if prompt_file:
        path = _resolve_config_path(base, str(prompt_file))
        return path.read_text().strip()
    if prompt:
        return str(prompt)
    default = base / DEFAULT_PROMPT_FILE
    if default.exists():
        return default.read_text().strip() or None
    return None


def _optional_timeout(raw: Any) -> float | None:
    if raw is None:
        return None
    return float(raw)


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_config(path: str | None = None) -> VoicebookConfig:
    """Load voicebook configuration from a JSON file.

    Reads ``~/.config/voicebook/config.json`` (or *path*). Supports the
    ``VOICEBOOK_CONFIG_DIR`` environment variable to override the config
    directory. Relative ``prompt_file`` paths are resolved against the
    config directory.

    Returns a default config if the file does not exist.
    """
    base = config_dir()
    config_path = Path(path).expanduser() if path else base / DEFAULT_CONFIG_FILE

    if not config_path.exists():
        return VoicebookConfig(nlu=NluConfig(prompt=_resolve_prompt(base, {})))

    with open(config_path) as f:
        data = json.load(f)

    if not isinstance(data, dict):
        _log.warning("Ignoring %s: top level is not an object", config_path)
        return VoicebookConfig()

    # -- user --------------------------------------------------------------
    user_raw = data.get("user", {})
    user_id = str(user_raw.get("id", DEFAULT_USER_ID))

    # -- nlu ---------------------------------------------------------------
    nlu_raw = data.get("nlu", {})
    nlu = NluConfig(
        model=nlu_raw.get("model", DEFAULT_NLU_MODEL),
        timeout=_optional_timeout(nlu_raw.get("timeout", DEFAULT_NLU_TIMEOUT)),
        prompt=_resolve_prompt(base, nlu_raw),
        max_tokens=int(nlu_raw.get("max_tokens", DEFAULT_NLU_MAX_TOKENS)),
        flags=dict(nlu_raw.get("flags", {"temperature": 0})),
    )

    # -- scroll ------------------------------------------------------------
    scroll_raw = data.get("scroll", {})
    scroll = ScrollConfig(
        step=float(scroll_raw.get("step", DEFAULT_SCROLL_STEP)),
        frame_interval=float(scroll_raw.get("frame_interval", DEFAULT_FRAME_INTERVAL)),
    )

    # -- corrections -------------------------------------------------------
    corrections = {str(k): str(v) for k, v in data.get("corrections", {}).items()}

    return VoicebookConfig(
        user_id=user_id,
        nlu=nlu,
        scroll=scroll,
        corrections=corrections,
    )
