"""Default configuration values for voicebook."""

from typing import Final

# NLU collaborator
DEFAULT_NLU_MODEL: Final = "ollama/llama3.2"
DEFAULT_NLU_TIMEOUT: Final = 10.0
DEFAULT_NLU_MAX_TOKENS: Final = 256
DEFAULT_TARGET_SLOT: Final = "target_name"
DEFAULT_NLU_PROMPT: Final = (
    "You classify voice commands for a social feed app. Reply with a single "
    "JSON object and nothing else, shaped like "
    '{{"intent": "<tag>", "slots": {{"<name>": "<value>"}}}}.\n'
    "Use exactly one of these intent tags: {intents}.\n"
    "If the command names a person or option, put it in the "
    '"target_name" slot, spelled exactly as in this list when it matches: '
    "{candidates}.\n"
    'Reactions go in the "emoji" slot. If nothing fits, use "{unrecognized}".'
)

# Scroll animator
DEFAULT_SCROLL_STEP: Final = 2
DEFAULT_FRAME_INTERVAL: Final = 1 / 60

# Reactions
DEFAULT_REACTION: Final = "\N{THUMBS UP SIGN}"

# Config file
DEFAULT_CONFIG_DIR: Final = "~/.config/voicebook"
DEFAULT_CONFIG_DIR_ENV: Final = "VOICEBOOK_CONFIG_DIR"
DEFAULT_CONFIG_FILE: Final = "config.json"
DEFAULT_PROMPT_FILE: Final = "nlu_prompt.md"
DEFAULT_USER_ID: Final = "u1"
