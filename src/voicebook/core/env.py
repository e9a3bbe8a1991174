"""Environment setup and logging for voicebook.

setup_environment() must be called before importing litellm so that its
import-time logging and telemetry settings take effect.
"""

import logging
import os
import warnings

LOGGER = logging.getLogger("voicebook")


def setup_environment() -> None:
    """Configure warning filters and env vars before library imports."""
    warnings.filterwarnings("ignore", category=DeprecationWarning)
    warnings.filterwarnings("ignore", category=FutureWarning)

    os.environ.setdefault("LITELLM_LOG", "ERROR")
    os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")
