# /// script
# requires-python = ">=3.12"
# dependencies = [
#     "voicebook",
# ]
#
# [tool.uv.sources]
# voicebook = { path = "." }
# ///
"""Standalone launcher for the voicebook command client."""

from voicebook.apps.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
