"""CLI entry point for voicebook.

Parses arguments, configures logging, and launches the Textual TUI, the
console REPL (``--no-ui``) or a single command (``--once``).
setup_environment() is called before anything imports litellm.
"""

import argparse
import asyncio
import dataclasses
import logging
import os

from rich.console import Console

from voicebook.apps.config import VoicebookConfig, load_config
from voicebook.apps.session import Session, create_pipeline
from voicebook.apps.ui import render_caption, render_screen
from voicebook.backend import demo_store
from voicebook.core.env import LOGGER
from voicebook.core.types import ActionStatus
from voicebook.models import AppView

_START_VIEWS = (AppView.FRIENDS, AppView.FEED, AppView.PROFILE)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Drive a social feed with natural-language commands"
    )
    parser.add_argument(
        "--nlu-model",
        default=None,
        help="LLM model for intent classification (e.g., ollama/llama3.2, "
        "openai/gpt-4o-mini). Falls back to nlu.model in config.json.",
    )
    parser.add_argument(
        "--nlu-timeout",
        type=float,
        default=None,
        help="Seconds to wait for the NLU model before giving up (default: from config or 10)",
    )
    parser.add_argument(
        "--config-file",
        default=None,
        help="JSON config file (default: ~/.config/voicebook/config.json)",
    )
    parser.add_argument(
        "--user", default=None, help="Id of the signed-in user (default: from config)"
    )
    parser.add_argument(
        "--screen",
        default=AppView.FRIENDS.value,
        choices=[v.value for v in _START_VIEWS],
        help="Screen to open first (default: friends)",
    )
    parser.add_argument(
        "--latency",
        type=float,
        default=0.4,
        help="Simulated backend latency in seconds (default: 0.4)",
    )
    parser.add_argument(
        "--no-ui", action="store_true", help="Use a plain console prompt instead of the TUI"
    )
    parser.add_argument(
        "--once",
        default=None,
        metavar="UTTERANCE",
        help="Run a single command, print the outcome and exit",
    )
    return parser


def _apply_overrides(config: VoicebookConfig, args: argparse.Namespace) -> VoicebookConfig:
    """Layer CLI flags over the loaded config."""
    nlu = config.nlu
    if args.nlu_model:
        nlu = dataclasses.replace(nlu, model=args.nlu_model)
    if args.nlu_timeout is not None:
        nlu = dataclasses.replace(nlu, timeout=args.nlu_timeout)
    config = dataclasses.replace(config, nlu=nlu)
    if args.user:
        config = dataclasses.replace(config, user_id=args.user)
    return config


async def _run_console(
    session: Session, console: Console, once: str | None, start: AppView
) -> int:
    """Console mode: render the screen with rich, read commands from stdin."""
    await session.start(start)
    if once is not None:
        result = await session.submit(once)
        console.print(render_screen(session.current))
        outcome = f"[bold]{result.status}[/bold]"
        if result.reason:
            outcome += f" ({result.reason})"
        console.print(outcome)
        return 1 if result.status is ActionStatus.FAILED else 0

    console.print(render_screen(session.current))
    console.print("[dim]Type a command, or 'quit' to exit.[/dim]")
    while True:
        try:
            text = await asyncio.to_thread(console.input, "[bold green]> [/bold green]")
        except (EOFError, KeyboardInterrupt):
            break
        if text.strip().lower() in {"quit", "exit"}:
            break
        if not text.strip():
            continue
        await session.submit(text)
        console.print(render_screen(session.current))
    return 0


def _run(args: argparse.Namespace) -> int:
    config = _apply_overrides(load_config(args.config_file), args)
    store = demo_store(latency=args.latency)
    current_user = store.get_user(config.user_id)
    if current_user is None:
        build_arg_parser().error(f"unknown user id {config.user_id!r}")
    start = AppView(args.screen)

    if args.no_ui or args.once is not None:
        console = Console()
        pipeline = create_pipeline(
            config, surface=lambda message: console.print(render_caption(message))
        )
        session = Session(
            store,
            current_user,
            pipeline,
            set_scroll=lambda state: LOGGER.info("Scroll: %s", state),
        )
        return asyncio.run(_run_console(session, console, args.once, start))

    from voicebook.apps.app import VoicebookApp

    VoicebookApp(config, store, current_user, start_view=start).run()
    return 0


def main() -> int:
    """CLI entry point. Returns exit code."""
    # Must run before litellm is imported.
    from voicebook.core.env import setup_environment

    setup_environment()

    from rich.logging import RichHandler

    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_time=False,
                show_path=False,
                rich_tracebacks=False,
            )
        ],
    )
    logging.getLogger("LiteLLM").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    parser = build_arg_parser()
    args = parser.parse_args()
    return _run(args)
