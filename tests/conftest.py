"""Shared test fixtures. No real LLM or terminal needed."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from typing import Any

import pytest

from voicebook.backend import InMemorySocialStore, demo_store
from voicebook.commands.feedback import FeedbackChannel
from voicebook.commands.pipeline import CommandPipeline
from voicebook.commands.resolver import IntentResolver
from voicebook.models import AppView, User


def reply(intent: str, **slots: Any) -> dict[str, Any]:
    """Build an NLU reply the way the model is asked to format it."""
    return {"intent": intent, "slots": slots}


class FakeNluClient:
    """Returns canned replies keyed by utterance; records every call."""

    def __init__(
        self,
        replies: dict[str, Any] | None = None,
        default: Any = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.replies = replies or {}
        self.default = default if default is not None else {"intent": "intent_unrecognized"}
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, list[str]]] = []

    def process_intent(self, text: str, candidate_names: Sequence[str]) -> Any:
        self.calls.append((text, list(candidate_names)))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.replies.get(text, self.default)


class RecordingSurface:
    """Feedback surface that keeps every message it is handed."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)


class ManualFrameScheduler:
    """Frame scheduler driven by the test instead of a clock."""

    def __init__(self) -> None:
        self._next = 0
        self.pending: dict[int, Callable[[], None]] = {}
        self.requested: list[Callable[[], None]] = []

    def request(self, callback: Callable[[], None]) -> int:
        self._next += 1
        self.pending[self._next] = callback
        self.requested.append(callback)
        return self._next

    def cancel(self, handle: int) -> None:
        self.pending.pop(handle, None)

    def tick(self, frames: int = 1) -> None:
        """Run whatever is pending, *frames* times."""
        for _ in range(frames):
            due = list(self.pending.values())
            self.pending.clear()
            for callback in due:
                callback()


class FakeScrollTarget:
    def __init__(self) -> None:
        self.deltas: list[float] = []

    def scroll_by(self, delta: float) -> None:
        self.deltas.append(delta)


class FakeNavigator:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def navigate(self, view: AppView) -> None:
        self.calls.append(("navigate", view))

    def go_back(self) -> None:
        self.calls.append(("go_back", None))

    def open_profile(self, username: str) -> None:
        self.calls.append(("open_profile", username))


class CompletionCounter:
    """Completion callback that counts how often it fired."""

    def __init__(self) -> None:
        self.count = 0

    def __call__(self) -> None:
        self.count += 1


@pytest.fixture
def store() -> InMemorySocialStore:
    return demo_store(latency=0)


@pytest.fixture
def me(store: InMemorySocialStore) -> User:
    user = store.get_user("u1")
    assert user is not None
    return user


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def navigator() -> FakeNavigator:
    return FakeNavigator()


@pytest.fixture
def complete() -> CompletionCounter:
    return CompletionCounter()


@pytest.fixture
def make_pipeline(surface: RecordingSurface) -> Callable[..., CommandPipeline]:
    """Factory: pipeline over a FakeNluClient with the given replies."""

    def factory(
        replies: dict[str, Any] | None = None,
        client: FakeNluClient | None = None,
        timeout: float | None = 1.0,
    ) -> CommandPipeline:
        nlu = client or FakeNluClient(replies)
        return CommandPipeline(IntentResolver(nlu, timeout=timeout), FeedbackChannel(surface))

    return factory
