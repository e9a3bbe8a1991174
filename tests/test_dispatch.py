"""Tests for the generic dispatcher and per-screen intent tables."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from voicebook.commands.dispatch import Action, ScreenTable, dispatch
from voicebook.commands.feedback import tts_prompt
from voicebook.core.types import ActionResult, ActionStatus, BoundSlot, Intent, IntentResult


class Recorder:
    """Handler factory that remembers which handler ran with what."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any, dict[str, Any]]] = []

    def handler(self, label: str):
        async def run(entity: Any, slots: Any) -> ActionResult:
            self.calls.append((label, entity, dict(slots)))
            return ActionResult.succeeded(label)

        return run


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def table(recorder: Recorder) -> ScreenTable:
    return ScreenTable(
        "test",
        [
            Action(Intent.OPEN_PROFILE, recorder.handler("targeted-open"), requires_entity=True),
            Action(Intent.OPEN_PROFILE, recorder.handler("global-open")),
            Action(Intent.ACCEPT_REQUEST, recorder.handler("accept"), requires_entity=True),
            Action(Intent.GO_BACK, recorder.handler("back")),
        ],
    )


def _intent(intent: str, **slots: Any) -> IntentResult:
    return IntentResult(intent=intent, slots=slots)


class TestScreenTable:
    def test_split_into_targeted_and_global(self, table: ScreenTable) -> None:
        assert set(table.targeted) == {Intent.OPEN_PROFILE, Intent.ACCEPT_REQUEST}
        assert set(table.global_) == {Intent.OPEN_PROFILE, Intent.GO_BACK}

    def test_recognizes(self, table: ScreenTable) -> None:
        assert table.recognizes(Intent.GO_BACK)
        assert not table.recognizes(Intent.VOTE_POLL)

    def test_duplicate_in_same_half_rejected(self, recorder: Recorder) -> None:
        with pytest.raises(ValueError):
            ScreenTable(
                "dup",
                [
                    Action(Intent.GO_BACK, recorder.handler("a")),
                    Action(Intent.GO_BACK, recorder.handler("b")),
                ],
            )

    def test_maps_are_read_only(self, table: ScreenTable) -> None:
        with pytest.raises(TypeError):
            table.global_[Intent.VOTE_POLL] = None  # type: ignore[index]


class TestDispatch:
    def test_resolved_entity_uses_targeted_handler(
        self, table: ScreenTable, recorder: Recorder
    ) -> None:
        bob = object()
        result = asyncio.run(
            dispatch(_intent(Intent.OPEN_PROFILE, target_name="Bob"), BoundSlot.resolved("Bob", bob), table)
        )
        assert result.message == "targeted-open"
        assert recorder.calls == [("targeted-open", bob, {"target_name": "Bob"})]

    def test_absent_slot_falls_back_to_global(
        self, table: ScreenTable, recorder: Recorder
    ) -> None:
        result = asyncio.run(dispatch(_intent(Intent.OPEN_PROFILE), BoundSlot.absent(), table))
        assert result.message == "global-open"
        assert recorder.calls[0][1] is None

    def test_unresolved_slot_is_hard_stop(self, table: ScreenTable, recorder: Recorder) -> None:
        result = asyncio.run(
            dispatch(
                _intent(Intent.OPEN_PROFILE, target_name="Zed"),
                BoundSlot.unresolved("Zed"),
                table,
            )
        )
        assert result.status is ActionStatus.NOT_APPLICABLE
        assert result.reason == "unresolved_target"
        assert result.message == tts_prompt("action_failed")
        assert recorder.calls == []

    def test_targeted_only_intent_without_slot_not_understood(
        self, table: ScreenTable, recorder: Recorder
    ) -> None:
        result = asyncio.run(dispatch(_intent(Intent.ACCEPT_REQUEST), BoundSlot.absent(), table))
        assert result.reason == "unrecognized"
        assert recorder.calls == []

    def test_global_intent_ignores_unresolved_slot(
        self, table: ScreenTable, recorder: Recorder
    ) -> None:
        result = asyncio.run(
            dispatch(_intent(Intent.GO_BACK, target_name="x"), BoundSlot.unresolved("x"), table)
        )
        assert result.message == "back"

    def test_unknown_intent_not_understood(self, table: ScreenTable) -> None:
        result = asyncio.run(dispatch(IntentResult.unrecognized(), BoundSlot.absent(), table))
        assert result.status is ActionStatus.NOT_APPLICABLE
        assert result.message == tts_prompt("not_understood")

    def test_intent_valid_elsewhere_is_noop_here(self, table: ScreenTable) -> None:
        result = asyncio.run(dispatch(_intent(Intent.VOTE_POLL), BoundSlot.absent(), table))
        assert result.reason == "unrecognized"
