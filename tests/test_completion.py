"""Tests for the one-shot completion signal."""

from __future__ import annotations

import asyncio

import pytest
from conftest import CompletionCounter

from voicebook.commands.completion import CompletionSignal, completion_scope


class TestCompletionSignal:
    def test_fires_once(self) -> None:
        counter = CompletionCounter()
        signal = CompletionSignal(counter)
        signal.fire()
        signal.fire()
        assert counter.count == 1
        assert signal.fired

    def test_callback_exception_is_contained(self) -> None:
        def explode() -> None:
            raise RuntimeError("listener gone")

        signal = CompletionSignal(explode)
        signal.fire()
        assert signal.fired


class TestCompletionScope:
    def test_fires_on_normal_exit(self) -> None:
        counter = CompletionCounter()
        with completion_scope(counter):
            assert counter.count == 0
        assert counter.count == 1

    def test_fires_on_exception(self) -> None:
        counter = CompletionCounter()
        with pytest.raises(KeyError):
            with completion_scope(counter):
                raise KeyError("x")
        assert counter.count == 1

    def test_explicit_fire_not_repeated(self) -> None:
        counter = CompletionCounter()
        with completion_scope(counter) as signal:
            signal.fire()
        assert counter.count == 1

    def test_fires_on_cancellation(self) -> None:
        counter = CompletionCounter()

        async def command() -> None:
            with completion_scope(counter):
                await asyncio.sleep(10)

        async def main() -> None:
            task = asyncio.create_task(command())
            await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(main())
        assert counter.count == 1
