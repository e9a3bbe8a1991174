"""Tests for slot binding against the entity context."""

from __future__ import annotations

from voicebook.commands.binder import bind
from voicebook.commands.context import build_context, user_context, visible_requests
from voicebook.core.types import BindStatus, ContextEntry, EntityContext
from voicebook.models import User


def _users(*names: str) -> list[User]:
    return [User(id=f"id-{n}", name=n, username=n.lower()) for n in names]


class TestBind:
    def test_none_is_absent(self) -> None:
        bound = bind(None, user_context(_users("Alice")))
        assert bound.status is BindStatus.ABSENT
        assert bound.entity is None

    def test_case_insensitive_exact_match(self) -> None:
        alice, bob = _users("Alice", "Bob")
        bound = bind("alice", user_context([alice, bob]))
        assert bound.is_resolved
        assert bound.entity is alice

    def test_surrounding_whitespace_ignored(self) -> None:
        (alice,) = _users("Alice")
        assert bind("  ALICE ", user_context([alice])).entity is alice

    def test_no_partial_match(self) -> None:
        bound = bind("ali", user_context(_users("Alice")))
        assert bound.status is BindStatus.UNRESOLVED
        assert bound.value == "ali"
        assert bound.entity is None

    def test_no_fuzzy_match(self) -> None:
        bound = bind("alise", user_context(_users("Alice")))
        assert bound.status is BindStatus.UNRESOLVED

    def test_first_duplicate_wins(self) -> None:
        first = User(id="1", name="Sam", username="sam1")
        second = User(id="2", name="Sam", username="sam2")
        assert bind("sam", user_context([first, second])).entity is first

    def test_empty_value_is_unresolved(self) -> None:
        assert bind("   ", user_context(_users("Alice"))).status is BindStatus.UNRESOLVED

    def test_numeric_value_compared_as_text(self) -> None:
        context = EntityContext((ContextEntry("42", ref="answer"),))
        assert bind(42, context).entity == "answer"

    def test_empty_context(self) -> None:
        assert bind("alice", EntityContext()).status is BindStatus.UNRESOLVED


class TestContext:
    def test_build_context_skips_blank_names_and_none(self) -> None:
        context = build_context(["a", "", None, "b"], lambda s: s)
        assert context.names() == ["a", "b"]

    def test_user_context_preserves_order(self) -> None:
        assert user_context(_users("Bob", "Alice")).names() == ["Bob", "Alice"]

    def test_visible_requests_excludes_existing_friends(self) -> None:
        alice, bob = _users("Alice", "Bob")
        assert visible_requests([alice, bob], [bob]) == [alice]

    def test_visible_requests_skips_missing_ids(self) -> None:
        ghost = User(id="", name="Ghost", username="ghost")
        assert visible_requests([ghost], []) == []
