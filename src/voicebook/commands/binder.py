"""Slot binding against the on-screen entity context."""

from voicebook.core.types import BoundSlot, EntityContext, SlotValue


def bind(slot_value: SlotValue | None, context: EntityContext) -> BoundSlot:
    """Match *slot_value* against the display names in *context*.

    Matching is case-insensitive equality only; no fuzzy or prefix matching.
    When several entries share a name, the first one in context order wins.
    A missing slot yields ``absent`` and a slot with no exact match yields
    ``unresolved``; an entity is never guessed.
    """
    if slot_value is None:
        return BoundSlot.absent()

    wanted = str(slot_value).strip().casefold()
    if not wanted:
        return BoundSlot.unresolved(slot_value)

    for entry in context:
        if entry.display_name.strip().casefold() == wanted:
            return BoundSlot.resolved(slot_value, entry.ref)
    return BoundSlot.unresolved(slot_value)
