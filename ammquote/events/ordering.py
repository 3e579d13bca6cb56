"""Chain order for log records: ascending (block_number, log_index)."""

from __future__ import annotations

from collections.abc import Iterable

from ammquote.events.types import OrderedEvent


def event_key(event: OrderedEvent) -> tuple[int, int]:
    return (event.block_number, event.log_index)


def sort_events[E: OrderedEvent](events: Iterable[E]) -> tuple[E, ...]:
    """Stable ascending sort. Same input set gives the same output whatever the input order."""
    return tuple(sorted(events, key=event_key))


def latest_event[E: OrderedEvent](events: Iterable[E]) -> E | None:
    ordered = sort_events(events)
    return ordered[-1] if ordered else None
