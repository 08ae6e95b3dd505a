"""Append-only battle event log."""
from __future__ import annotations

from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Iterator, List, Type, TypeVar, overload

from gridbattle.domain.events import BattleEvent, BattleEventType

E = TypeVar("E", bound=BattleEvent)


class EventLog:
    """Ordered record of everything that happened in a battle."""

    def __init__(self) -> None:
        self._events: List[BattleEvent] = []

    def append(self, event: BattleEvent) -> None:
        if self._events and event.tick < self._events[-1].tick:
            raise ValueError(
                f"Event {event.type.value} at tick {event.tick} precedes tick {self._events[-1].tick}."
            )
        self._events.append(event)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[BattleEvent]:
        return iter(tuple(self._events))

    @overload
    def __getitem__(self, index: int) -> BattleEvent: ...

    @overload
    def __getitem__(self, index: slice) -> List[BattleEvent]: ...

    def __getitem__(self, index):
        return self._events[index]

    def types(self) -> List[BattleEventType]:
        return [event.type for event in self._events]

    def of_type(self, event_cls: Type[E]) -> List[E]:
        return [event for event in self._events if isinstance(event, event_cls)]

    def at_tick(self, tick: int) -> List[BattleEvent]:
        return [event for event in self._events if event.tick == tick]

    def to_records(self) -> List[dict[str, object]]:
        """Plain-data view for consumers that serialise the log."""
        return [_event_record(event) for event in self._events]


def _event_record(event: BattleEvent) -> dict[str, object]:
    record: dict[str, object] = {"type": event.type.value}
    for f in fields(event):
        record[f.name] = _plain(getattr(event, f.name))
    return record


def _plain(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value
