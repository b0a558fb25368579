"""Assembling parse events into record trees and flattening them back."""

from __future__ import annotations

from typing import Callable, Iterator

from .events import Event, EventType, Structure

Emit = Callable[[Event], None]


class EventToRecord:
    """Collects the events of each record into a tree and emits one RECORD event.

    TEXT and LINEBREAK runs must already be merged into single TEXT events.
    Events outside any structure (EOF, ERROR, RECORD) pass straight through.
    """

    def __init__(self) -> None:
        self._open: list[Structure] = []

    def _current(self, event: Event) -> Structure:
        if not self._open:
            raise ValueError(f"{event.type.name} event outside any structure")
        return self._open[-1]

    def __call__(self, event: Event, emit: Emit) -> None:
        kind = event.type
        if kind is EventType.START:
            structure = Structure(event.data or "")
            if self._open:
                self._open[-1].children.append(structure)
            self._open.append(structure)
        elif kind is EventType.ANCHOR:
            self._current(event).anchor = event.data
        elif kind in (EventType.TEXT, EventType.POINTER):
            current = self._current(event)
            if current.payload is not None:
                raise ValueError(f"structure {current.tag} already has a payload")
            current.payload = event
        elif kind is EventType.END:
            self._current(event)
            structure = self._open.pop()
            if not self._open:
                emit(Event(EventType.RECORD, record=structure))
        elif kind is EventType.LINEBREAK:
            raise ValueError("line breaks must be merged before assembling records")
        else:
            emit(event)


def _structure_events(structure: Structure) -> Iterator[Event]:
    yield Event.start(structure.tag)
    if structure.anchor is not None:
        yield Event(EventType.ANCHOR, structure.anchor)
    if structure.payload is not None:
        yield structure.payload
    for child in structure.children:
        yield from _structure_events(child)
    yield Event.end()


def record_to_events(event: Event, emit: Emit) -> None:
    """Emit the parse events of a RECORD event's tree; pass other events on."""
    if event.type is EventType.RECORD and event.record is not None:
        for item in _structure_events(event.record):
            emit(item)
    else:
        emit(event)