"""Moving inline SOUR and OBJE substructures into records of their own."""

from __future__ import annotations

from typing import Callable, Iterable

from .events import Event, EventType, Structure

Emit = Callable[[Event], None]


def _is_text(payload: Event | None) -> bool:
    return payload is not None and payload.type is EventType.TEXT


def _is_pointer(payload: Event | None) -> bool:
    return payload is not None and payload.type is EventType.POINTER


def _gather_text_into_data(citation: Structure) -> None:
    """Move TEXT children into one DATA child placed where the first TEXT was."""
    texts = [child for child in citation.children if child.tag == "TEXT"]
    if not texts:
        return
    data = Structure("DATA", children=texts)
    children: list[Structure] = []
    for child in citation.children:
        if child.tag != "TEXT":
            children.append(child)
        elif child is texts[0]:
            children.append(data)
    citation.children = children


class SourcesToRecords:
    """Turns text-valued SOUR citations into pointers to new SOUR records.

    The text becomes a NOTE of the new record; TEXT substructures of the
    citation are gathered under a DATA substructure. HEAD is left alone.
    """

    def __init__(self) -> None:
        self._serial = 0

    def _walk(self, structures: Iterable[Structure], emit: Emit) -> None:
        for s in structures:
            if s.tag == "SOUR" and _is_text(s.payload):
                anchor = f"sours2r id {self._serial}"
                self._serial += 1
                record = Structure(
                    "SOUR",
                    anchor=anchor,
                    children=[Structure("NOTE", payload=s.payload)],
                )
                s.payload = Event.pointer(anchor)
                emit(Event(EventType.RECORD, record=record))
                _gather_text_into_data(s)
            self._walk(s.children, emit)

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.RECORD and event.record is not None:
            if event.record.tag != "HEAD":
                self._walk(event.record.children, emit)
        emit(event)


class ObjectsToRecords:
    """Turns OBJE links without a pointer into pointers to new OBJE records.

    All substructures except TITL move into the new record.
    """

    def __init__(self) -> None:
        self._serial = 0

    def _walk(self, structures: Iterable[Structure], emit: Emit) -> None:
        for s in structures:
            if s.tag == "OBJE" and not _is_pointer(s.payload):
                anchor = f"objes2r id {self._serial}"
                self._serial += 1
                moved = [child for child in s.children if child.tag != "TITL"]
                s.children = [child for child in s.children if child.tag == "TITL"]
                record = Structure("OBJE", anchor=anchor, children=moved)
                s.payload = Event.pointer(anchor)
                emit(Event(EventType.RECORD, record=record))
            self._walk(s.children, emit)

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.RECORD and event.record is not None:
            self._walk(event.record.children, emit)
        emit(event)