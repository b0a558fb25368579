"""Handling of CONC/CONT line continuations in text payloads."""

from __future__ import annotations

from typing import Callable

from .events import Event, EventType

Emit = Callable[[Event], None]


class Unconc:
    """Removes CONC structures and turns CONT structures into LINEBREAK events."""

    def __init__(self) -> None:
        self._inside = False

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.START:
            if event.data == "CONC":
                self._inside = True
                return
            if event.data == "CONT":
                self._inside = True
                emit(Event(EventType.LINEBREAK))
                return
        elif event.type is EventType.END and self._inside:
            self._inside = False
            return
        emit(event)


class Merge:
    """Joins runs of TEXT and LINEBREAK events into one TEXT using ``\\n``.

    The joined text is emitted at the next START or END.
    """

    def __init__(self) -> None:
        self._pending: str | None = None

    def __call__(self, event: Event, emit: Emit) -> None:
        if self._pending is not None and event.type in (EventType.START, EventType.END):
            emit(Event.text(self._pending))
            self._pending = None

        if event.type is EventType.TEXT:
            if event.data:
                self._pending = (self._pending or "") + event.data
        elif event.type is EventType.LINEBREAK:
            self._pending = (self._pending or "") + "\n"
        else:
            emit(event)


def unmerge(event: Event, emit: Emit) -> None:
    """Split a TEXT containing ``\\n`` into TEXT and LINEBREAK events.

    Pieces of one character or fewer are not emitted as TEXT.
    """
    if event.type is EventType.TEXT and event.data and "\n" in event.data:
        pieces = event.data.split("\n")
        for index, piece in enumerate(pieces):
            if len(piece) > 1:
                emit(Event.text(piece))
            if index < len(pieces) - 1:
                emit(Event(EventType.LINEBREAK))
        return
    emit(event)