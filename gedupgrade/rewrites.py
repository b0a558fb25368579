"""Small structural rewrites: INDI.ALIA text to NAME, NOTE to SNOTE."""

from __future__ import annotations

from typing import Callable

from .events import Event, EventType

Emit = Callable[[Event], None]


class AliaToAka:
    """Turns a text-valued INDI.ALIA into a NAME with TYPE AKA.

    Pointer-valued ALIA structures are left as they are.
    """

    def __init__(self) -> None:
        self._level = 0
        self._in_indi = False
        self._in_alia = False

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.START:
            self._level += 1
            if self._level == 1:
                self._in_indi = event.data == "INDI"
            self._in_alia = self._in_indi and self._level == 2 and event.data == "ALIA"
            if self._in_alia:
                return
        elif event.type is EventType.END:
            self._level -= 1
        elif self._in_alia:
            self._in_alia = False
            if event.type is EventType.TEXT:
                emit(Event.start("NAME"))
                emit(event)
                emit(Event.start("TYPE"))
                emit(Event.text("AKA"))
                emit(Event.end())
                return
            emit(Event.start("ALIA"))
        emit(event)


class NoteToSnote:
    """Makes NOTE records and pointer-valued NOTE structures into SNOTE."""

    def __init__(self) -> None:
        self._level = 0
        self._in_note = False

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.END:
            self._level -= 1

        if event.type is EventType.START:
            self._level += 1
            if event.data == "NOTE":
                if self._level == 1:
                    emit(Event.start("SNOTE"))
                else:
                    self._in_note = True
            else:
                emit(event)
            if self._level == 1 and self._in_note:
                self._in_note = False
        elif self._in_note:
            if event.type is EventType.POINTER:
                emit(Event.start("SNOTE"))
                emit(event)
                self._in_note = False
            elif event.type in (EventType.TEXT, EventType.END):
                emit(Event.start("NOTE"))
                emit(event)
                self._in_note = False
        else:
            emit(event)