"""Conversion of application-specific identifiers into EXID structures."""

from __future__ import annotations

from dataclasses import replace
from enum import IntEnum
from typing import Callable

from .events import Event, EventType


class _Inside(IntEnum):
    NONE = 0
    HEAD = 1
    HEAD_SOUR = 2
    RFN = 3
    RIN = 4
    AFN = 5
    FSFTID = 6
    APID = 7


_ID_TAGS = {
    "RFN": _Inside.RFN,
    "RIN": _Inside.RIN,
    "AFN": _Inside.AFN,
    "_FSFTID": _Inside.FSFTID,
    "_FID": _Inside.FSFTID,
    "FSFTID": _Inside.FSFTID,
    "_APID": _Inside.APID,
}

_TYPES = {
    _Inside.RFN: "ged551:RFN",
    _Inside.AFN: "ged551:AFN",
    _Inside.FSFTID: "https://www.familysearch.org/tree/person/",
    _Inside.APID: "https://www.ancestry.com/family-tree/",
}


class ExternalIds:
    """Turns RFN, RIN, AFN and known vendor ids into EXID with a TYPE.

    RIN types are qualified by the HEAD.SOUR seen earlier in the stream.
    """

    def __init__(self) -> None:
        self._head_source: str | None = None
        self._inside = _Inside.NONE
        self._nested = 0

    def _type_for(self, inside: _Inside) -> str:
        if inside is _Inside.RIN:
            if self._head_source is not None:
                return f"ged551:RIN/{self._head_source}"
            return "ged551:RIN/unknown"
        return _TYPES[inside]

    def __call__(self, event: Event, emit: Callable[[Event], None]) -> None:
        if event.type is EventType.START:
            if self._inside is _Inside.HEAD_SOUR:
                self._inside = _Inside.HEAD
            elif self._inside > _Inside.HEAD:
                self._inside = _Inside.NONE
            elif self._inside:
                self._nested += 1

            tag = event.data
            if self._inside is _Inside.HEAD and tag == "SOUR":
                self._inside = _Inside.HEAD_SOUR
            elif self._inside is _Inside.NONE:
                kind = _ID_TAGS.get(tag or "")
                if kind is not None:
                    self._inside = kind
                    event = replace(event, data="EXID")
                elif tag == "HEAD":
                    self._inside = _Inside.HEAD
        elif event.type is EventType.END:
            if self._nested:
                self._nested -= 1
            elif self._inside:
                self._inside = _Inside.NONE
        elif event.type is EventType.TEXT and self._inside > _Inside.HEAD:
            if self._inside is _Inside.HEAD_SOUR:
                self._head_source = event.data
            else:
                emit(event)
                emit(Event.start("TYPE"))
                emit(Event.text(self._type_for(self._inside)))
                emit(Event.end())
                return
        emit(event)