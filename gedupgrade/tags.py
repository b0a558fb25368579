"""Tag-level clean-ups: capitalisation, renames, obsolete tags and HEAD.GEDC."""

from __future__ import annotations

import string
from dataclasses import replace
from typing import Callable

from .events import Event, EventType

Emit = Callable[[Event], None]

_TAG_CHARS = frozenset(string.digits + string.ascii_uppercase + "_")
_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)
_ILLEGAL_TAG = "Encountered illegal character inside tag"

_RENAMES = {
    "_ASSO": "ASSO",
    "_CRE": "CREA",
    "_CREAT": "CREA",
    "_DATE": "DATE",
    "EMAI": "EMAIL",
    "_EMAIL": "EMAIL",
    "_INIT": "INIL",
    "_UID": "UID",
}


def capitalize_tag(tag: str) -> str:
    """Return ``tag`` in upper case; raise ValueError if empty or not [A-Za-z0-9_]."""
    if not tag:
        raise ValueError("empty tag")
    upper = tag.translate(_UPPER)
    for char in upper:
        if char not in _TAG_CHARS:
            raise ValueError(f"illegal character {char!r} in tag {tag!r}")
    return upper


def tagcase(event: Event, emit: Emit) -> None:
    """Capitalise tags; a tag with illegal characters becomes an ERROR event."""
    if event.type is EventType.START:
        try:
            tag = capitalize_tag(event.data or "")
        except ValueError:
            emit(Event(EventType.ERROR, _ILLEGAL_TAG))
            return
        event = replace(event, data=tag)
    emit(event)


class Rename:
    """Renames FORM.TYPE to FORM.MEDI and common extension tags to standard ones."""

    def __init__(self) -> None:
        self._form_level = 0

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.START:
            if self._form_level:
                self._form_level += 1
            elif event.data == "FORM":
                self._form_level = 1
            tag = event.data or ""
            if self._form_level == 2 and tag == "TYPE":
                tag = "MEDI"
            tag = _RENAMES.get(tag, tag)
            if tag != event.data:
                event = replace(event, data=tag)
        elif event.type is EventType.END:
            if self._form_level > 0:
                self._form_level -= 1
        emit(event)


class Discard:
    """Drops SUBN, HEAD.CHAR, HEAD.FILE and HEAD.GEDC.FORM with their substructures."""

    def __init__(self) -> None:
        self._level = 0
        self._cut_level = 0
        # 0: outside HEAD; 1: inside HEAD; 2: inside HEAD.GEDC
        self._head_gedc = 0

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.START:
            self._level += 1
            tag = event.data
            if self._level == 1:
                self._head_gedc = 1 if tag == "HEAD" else 0
            if self._level == 2 and self._head_gedc:
                self._head_gedc = 2 if tag == "GEDC" else 1
            if not self._cut_level and (
                tag == "SUBN"
                or (self._head_gedc == 1 and self._level == 2 and tag in ("CHAR", "FILE"))
                or (self._head_gedc == 2 and self._level == 3 and tag == "FORM")
            ):
                self._cut_level = self._level
        elif event.type is EventType.END:
            self._level -= 1
            if self._level < self._cut_level:
                self._cut_level = 0
                return
        if not self._cut_level:
            emit(event)


def _gedc_block() -> list[Event]:
    return [
        Event.start("GEDC"),
        Event.start("VERS"),
        Event.text("7.0"),
        Event.end(),
        Event.end(),
    ]


class Version:
    """Ensures a single HEAD.GEDC whose only child is VERS 7.0."""

    def __init__(self) -> None:
        self._level = 0
        self._written = False
        self._cut_level = 0

    def _write_gedc(self, emit: Emit) -> None:
        for item in _gedc_block():
            emit(item)
        self._written = True

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.START:
            self._level += 1
            if not self._cut_level and event.data == "GEDC":
                self._cut_level = self._level
                if not self._written:
                    self._write_gedc(emit)
        elif event.type is EventType.END:
            self._level -= 1
            if not self._level and not self._written:
                self._write_gedc(emit)
            if self._level < self._cut_level:
                self._cut_level = 0
                return
        if not self._cut_level:
            emit(event)