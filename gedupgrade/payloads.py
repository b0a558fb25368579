"""Rewrites of DATE, AGE, media FORM and FILE payloads into the 7.0 forms."""

from __future__ import annotations

import string
from dataclasses import replace
from typing import Callable

from .age import parse_age
from .dates import parse_date
from .events import Event, EventType

Emit = Callable[[Event], None]

_DATE_TAGS = frozenset({"DATE", "SDATE", "CHAN", "CREA"})
_LETTERS = frozenset(string.ascii_letters)

_MEDIA_TYPES = {
    "gif": "image/gif",
    "jpg": "image/jpeg",
    "tif": "image/tiff",
    "bmp": "image/bmp",
    "ole": "application/x-oleobject",
    "pcx": "image/vnd.zbrush.pcx",
    "wav": "audio/vnd.wave",
}

_URL_ESCAPES = str.maketrans({
    "\\": "/",
    ":": "%3a",
    "?": "%3F",
    "#": "%23",
    "[": "%5B",
    "]": "%5D",
    "@": "%40",
})


def _emit_phrase(phrase: str, emit: Emit) -> None:
    emit(Event.start("PHRASE"))
    emit(Event.text(phrase))
    emit(Event.end())


def media_type(form: str) -> str:
    """Map a 5.5.1 multimedia format label to a media type."""
    return _MEDIA_TYPES.get(form, f"application/x-{form}")


def _looks_like_url(path: str) -> bool:
    """True for ``scheme://x...``: a scheme, two or more slashes, then more."""
    state = 1 if path[:1] in _LETTERS else 0
    for char in path:
        if state == 1:
            if char == ":":
                state = 2
            elif char in "/\\":
                state = 0
        elif state > 1:
            if char == "/":
                state += 1
            elif state >= 4:
                return True
            else:
                state = 0
    return False


def filename_to_url(path: str) -> str:
    """Turn a Windows, Mac or Linux file name into a URL; URLs are returned unchanged."""
    if _looks_like_url(path):
        return path
    prefix = ""
    rest = path
    if path.startswith("/"):
        prefix = "file://"
    elif path.startswith("\\"):
        prefix = "file://"
        if path[1:2] == "\\" and path[2:3] != "\\":
            rest = path[2:]
    elif path[:1] in _LETTERS and path[1:2] == ":" and path[2:3] != "\\":
        prefix = "file:///" + path[:2]
        rest = path[2:]
    return prefix + rest.translate(_URL_ESCAPES)


class DateFix:
    """Reformats DATE payloads, moving what cannot be kept into a PHRASE."""

    def __init__(self) -> None:
        self._active = False

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.START:
            self._active = event.data in _DATE_TAGS
        if self._active and event.type is EventType.TEXT:
            value = parse_date(event.data or "")
            emit(Event.text(value.to_payload()))
            if value.phrase is not None:
                _emit_phrase(value.phrase, emit)
            return
        emit(event)


class AgeFix:
    """Reformats AGE payloads, moving age words and leftovers into a PHRASE."""

    def __init__(self) -> None:
        self._active = False

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.START:
            self._active = event.data == "AGE"
        if self._active and event.type is EventType.TEXT:
            age = parse_age(event.data or "")
            emit(Event.text(age.to_payload()))
            if age.phrase is not None:
                _emit_phrase(age.phrase, emit)
            return
        emit(event)


class MediaType:
    """Replaces OBJE.FILE.FORM payloads with media types."""

    def __init__(self) -> None:
        self._depth = 0
        self._nest = 0

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.START:
            tag = event.data
            if self._depth == 0 and not self._nest and tag == "OBJE":
                self._depth = 1
            elif self._depth == 1 and not self._nest and tag == "FILE":
                self._depth = 2
            elif self._depth == 2 and not self._nest and tag == "FORM":
                self._depth = 3
            elif self._depth:
                self._nest += 1
        elif event.type is EventType.END:
            if self._nest:
                self._nest -= 1
            elif self._depth:
                self._depth -= 1
        if self._depth == 3 and not self._nest and event.type is EventType.TEXT:
            event = replace(event, data=media_type(event.data or ""))
        emit(event)


class FileNames:
    """Turns FILE payloads into URLs."""

    def __init__(self) -> None:
        self._active = False

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.START:
            self._active = event.data == "FILE"
        if self._active and event.type is EventType.TEXT:
            event = replace(event, data=filename_to_url(event.data or ""))
        emit(event)