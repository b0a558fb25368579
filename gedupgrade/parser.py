"""Turning a GEDCOM 5.5.1 byte stream into a stream of parse events."""

from __future__ import annotations

from enum import Enum, auto
from typing import BinaryIO, Iterator

from .decoding import EOF, DecodingReader
from .events import Event, EventType

_SPACE = frozenset(map(ord, " \t\n\v\f\r"))
_BLANK = frozenset(map(ord, " \t"))
_NEWLINE = frozenset(map(ord, "\n\r"))
_TAG_END = frozenset(map(ord, " \t\n\r"))
_XREF_END = frozenset(map(ord, "@\n\r"))
_AT = ord("@")


def _is_digit(codepoint: int) -> bool:
    return ord("0") <= codepoint <= ord("9")


class _Stage(Enum):
    PRE_LEVEL = auto()
    POST_LEVEL = auto()
    PRE_PAYLOAD = auto()
    POST_TRLR = auto()


def unescape_payload(payload: str) -> Event:
    """Resolve the 5.5.1 uses of ``@`` in a line payload.

    ``@id@`` alone is a pointer; ``@@`` becomes ``@``; ``@#Dcalendar@``
    becomes the calendar name in capitals with ``_`` for spaces; any other
    ``@#...@`` escape is removed. Returns a POINTER or TEXT event.
    """
    out: list[str] = []
    last_at: int | None = None
    escaped = False
    ats = 0
    pos = 0
    length = len(payload)
    while pos < length:
        char = payload[pos]
        if char != "@" or last_at is None:
            out.append(char)
            if char == "@":
                last_at = len(out) - 1
                ats += 1
            if last_at is not None and last_at == len(out) - 2 and char == "#":
                escaped = True
            pos += 1
            continue
        ats += 1
        if last_at == len(out) - 1:
            last_at = None
        elif escaped:
            if last_at + 2 < len(out) and out[last_at + 2] == "D":
                calendar = "".join(out[last_at + 3:]).replace(" ", "_")
                del out[last_at:]
                out.extend(calendar)
                out.append(" ")
            else:
                del out[last_at:]
            if pos + 1 < length and payload[pos + 1] == " ":
                pos += 1
            last_at = None
        else:
            out.append(char)
            last_at = len(out) - 1
        pos += 1

    text = "".join(out)
    if ats == 2 and text and text[0] == "@" and text[-1] == "@":
        return Event.pointer(text[1:-1])
    return Event.text(text)


class EventSource:
    """Reads GEDCOM lines from a seekable binary stream as parse events.

    Problems in the input become a single ERROR event, after which only
    END and EOF events follow.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._reader = DecodingReader(stream)
        self._stage = _Stage.PRE_LEVEL
        self._in_level = 0
        self._last_level = -1
        self._anchor: str | None = None

    def rewind(self) -> None:
        """Start again so that the next event is the first one."""
        self._reader.rewind()
        self._stage = _Stage.PRE_LEVEL
        self._last_level = -1
        self._in_level = 0
        self._anchor = None

    def __iter__(self) -> Iterator[Event]:
        """Yield events up to and including the EOF or ERROR event."""
        while True:
            event = self.get()
            yield event
            if event.type in (EventType.EOF, EventType.ERROR):
                return

    def get(self) -> Event:
        """Return the next event, advancing past it."""
        if self._anchor is not None:
            anchor, self._anchor = self._anchor, None
            return Event(EventType.ANCHOR, anchor)
        if self._stage is _Stage.PRE_LEVEL:
            event = self._read_level()
            if event is not None:
                return event
        if self._stage is _Stage.POST_LEVEL:
            return self._read_tag()
        if self._stage is _Stage.PRE_PAYLOAD:
            return self._read_payload()
        if self._in_level >= 0:
            self._in_level -= 1
            return Event.end()
        return Event(EventType.EOF)

    def _error(self, message: str) -> Event:
        self._stage = _Stage.POST_TRLR
        return Event(EventType.ERROR, message)

    def _skip_space(self) -> int:
        codepoint = self._reader.next_codepoint()
        while codepoint in _SPACE:
            codepoint = self._reader.next_codepoint()
        return codepoint

    def _read_until(self, first: str, delimiters: frozenset[int]) -> tuple[str, int]:
        chars = [first] if first else []
        while True:
            codepoint = self._reader.next_codepoint()
            if codepoint < 0 or codepoint in delimiters:
                return "".join(chars), codepoint
            chars.append(chr(codepoint))

    def _read_level(self) -> Event | None:
        codepoint = self._skip_space()
        if codepoint == EOF:
            if self._last_level >= 0:
                self._last_level -= 1
                return Event.end()
            self._stage = _Stage.POST_TRLR
            return Event(EventType.EOF)
        if codepoint < EOF:
            return self._error("Encountered non-character bytes")
        if not _is_digit(codepoint):
            return self._error("Encountered non-digit when expecting level")
        level = 0
        while _is_digit(codepoint):
            level = level * 10 + codepoint - ord("0")
            codepoint = self._reader.next_codepoint()
            if codepoint == EOF:
                return self._error("File ended mid-line")
            if codepoint < 0:
                return self._error("Encountered non-character bytes")
        if codepoint not in _BLANK:
            return self._error("Expected space after level")
        self._stage = _Stage.POST_LEVEL
        self._in_level = level
        return None

    def _read_tag(self) -> Event:
        if self._last_level >= self._in_level:
            self._last_level -= 1
            return Event.end()
        self._last_level = self._in_level
        self._stage = _Stage.PRE_PAYLOAD

        codepoint = self._skip_space()
        if codepoint == EOF:
            return self._error("File ended mid-line")
        if codepoint < 0:
            return self._error("Encountered non-character bytes")
        if codepoint == _AT:
            anchor, codepoint = self._read_until("", _XREF_END)
            if codepoint != _AT:
                return self._error("unterminated XREF_ID")
            self._anchor = anchor
            codepoint = self._skip_space()
            if codepoint == EOF:
                return self._error("File ended mid-line")
            if codepoint < 0:
                return self._error("Encountered non-character bytes")

        tag, codepoint = self._read_until(chr(codepoint), _TAG_END)
        if codepoint in _NEWLINE:
            self._stage = _Stage.PRE_LEVEL
        elif codepoint == EOF:
            self._stage = _Stage.POST_TRLR
        elif codepoint < 0:
            return self._error("Encountered non-character bytes")
        return Event.start(tag)

    def _read_payload(self) -> Event:
        self._stage = _Stage.PRE_LEVEL
        payload, codepoint = self._read_until("", _NEWLINE)
        if codepoint == EOF:
            self._stage = _Stage.POST_TRLR
        elif codepoint < 0:
            return self._error("Encountered non-character bytes")
        return unescape_payload(payload)