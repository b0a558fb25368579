"""Writing a stream of parse events out as a GEDCOM file."""

from __future__ import annotations

from typing import BinaryIO

from .events import Event, EventType

BOM = "\ufeff"
ENDL = "\n"


class EventSink:
    """Serialises events as UTF-8 GEDCOM lines.

    Performs no validation: tags and identifiers are written as given.
    A tag is written one event late because an anchor may follow it.
    """

    def __init__(self, out: BinaryIO) -> None:
        self._out = out
        self.level = 0
        self._last: Event | None = None

    def write(self, event: Event) -> None:
        """Write one event."""
        if event.type is EventType.UNUSED:
            raise ValueError("cannot write an unused event")
        last = self._last
        last_type = last.type if last is not None else EventType.UNUSED
        parts: list[str] = []

        if last is not None and last_type is EventType.START:
            if event.type is EventType.ANCHOR:
                parts.append(f" @{event.data}@")
            parts.append(f" {last.data}")

        after_end = last_type is EventType.END
        if event.type is EventType.START:
            if last is None:
                parts.append(BOM)
            elif not after_end:
                parts.append(ENDL)
            parts.append(str(self.level))
            self.level += 1
        elif event.type is EventType.END:
            if not after_end:
                parts.append(ENDL)
            self.level -= 1
        elif event.type is EventType.POINTER:
            parts.append(f" @{event.data}@")
        elif event.type is EventType.TEXT:
            data = event.data or ""
            if last_type is EventType.TEXT:
                parts.append(data)
            elif data.startswith("@"):
                parts.append(f" @{data}")
            else:
                parts.append(f" {data}")
        elif event.type is EventType.LINEBREAK:
            parts.append(f"{ENDL}{self.level} CONT")
        elif event.type is EventType.ERROR:
            prefix = "" if after_end else ENDL
            parts.append(f"{prefix}0 _PARSE_ERROR {event.data}{ENDL}")
        elif event.type is EventType.RECORD:
            prefix = "" if after_end else ENDL
            parts.append(f"{prefix}0 _PARSE_ERROR <record>{ENDL}")

        self._out.write("".join(parts).encode("utf-8"))
        self._last = event