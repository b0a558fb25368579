"""Events and record trees passed between conversion stages.

The event stream keeps these guarantees: START and END events balance;
the first event starts HEAD and the last ends TRLR; an ANCHOR only
directly follows a START; and a structure's payload is either a single
POINTER or any number of TEXT and LINEBREAK events, never both.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class EventType(Enum):
    """Kinds of parse events."""

    UNUSED = auto()
    START = auto()
    END = auto()
    ANCHOR = auto()
    POINTER = auto()
    TEXT = auto()
    LINEBREAK = auto()
    EOF = auto()
    RECORD = auto()
    ERROR = auto()


@dataclass
class Event:
    """One parse event.

    ``data`` holds the tag for START, the identifier for ANCHOR and
    POINTER, the text for TEXT and the message for ERROR. ``record``
    holds the assembled tree of a RECORD event.
    """

    type: EventType
    data: str | None = None
    record: Structure | None = None

    @staticmethod
    def start(tag: str) -> Event:
        return Event(EventType.START, tag)

    @staticmethod
    def end() -> Event:
        return Event(EventType.END)

    @staticmethod
    def text(data: str) -> Event:
        return Event(EventType.TEXT, data)

    @staticmethod
    def pointer(xref: str) -> Event:
        return Event(EventType.POINTER, xref)


@dataclass
class Structure:
    """A structure with its optional anchor, payload and substructures."""

    tag: str
    anchor: str | None = None
    payload: Event | None = None
    children: list[Structure] = field(default_factory=list)