"""Parsing of 5.5.1 date payloads and formatting in the 7.0 form."""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum, auto

_SPACE = " \t\n\v\f\r"
_DIGITS = "0123456789"
_WORD_START = string.ascii_letters + "_"
_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


class _Kind(Enum):
    NONE = auto()
    GREGMONTH = auto()
    KEY1 = auto()
    KEY2 = auto()
    KEY12 = auto()
    EPOCH = auto()
    WORD = auto()
    NUMBER = auto()
    OPAREN = auto()
    CPAREN = auto()
    SLASH = auto()
    ERROR = auto()


_PUNCTUATION = {"(": _Kind.OPAREN, ")": _Kind.CPAREN, "/": _Kind.SLASH}

_WORD_KINDS = {
    "BC": _Kind.EPOCH,
    "AD": _Kind.EPOCH,
    "BCE": _Kind.EPOCH,
    "ADE": _Kind.EPOCH,
    "B.C.": _Kind.EPOCH,
    "A.D.": _Kind.EPOCH,
    "TO": _Kind.KEY12,
    "AND": _Kind.KEY2,
    "FROM": _Kind.KEY1,
    **{
        key: _Kind.KEY1
        for key in ("BET", "BEF", "AFT", "EST", "CAL", "ABT", "INT")
    },
    **{
        month: _Kind.GREGMONTH
        for month in (
            "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
            "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
        )
    },
}

_SINGLE_DATE_MODIFIERS = frozenset({"TO", "BEF", "AFT", "EST", "ABT", "CAL"})
_RANGE_JOINERS = {"FROM": "TO", "BET": "AND"}


@dataclass(frozen=True)
class _Token:
    kind: _Kind
    text: str = ""
    number: int = 0


class _Tokenizer:
    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def rest(self) -> str:
        return self._text[self._pos:]

    def next(self) -> _Token:
        text = self._text
        pos = self._pos
        while pos < len(text) and text[pos] in _SPACE:
            pos += 1
        if pos == len(text):
            self._pos = pos
            return _Token(_Kind.NONE)
        char = text[pos]
        if char in _PUNCTUATION:
            self._pos = pos + 1
            return _Token(_PUNCTUATION[char])
        if char in _DIGITS:
            end = pos
            while end < len(text) and text[end] in _DIGITS:
                end += 1
            self._pos = end
            return _Token(_Kind.NUMBER, number=int(text[pos:end]))
        if char in _WORD_START:
            end = pos
            while end < len(text) and text[end] not in _SPACE:
                end += 1
            self._pos = end
            word = text[pos:end].translate(_UPPER)
            return _Token(_WORD_KINDS.get(word, _Kind.WORD), text=word)
        self._pos = len(text)
        return _Token(_Kind.ERROR, text=text[pos:])


@dataclass
class Date:
    """One calendar date; ``day`` and ``year`` are 0 when not given."""

    calendar: str | None = None
    day: int = 0
    month: str | None = None
    year: int = 0
    epoch: str | None = None

    def to_payload(self) -> str:
        """Format as a 7.0 date."""
        parts: list[str] = []
        if self.calendar:
            parts.append(self.calendar)
        if self.day:
            parts.append(str(self.day))
        if self.month:
            parts.append(self.month)
        parts.append(str(self.year))
        if self.epoch:
            parts.append(self.epoch)
        return " ".join(parts)


@dataclass
class DateValue:
    """A parsed date value: up to two dates, a modifier and a phrase."""

    first: Date | None = None
    second: Date | None = None
    modifier: str | None = None
    phrase: str | None = None

    def to_payload(self) -> str:
        """Format the 7.0 DATE payload; the phrase is not included."""
        parts: list[str] = []
        if self.modifier:
            parts.append(self.modifier)
        if self.first is not None:
            parts.append(self.first.to_payload())
        if self.second is not None:
            joiner = _RANGE_JOINERS.get(self.modifier or "")
            if joiner is None:
                raise ValueError(
                    f"modifier {self.modifier!r} does not take a second date"
                )
            parts.append(joiner)
            parts.append(self.second.to_payload())
        return " ".join(parts)


def _dual_year(year: int, suffix: int) -> int:
    """Complete a dual-year suffix such as the 8 of 1567/8."""
    modulus = 10
    while modulus < suffix:
        modulus *= 10
    base = year - year % modulus
    if year % modulus > suffix:
        base += modulus
    return base + suffix


class _Parser:
    def __init__(self, payload: str) -> None:
        self._original = payload
        self._copied = False
        self._tokens = _Tokenizer(payload)
        self.phrase: str | None = None
        self.dual: Date | None = None
        self.tok = self._tokens.next()

    @property
    def kind(self) -> _Kind:
        return self.tok.kind

    def advance(self) -> None:
        self.tok = self._tokens.next()

    def copy_as_phrase(self) -> None:
        if not self._copied:
            self._copied = True
            self.phrase = self._original

    def eat_slash(self) -> None:
        if self.kind is _Kind.SLASH:
            self.advance()
            self.advance()
            self.copy_as_phrase()

    def paren_phrase(self) -> str:
        rest = self._tokens.rest()
        trimmed = rest.rstrip(_SPACE)
        return trimmed[:-1] if trimmed.endswith(")") else rest

    def read_date(self, allow_dual: bool, modifier: str | None) -> Date | None:
        """Read one date; None when a month has no year."""
        date = Date()
        if self.kind is _Kind.WORD:
            date.calendar = self.tok.text
            self.advance()
        if self.kind is _Kind.GREGMONTH:
            date.month = self.tok.text
            self.advance()
            self.eat_slash()
        if self.kind is _Kind.NUMBER:
            date.year = self.tok.number
            self.advance()
            if (
                allow_dual
                and modifier is None
                and not date.month
                and self.phrase is None
                and self.kind is _Kind.SLASH
            ):
                self.copy_as_phrase()
                self.advance()
                if self.kind is _Kind.NUMBER:
                    suffix = self.tok.number
                    self.advance()
                    if self.kind is _Kind.NONE:
                        self.dual = Date(
                            calendar=date.calendar,
                            year=_dual_year(date.year, suffix),
                        )
                        return date
                else:
                    self.advance()
            else:
                self.eat_slash()
        if not date.month and (
            self.kind is _Kind.GREGMONTH
            or (date.calendar and self.kind is _Kind.WORD)
        ):
            date.day = date.year
            date.year = 0
            date.month = self.tok.text
            self.advance()
            self.eat_slash()
        if date.month and not date.year:
            if self.kind is not _Kind.NUMBER:
                return None
            date.year = self.tok.number
            self.advance()
            self.eat_slash()
        if self.kind is _Kind.EPOCH:
            if self.tok.text.startswith("B"):
                date.epoch = "BCE"
            self.advance()
        return date


def parse_date(payload: str) -> DateValue:
    """Parse a 5.5.1 DATE payload.

    Forgiving of odd spacing, unknown calendars and months; most other
    problems leave the whole payload in ``phrase``.
    """
    p = _Parser(payload)

    if p.kind is _Kind.OPAREN:
        return DateValue(phrase=p.paren_phrase())

    modifier: str | None = None
    if p.kind in (_Kind.KEY1, _Kind.KEY12):
        modifier = p.tok.text
        p.advance()

    first = p.read_date(True, modifier)
    if p.dual is not None:
        return DateValue(first, p.dual, "BET", p.phrase)
    if first is None:
        p.copy_as_phrase()
        return DateValue(phrase=p.phrase)

    if modifier is None or modifier in _SINGLE_DATE_MODIFIERS:
        if p.kind is not _Kind.NONE:
            p.copy_as_phrase()
        return DateValue(first, None, modifier, p.phrase)

    if modifier == "INT":
        if p.kind is _Kind.OPAREN and p.phrase is None:
            p.phrase = p.paren_phrase()
        else:
            p.copy_as_phrase()
        return DateValue(first, None, None, p.phrase)

    if modifier == "FROM":
        if p.kind is _Kind.NONE:
            return DateValue(first, None, modifier, p.phrase)
        if p.kind is _Kind.KEY12 and p.tok.text == "TO":
            p.advance()
        else:
            p.copy_as_phrase()
            return DateValue(first, None, modifier, p.phrase)
    elif not (p.kind is _Kind.KEY2 and p.tok.text == "AND" and modifier == "BET"):
        p.copy_as_phrase()
        return DateValue(first, None, modifier, p.phrase)
    else:
        p.advance()

    second = p.read_date(False, modifier)
    if second is None:
        p.copy_as_phrase()
        return DateValue(first, None, modifier, p.phrase)
    if p.kind is not _Kind.NONE:
        p.copy_as_phrase()
    return DateValue(first, second, modifier, p.phrase)