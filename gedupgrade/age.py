"""Parsing of 5.5.1 AGE payloads and formatting in the 7.0 form."""

from __future__ import annotations

import string
from dataclasses import dataclass

_SPACE = " \t\n\v\f\r"
_DIGITS = "0123456789"
_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)

# Age words and the bound they stand for: (modifier, years).
_KEYWORDS = {
    "CHILD": ("<", 8),
    "INFANT": ("<", 1),
    "STILLBORN": ("", 0),
}
_UNITS = {
    "y": "year", "Y": "year",
    "m": "month", "M": "month",
    "w": "week", "W": "week",
    "d": "day", "D": "day",
}


@dataclass
class Age:
    """An age: counts of each unit (None when absent), a bound and a phrase."""

    year: int | None = None
    month: int | None = None
    week: int | None = None
    day: int | None = None
    modifier: str = ""
    phrase: str | None = None

    def to_payload(self) -> str:
        """Format as a 7.0 AGE payload; empty if no amount is known."""
        amounts = [
            f"{count}{unit}"
            for count, unit in (
                (self.year, "y"),
                (self.month, "m"),
                (self.week, "w"),
                (self.day, "d"),
            )
            if count is not None
        ]
        if not amounts:
            return ""
        prefix = [self.modifier] if self.modifier else []
        return " ".join(prefix + amounts)


def parse_age(payload: str) -> Age:
    """Parse a 5.5.1 AGE payload.

    Age words become bounds with the payload kept as a phrase; anything
    unparseable keeps what was read so far and the payload as a phrase.
    """
    text = payload.lstrip(_SPACE)
    keyword = _KEYWORDS.get(text.rstrip(_SPACE).translate(_UPPER))
    if keyword is not None:
        modifier, years = keyword
        return Age(year=years, modifier=modifier, phrase=payload)

    age = Age()
    if text[:1] in ("<", ">") and text:
        age.modifier = text[0]
        text = text[1:].lstrip(_SPACE)
    if not text:
        age.phrase = payload
        return age

    pos, end = 0, len(text)

    def skip_space(i: int) -> int:
        while i < end and text[i] in _SPACE:
            i += 1
        return i

    while pos < end:
        if text[pos] not in _DIGITS:
            age.phrase = payload
            return age
        start = pos
        while pos < end and text[pos] in _DIGITS:
            pos += 1
        count = int(text[start:pos])
        pos = skip_space(pos)
        if pos == end and age.year is None and age.month is None and age.day is None:
            age.year = count
            break
        unit = _UNITS.get(text[pos]) if pos < end else None
        if unit is None:
            age.phrase = payload
            return age
        setattr(age, unit, count)
        pos = skip_space(pos + 1)
    return age