"""Rewriting of cross-reference identifiers into the restricted form."""

from __future__ import annotations

import re
import string
from dataclasses import replace
from typing import Callable

from .events import Event, EventType

_VALID = re.compile(r"[0-9A-Z_]+")
# Identifiers of this shape are generated here, so existing ones are renamed.
_GENERATED = re.compile(r"X[0-9]*")
_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


def is_valid_xref(xref: str) -> bool:
    """True if ``xref`` uses only [A-Z0-9_] and cannot clash with a generated one."""
    return bool(_VALID.fullmatch(xref)) and not _GENERATED.fullmatch(xref)


class FixIds:
    """Replaces anchors and pointers that are not valid identifiers.

    Each distinct invalid identifier is given a new one, ``X1``, ``X2``
    and so on, in order of first appearance.
    """

    def __init__(self, case_insensitive: bool = False) -> None:
        self.case_insensitive = case_insensitive
        self._renamed: dict[str, str] = {}

    def __call__(self, event: Event, emit: Callable[[Event], None]) -> None:
        if event.type in (EventType.ANCHOR, EventType.POINTER) and event.data is not None:
            xref = event.data.translate(_UPPER) if self.case_insensitive else event.data
            if not is_valid_xref(xref):
                xref = self._renamed.setdefault(xref, f"X{len(self._renamed) + 1}")
            event = replace(event, data=xref)
        emit(event)