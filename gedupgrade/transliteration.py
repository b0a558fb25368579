"""Conversion of FONE and ROMN structures into TRAN with a LANG."""

from __future__ import annotations

from dataclasses import replace
from enum import IntEnum
from typing import Callable

from .events import Event, EventType

Emit = Callable[[Event], None]

_PHONETIC = {"hangul": "ko-hang", "kana": "jp-hrki"}
_ROMANIZED = {
    "pinyin": "und-Latn-pinyin",
    "romanji": "jp-Latn",
    "wadegiles": "zh-Latn-wadegile",
}


class _Kind(IntEnum):
    NONE = 0
    FONE = 1
    ROMN = 2


def phonetic_language(kind: str) -> str:
    """Language tag for a FONE.TYPE value."""
    return _PHONETIC.get(kind, f"x-phonetic-{kind}")


def romanized_language(kind: str) -> str:
    """Language tag for a ROMN.TYPE value."""
    return _ROMANIZED.get(kind, f"und-Latn-x-{kind}")


class Transliteration:
    """Renames FONE and ROMN to TRAN and their TYPE to a LANG language tag."""

    def __init__(self) -> None:
        self._kind = _Kind.NONE
        self._depth = 0
        self._in_type = False

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.START:
            if self._kind:
                self._depth += 1
            elif event.data == "FONE":
                self._kind = _Kind.FONE
                event = replace(event, data="TRAN")
            elif event.data == "ROMN":
                self._kind = _Kind.ROMN
                event = replace(event, data="TRAN")
            self._in_type = self._depth == 1 and event.data == "TYPE"
            if self._in_type:
                event = replace(event, data="LANG")
        elif event.type is EventType.END:
            if self._kind:
                if self._depth:
                    self._depth -= 1
                else:
                    self._kind = _Kind.NONE
        elif event.type is EventType.TEXT and self._in_type:
            value = event.data or ""
            if self._kind is _Kind.FONE:
                event = replace(event, data=phonetic_language(value))
            else:
                event = replace(event, data=romanized_language(value))
        emit(event)