"""Normalisation of enumerated payloads and of free-text RELA into ROLE."""

from __future__ import annotations

import string
from dataclasses import replace
from enum import Enum, auto
from typing import Callable

from .events import Event, EventType

Emit = Callable[[Event], None]

_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)
_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_TAG_CHARS = frozenset(string.digits + string.ascii_uppercase)


class _Context(Enum):
    OTHER = auto()
    FAMC = auto()
    FAMC_ADOP = auto()
    FAMC_STAT = auto()
    MEDI = auto()
    PEDI = auto()
    RESN = auto()
    ROLE = auto()
    SEX = auto()
    NAME = auto()
    NAME_TYPE = auto()
    TEMPLE = auto()


_DIRECT = {
    "MEDI": _Context.MEDI,
    "PEDI": _Context.PEDI,
    "RESN": _Context.RESN,
    "ROLE": _Context.ROLE,
    "SEX": _Context.SEX,
    "BAPL": _Context.TEMPLE,
    "CONL": _Context.TEMPLE,
    "ENDL": _Context.TEMPLE,
    "SLGC": _Context.TEMPLE,
    "SLGS": _Context.TEMPLE,
}

_ALLOWED = {
    _Context.FAMC_ADOP: frozenset({"HUSB", "WIFE", "BOTH", "OTHER"}),
    _Context.FAMC_STAT: frozenset({"CHALLENGED", "DISPROVEN", "PROVEN", "OTHER"}),
    _Context.MEDI: frozenset({
        "AUDIO", "BOOK", "CARD", "ELECTRONIC", "FICHE", "FILM", "MAGAZINE",
        "MANUSCRIPT", "MAP ", "NEWSPAPER", "PHOTO", "TOMBSTONE", "VIDEO",
        "OTHER",
    }),
    _Context.PEDI: frozenset({"ADOPTED", "BIRTH", "FOSTER", "SEALING", "OTHER"}),
    _Context.RESN: frozenset({"CONFIDENTIAL", "LOCKED", "PRIVACY"}),
    _Context.ROLE: frozenset({
        "CHIL", "HUSB", "WIFE", "MOTH", "FATH", "SPOU", "CLERGY", "FRIEND",
        "GODP", "NGHBR", "OFFICIATOR", "PARENT", "WITN", "OTHER",
    }),
    _Context.SEX: frozenset({"M", "F", "U", "X", "OTHER"}),
    _Context.NAME_TYPE: frozenset({
        "AKA", "BIRTH", "IMMIGRANT", "MAIDEN", "MARRIED", "NICK",
        "PROFESSIONAL", "OTHER",
    }),
    _Context.TEMPLE: frozenset({
        "BIC", "CANCELED", "CHILD", "COMPLETED", "DNS", "DNS/CAN", "EXCLUDED",
        "INFANT", "PRE-1970", "STILLBORN", "SUBMITTED", "UNCLEARED", "OTHER",
    }),
}

_RELATIONS = {
    **dict.fromkeys(("child", "kid", "chil"), "CHIL"),
    **dict.fromkeys(("husband", "hus"), "HUSB"),
    "wife": "WIFE",
    **dict.fromkeys(("mother", "moth"), "MOTH"),
    **dict.fromkeys(("father", "fath"), "FATH"),
    **dict.fromkeys(("spouse", "spou"), "SPOU"),
    **dict.fromkeys(("clergy", "priest", "pastor", "minister"), "CLERGY"),
    "friend": "FRIEND",
    **dict.fromkeys(
        (
            "godparent", "god parent", "godmother", "god mother",
            "god father", "godfather",
        ),
        "GODP",
    ),
    "neighbor": "NGHBR",
    **dict.fromkeys(("officiator", "official"), "OFFICIATOR"),
    "parent": "PARENT",
    "witness": "WITN",
}


def as_enum_tag(text: str) -> str:
    """Upper-case ``text`` and replace every byte outside [0-9A-Z] with ``_``."""
    return "".join(
        char if char in _TAG_CHARS
        else "_" * len(char.encode("utf-8", "surrogatepass"))
        for char in text.translate(_UPPER)
    )


def _strip_parens(text: str) -> str:
    if text.startswith("("):
        text = text[1:]
        if text.endswith(")"):
            text = text[:-1]
    return text


def _other_with_phrase(event: Event, emit: Emit) -> None:
    emit(Event.text("OTHER"))
    emit(Event.start("PHRASE"))
    emit(replace(event, data=_strip_parens(event.data or "")))
    emit(Event.end())


class Enums:
    """Upper-cases known enumeration values; others become OTHER with a PHRASE.

    FILE.FORM, FONE.TYPE and ROMN.TYPE are handled by other stages.
    """

    def __init__(self) -> None:
        self._inside = _Context.OTHER
        self._nesting = 0
        self._ext_nesting = 0

    def _enter(self, tag: str) -> None:
        self._nesting += 1
        inside = self._inside
        if self._ext_nesting or tag.startswith("_"):
            self._ext_nesting += 1
        elif tag == "FAMC":
            self._inside = _Context.FAMC
            self._nesting = 0
        elif tag == "NAME":
            self._inside = _Context.NAME
            self._nesting = 0
        elif tag in _DIRECT:
            self._inside = _DIRECT[tag]
        elif inside is _Context.FAMC and self._nesting == 1:
            if tag == "ADOP":
                self._inside = _Context.FAMC_ADOP
            elif tag == "STAT":
                self._inside = _Context.FAMC_STAT
        elif inside is _Context.NAME and self._nesting == 1:
            if tag == "TYPE":
                self._inside = _Context.NAME_TYPE
        elif inside in (_Context.FAMC_ADOP, _Context.FAMC_STAT):
            self._inside = _Context.FAMC
        elif inside is _Context.NAME_TYPE:
            self._inside = _Context.NAME
        elif inside not in (_Context.FAMC, _Context.NAME):
            self._inside = _Context.OTHER

    def _leave(self) -> None:
        if self._ext_nesting > 0:
            self._ext_nesting -= 1
        if self._nesting > 0:
            self._nesting -= 1
        if self._inside in (_Context.FAMC_ADOP, _Context.FAMC_STAT):
            self._inside = _Context.FAMC
        elif self._inside is _Context.NAME_TYPE:
            self._inside = _Context.NAME

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.START:
            self._enter(event.data or "")
        elif event.type is EventType.END:
            self._leave()

        allowed = _ALLOWED.get(self._inside)
        if event.type is EventType.TEXT and allowed is not None:
            data = event.data or ""
            if data.translate(_UPPER) in allowed:
                emit(replace(event, data=as_enum_tag(data)))
            else:
                _other_with_phrase(event, emit)
            return
        emit(event)


def relation_role(text: str) -> str:
    """The ROLE value for a free-text RELA payload, OTHER when unknown."""
    return _RELATIONS.get(text.translate(_LOWER), "OTHER")


class RelaToRole:
    """Renames RELA to ROLE and maps its text onto the ROLE enumeration.

    The original text is kept in a PHRASE when it differs from the chosen
    value; with ``few_phrases`` only when the value is OTHER.
    """

    def __init__(self, few_phrases: bool = False) -> None:
        self.few_phrases = few_phrases
        self._in_rela = False

    def __call__(self, event: Event, emit: Emit) -> None:
        if event.type is EventType.START:
            self._in_rela = event.data == "RELA"
            if self._in_rela:
                event = replace(event, data="ROLE")

        if event.type is EventType.TEXT and self._in_rela:
            data = event.data or ""
            role = relation_role(data)
            emit(Event.text(role))
            if self.few_phrases:
                keep = role == "OTHER"
            else:
                keep = role != data.translate(_UPPER)
            if keep:
                emit(Event.start("PHRASE"))
                emit(event)
                emit(Event.end())
            return
        emit(event)