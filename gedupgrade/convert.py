"""The two-pass conversion pipeline from GEDCOM 5.5.1 to 7.0 and its command."""

from __future__ import annotations

import io
import sys
from contextlib import ExitStack
from dataclasses import dataclass
from typing import BinaryIO, Callable, Sequence

from .citations import ObjectsToRecords, SourcesToRecords
from .decoding import EncodingDetectionError
from .enums import Enums, RelaToRole
from .events import Event, EventType
from .extids import ExternalIds
from .parser import EventSource
from .payloads import AgeFix, DateFix, FileNames, MediaType
from .records import EventToRecord, record_to_events
from .rewrites import AliaToAka, NoteToSnote
from .tags import Discard, Rename, Version, tagcase
from .text import Merge, Unconc, unmerge
from .transliteration import Transliteration
from .writer import EventSink
from .xrefs import FixIds

Emit = Callable[[Event], None]
Filter = Callable[[Event, Emit], None]

USAGE = (
    "USAGE: {prog} [options] [infile.ged] [outfile.ged]\n"
    "where options may be\n"
    "  -h --help        this help message\n"
    "  -f --force       overwrite existing outfile.ged\n"
    "  -x --xreficase   compare xrefs case-insensitively\n"
    "  -p --fewphrases  omit PHRASE when reasonable payload available\n"
)


@dataclass(frozen=True)
class Stage:
    """One pipeline step with its filter for each pass (None to skip that pass)."""

    name: str
    first: Filter | None
    second: Filter | None

    def filter_for(self, pass_index: int) -> Filter | None:
        return self.first if pass_index == 0 else self.second


def build_pipeline(
    xref_case_insensitive: bool = False, few_phrases: bool = False
) -> list[Stage]:
    """Create fresh stages, in order, for one conversion."""
    unconc = Unconc()
    merge = Merge()
    return [
        Stage("unconc", unconc, unconc),
        Stage("merge", merge, merge),
        Stage("tagcase", tagcase, tagcase),
        Stage("rename", None, Rename()),
        Stage("discard", None, Discard()),
        Stage("datefix", None, DateFix()),
        Stage("agefix", None, AgeFix()),
        Stage("mediatype", None, MediaType()),
        Stage("filenames", None, FileNames()),
        Stage("tran", None, Transliteration()),
        Stage("exid", None, ExternalIds()),
        Stage("rela2role", None, RelaToRole(few_phrases)),
        Stage("note2snote", None, NoteToSnote()),
        Stage("alia2aka", None, AliaToAka()),
        Stage("event2record", None, EventToRecord()),
        Stage("sours2r", None, SourcesToRecords()),
        Stage("objes2r", None, ObjectsToRecords()),
        Stage("record2event", None, record_to_events),
        Stage("enums", None, Enums()),
        Stage("fixid", None, FixIds(xref_case_insensitive)),
        Stage("version", None, Version()),
        Stage("unmerge", None, unmerge),
    ]


def _chain(filters: Sequence[Filter], final: Emit) -> Emit:
    """Compose filters so each emitted event runs through the rest before the next."""
    emit = final
    for step in reversed(filters):
        def emit(event: Event, _step: Filter = step, _next: Emit = emit) -> None:
            _step(event, _next)
    return emit


def _discard(event: Event) -> None:
    del event


def convert(
    source: BinaryIO,
    dest: BinaryIO,
    xref_case_insensitive: bool = False,
    few_phrases: bool = False,
) -> None:
    """Convert GEDCOM 5.5.1 read from seekable ``source`` into 7.0 written to ``dest``.

    The input is read twice; only the second pass writes output. A parse
    error ends the output with a ``_PARSE_ERROR`` line.
    """
    stages = build_pipeline(xref_case_insensitive, few_phrases)
    events = EventSource(source)
    sink = EventSink(dest)
    error: Event | None = None
    for pass_index in (0, 1):
        if pass_index:
            events.rewind()
        filters = [
            step
            for step in (stage.filter_for(pass_index) for stage in stages)
            if step is not None
        ]
        emit = _chain(filters, sink.write if pass_index else _discard)
        error = None
        for event in events:
            if event.type is EventType.ERROR:
                error = event
                break
            emit(event)
    if error is not None:
        sink.write(error)


def _stdin_stream() -> BinaryIO:
    stream = sys.stdin.buffer
    try:
        if stream.seekable():
            return stream
    except (OSError, ValueError):
        pass
    return io.BytesIO(stream.read())


def main(argv: Sequence[str] | None = None) -> int:
    """Run the converter from the command line; returns the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    overwrite = False
    xref_case_insensitive = False
    few_phrases = False
    with ExitStack() as stack:
        source: BinaryIO | None = None
        dest: BinaryIO | None = None
        for arg in args:
            if arg in ("-h", "--help"):
                sys.stderr.write(USAGE.format(prog="gedupgrade"))
                return 1
            if arg in ("-f", "--force"):
                overwrite = True
            elif arg in ("-x", "--xreficase"):
                xref_case_insensitive = True
            elif arg in ("-p", "--fewphrases"):
                few_phrases = True
            elif source is None:
                try:
                    source = stack.enter_context(open(arg, "rb"))
                except OSError:
                    sys.stderr.write(f"ERROR: unable to read from {arg}\n")
                    return 2
            elif dest is None:
                try:
                    dest = stack.enter_context(open(arg, "wb" if overwrite else "xb"))
                except OSError:
                    sys.stderr.write(f"ERROR: unable to write to {arg}\n")
                    return 3
            else:
                sys.stderr.write(f"ERROR: unexpected argument {arg}\n")
                return 4

        if dest is None and overwrite:
            sys.stderr.write("ERROR: --force flag incompatible with stdout output\n")
            return 5

        try:
            convert(
                source if source is not None else _stdin_stream(),
                dest if dest is not None else sys.stdout.buffer,
                xref_case_insensitive,
                few_phrases,
            )
        except EncodingDetectionError as exc:
            sys.stderr.write(f"ERROR: {exc}\n")
            return 6
        if dest is None:
            sys.stdout.buffer.flush()
    return 0