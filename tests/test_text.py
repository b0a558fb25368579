import io

from gedupgrade.events import Event, EventType
from gedupgrade.parser import EventSource
from gedupgrade.text import Merge, Unconc, unmerge

LINEBREAK = Event(EventType.LINEBREAK)


def run(stage, events):
    out = []
    for event in events:
        stage(event, out.append)
    return out


CONTINUED = [
    Event.start("NOTE"),
    Event.text("a"),
    Event.start("CONC"),
    Event.text("b"),
    Event.end(),
    Event.start("CONT"),
    Event.text("c"),
    Event.end(),
    Event.end(),
]


def test_unconc():
    assert run(Unconc(), CONTINUED) == [
        Event.start("NOTE"),
        Event.text("a"),
        Event.text("b"),
        LINEBREAK,
        Event.text("c"),
        Event.end(),
    ]


def test_merge_after_unconc():
    merged = run(Merge(), run(Unconc(), CONTINUED))
    assert merged == [Event.start("NOTE"), Event.text("ab\nc"), Event.end()]


def test_merge_flushes_before_child():
    events = [
        Event.start("NOTE"),
        Event.text("x"),
        Event.start("SOUR"),
        Event.end(),
        Event.end(),
    ]
    assert run(Merge(), events) == events


def test_merge_from_parsed_file():
    data = b"0 HEAD\n1 CHAR UTF-8\n1 NOTE ab\n2 CONC cd\n2 CONT ef\n0 TRLR\n"
    events = list(EventSource(io.BytesIO(data)))
    merged = run(Merge(), run(Unconc(), events))
    texts = [e.data for e in merged if e.type is EventType.TEXT]
    assert texts == ["UTF-8", "abcd\nef"]


def test_unmerge_splits_lines():
    out = run(unmerge, [Event.text("ab\ncd")])
    assert out == [Event.text("ab"), LINEBREAK, Event.text("cd")]


def test_unmerge_drops_single_character_pieces():
    out = run(unmerge, [Event.text("x\nlong")])
    assert out == [LINEBREAK, Event.text("long")]


def test_unmerge_leaves_plain_text():
    assert run(unmerge, [Event.text("no breaks")]) == [Event.text("no breaks")]


def test_merge_then_unmerge_round_trip():
    events = [Event.text("ab"), LINEBREAK, Event.text("cd"), Event.end()]
    merged = run(Merge(), events)
    assert run(unmerge, merged) == events