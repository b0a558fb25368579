import pytest

from gedupgrade.events import Event, EventType
from gedupgrade.xrefs import FixIds, is_valid_xref


def run(stage, events):
    out = []
    for event in events:
        stage(event, out.append)
    return out


@pytest.mark.parametrize(
    "xref, expected",
    [
        ("I1", True),
        ("XA", True),
        ("F_2", True),
        ("X1", False),
        ("X", False),
        ("", False),
        ("i1", False),
        ("I-1", False),
        ("I 1", False),
    ],
)
def test_is_valid_xref(xref, expected):
    assert is_valid_xref(xref) is expected


def test_valid_ids_unchanged():
    events = [Event(EventType.ANCHOR, "I1"), Event.pointer("F_2")]
    assert run(FixIds(), events) == events


def test_invalid_ids_renamed_consistently():
    out = run(
        FixIds(),
        [
            Event(EventType.ANCHOR, "I-1"),
            Event.pointer("I-1"),
            Event.pointer("bad one"),
            Event(EventType.ANCHOR, "bad one"),
        ],
    )
    assert [e.data for e in out] == ["X1", "X1", "X2", "X2"]
    assert [e.type for e in out] == [
        EventType.ANCHOR,
        EventType.POINTER,
        EventType.POINTER,
        EventType.ANCHOR,
    ]


def test_generated_shape_is_remapped():
    out = run(FixIds(), [Event.pointer("X5"), Event.pointer("X5")])
    assert [e.data for e in out] == ["X1", "X1"]


def test_other_events_pass_through():
    events = [Event.start("NAME"), Event.text("I-1"), Event.end()]
    assert run(FixIds(), events) == events


def test_case_sensitive_keeps_distinct_ids():
    out = run(FixIds(), [Event.pointer("a-b"), Event.pointer("A-B")])
    assert out[0].data != out[1].data


def test_case_insensitive_uppercases_valid_ids():
    out = run(FixIds(case_insensitive=True), [Event.pointer("i1")])
    assert out[0].data == "I1"


def test_case_insensitive_merges_invalid_ids():
    out = run(
        FixIds(case_insensitive=True),
        [Event.pointer("a-b"), Event(EventType.ANCHOR, "A-B"), Event.pointer("x7")],
    )
    assert [e.data for e in out] == ["X1", "X1", "X2"]


def test_input_event_not_modified():
    event = Event.pointer("I-1")
    run(FixIds(), [event])
    assert event.data == "I-1"