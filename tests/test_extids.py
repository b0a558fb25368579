import pytest

from gedupgrade.events import Event
from gedupgrade.extids import ExternalIds


def run(events, stage=None):
    stage = stage or ExternalIds()
    out = []
    for event in events:
        stage(event, out.append)
    return out


def test_unrelated_events_pass_through():
    events = [
        Event.start("INDI"),
        Event.start("NAME"),
        Event.text("John /Doe/"),
        Event.end(),
        Event.end(),
    ]
    assert run(events) == events


def test_rfn_becomes_exid_with_type():
    out = run([
        Event.start("INDI"),
        Event.start("RFN"),
        Event.text("123"),
        Event.end(),
        Event.end(),
    ])
    assert out == [
        Event.start("INDI"),
        Event.start("EXID"),
        Event.text("123"),
        Event.start("TYPE"),
        Event.text("ged551:RFN"),
        Event.end(),
        Event.end(),
        Event.end(),
    ]


def test_afn_type():
    out = run([Event.start("INDI"), Event.start("AFN"), Event.text("9")])
    assert out[1] == Event.start("EXID")
    assert out[4] == Event.text("ged551:AFN")


def test_rin_without_head_source():
    out = run([Event.start("INDI"), Event.start("RIN"), Event.text("7")])
    assert out[-2] == Event.text("ged551:RIN/unknown")


def test_rin_uses_head_source():
    head = [
        Event.start("HEAD"),
        Event.start("SOUR"),
        Event.text("MyApp"),
        Event.end(),
        Event.end(),
    ]
    record = [Event.start("INDI"), Event.start("RIN"), Event.text("7")]
    out = run(head + record)
    assert out[: len(head)] == head
    assert out[-4:] == [
        Event.text("7"),
        Event.start("TYPE"),
        Event.text("ged551:RIN/MyApp"),
        Event.end(),
    ]


@pytest.mark.parametrize(
    "tag, expected",
    [
        ("_FID", "https://www.familysearch.org/tree/person/"),
        ("_FSFTID", "https://www.familysearch.org/tree/person/"),
        ("FSFTID", "https://www.familysearch.org/tree/person/"),
        ("_APID", "https://www.ancestry.com/family-tree/"),
    ],
)
def test_vendor_ids(tag, expected):
    out = run([Event.start("INDI"), Event.start(tag), Event.text("abc")])
    assert out[1] == Event.start("EXID")
    assert out[4] == Event.text(expected)


def test_input_events_are_not_modified():
    start = Event.start("RFN")
    run([Event.start("INDI"), start])
    assert start == Event.start("RFN")