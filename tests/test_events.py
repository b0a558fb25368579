from gedupgrade.events import Event, EventType, Structure


def test_start_event():
    event = Event.start("HEAD")
    assert (event.type, event.data, event.record) == (EventType.START, "HEAD", None)


def test_end_event_has_no_data():
    event = Event.end()
    assert (event.type, event.data) == (EventType.END, None)


def test_text_event():
    assert Event.text("hello") == Event(EventType.TEXT, "hello")


def test_pointer_event():
    assert Event.pointer("I1") == Event(EventType.POINTER, "I1")


def test_events_compare_by_value():
    assert Event.start("NAME") == Event.start("NAME")
    assert Event.start("NAME") != Event.start("SEX")


def test_structure_defaults():
    record = Structure("INDI")
    assert (record.anchor, record.payload, record.children) == (None, None, [])


def test_structure_children_are_independent():
    first = Structure("INDI")
    second = Structure("FAM")
    first.children.append(Structure("NAME", payload=Event.text("Ann")))
    assert second.children == []
    assert first.children[0].payload.data == "Ann"


def test_record_event_carries_tree():
    tree = Structure("SOUR", anchor="S1", children=[Structure("TITL", payload=Event.text("Book"))])
    event = Event(EventType.RECORD, record=tree)
    assert event.record.children[0].tag == "TITL"
    assert event.record.anchor == "S1"