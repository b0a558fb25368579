import re

import pytest

from gedupgrade.enums import Enums, RelaToRole, as_enum_tag, relation_role
from gedupgrade.events import Event, EventType


def run(stage, events):
    out = []
    for event in events:
        stage(event, out.append)
    return out


def texts(events):
    return [e.data for e in events if e.type is EventType.TEXT]


def test_sex_is_capitalised():
    out = run(Enums(), [
        Event.start("INDI"), Event.start("SEX"), Event.text("m"),
        Event.end(), Event.end(),
    ])
    assert texts(out) == ["M"]
    assert len(out) == 5


def test_unknown_sex_becomes_other_with_phrase():
    out = run(Enums(), [Event.start("INDI"), Event.start("SEX"), Event.text("unsure")])
    assert out[2:] == [
        Event.text("OTHER"),
        Event.start("PHRASE"),
        Event.text("unsure"),
        Event.end(),
    ]


def test_role_phrase_strips_parentheses():
    out = run(Enums(), [Event.start("ASSO"), Event.start("ROLE"),
                        Event.text("(Witness to wedding)")])
    assert out[-2] == Event.text("Witness to wedding")
    assert out[2] == Event.text("OTHER")


def test_famc_adop_and_name_type():
    out = run(Enums(), [
        Event.start("INDI"),
        Event.start("FAMC"), Event.pointer("F1"),
        Event.start("ADOP"), Event.text("husb"), Event.end(),
        Event.end(),
        Event.start("NAME"), Event.text("John /Doe/"),
        Event.start("TYPE"), Event.text("married"), Event.end(),
        Event.end(),
        Event.end(),
    ])
    assert texts(out) == ["HUSB", "John /Doe/", "MARRIED"]


def test_text_under_extension_is_untouched():
    out = run(Enums(), [Event.start("INDI"), Event.start("_CUSTOM"),
                        Event.start("SEX"), Event.text("zz")])
    assert texts(out) == ["zz"]


def test_ordinary_text_passes_through():
    out = run(Enums(), [Event.start("NOTE"), Event.text("anything at all")])
    assert out == [Event.start("NOTE"), Event.text("anything at all")]


@pytest.mark.parametrize("text", ["pre-1970", "dns/can", "ok", "a b_c"])
def test_as_enum_tag_invariants(text):
    tag = as_enum_tag(text)
    assert len(tag) == len(text)
    assert re.fullmatch(r"[0-9A-Z_]*", tag)
    assert as_enum_tag(tag) == tag


@pytest.mark.parametrize(
    ("text", "role"),
    [
        ("child", "CHIL"),
        ("Godmother", "GODP"),
        ("priest", "CLERGY"),
        ("WITNESS", "WITN"),
        ("neighbor", "NGHBR"),
        ("cousin", "OTHER"),
    ],
)
def test_relation_role(text, role):
    assert relation_role(text) == role


def test_rela_renamed_and_matching_text_has_no_phrase():
    out = run(RelaToRole(), [Event.start("RELA"), Event.text("wife"), Event.end()])
    assert out == [Event.start("ROLE"), Event.text("WIFE"), Event.end()]


def test_rela_synonym_keeps_phrase():
    out = run(RelaToRole(), [Event.start("RELA"), Event.text("husband")])
    assert out == [
        Event.start("ROLE"),
        Event.text("HUSB"),
        Event.start("PHRASE"),
        Event.text("husband"),
        Event.end(),
    ]


def test_few_phrases_keeps_phrase_only_for_other():
    stage = RelaToRole(few_phrases=True)
    out = run(stage, [Event.start("RELA"), Event.text("husband"), Event.end(),
                      Event.start("RELA"), Event.text("cousin")])
    assert texts(out) == ["HUSB", "OTHER", "cousin"]


def test_text_outside_rela_unchanged():
    out = run(RelaToRole(), [Event.start("NOTE"), Event.text("wife")])
    assert out == [Event.start("NOTE"), Event.text("wife")]