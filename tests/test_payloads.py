import pytest

from gedupgrade.age import parse_age
from gedupgrade.dates import parse_date
from gedupgrade.events import Event
from gedupgrade.payloads import (
    AgeFix,
    DateFix,
    FileNames,
    MediaType,
    filename_to_url,
    media_type,
)

S = Event.start
E = Event.end
T = Event.text


def run(stage, events):
    out = []
    for event in events:
        stage(event, out.append)
    return out


@pytest.mark.parametrize(
    "form,expected",
    [("gif", "image/gif"), ("jpg", "image/jpeg"), ("tif", "image/tiff"),
     ("bmp", "image/bmp"), ("ole", "application/x-oleobject"),
     ("pcx", "image/vnd.zbrush.pcx"), ("wav", "audio/vnd.wave")],
)
def test_media_type_known(form, expected):
    assert media_type(form) == expected


def test_media_type_unknown_is_prefixed_and_case_sensitive():
    assert media_type("png") == "application/x-png"
    assert media_type("JPG") == "application/x-JPG"


def test_media_type_filter_only_in_obje_file_form():
    events = [
        S("OBJE"), S("FILE"), T("a.jpg"), S("FORM"), T("jpg"),
        S("MEDI"), T("photo"), E(), E(), E(), E(),
        S("FORM"), T("jpg"), E(),
    ]
    out = run(MediaType(), events)
    assert [e.data for e in out if e.data is not None and e.type.name == "TEXT"] == [
        "a.jpg", "image/jpeg", "photo", "jpg",
    ]


def test_filename_absolute_unix():
    assert filename_to_url("/home/a.jpg") == "file:///home/a.jpg"


def test_filename_unc_share():
    assert filename_to_url("\\\\server\\share\\a.jpg") == "file://server/share/a.jpg"


def test_filename_drive_with_slash():
    assert filename_to_url("C:/photos/a.jpg") == "file:///C:/photos/a.jpg"


def test_filename_url_unchanged():
    url = "http://example.com/a.jpg"
    assert filename_to_url(url) == url


def test_filename_relative_escapes_and_slashes():
    result = filename_to_url("photos\\a#b[1]@x?.jpg")
    assert "\\" not in result
    assert not any(c in result for c in "#[]@?")
    assert "%23" in result and "%40" in result
    assert result.startswith("photos/")


def test_filename_empty():
    assert filename_to_url("") == ""


def test_filenames_filter_only_under_file():
    out = run(FileNames(), [S("FILE"), T("/a.jpg"), E(), S("NOTE"), T("/a.jpg"), E()])
    assert out[1] == T(filename_to_url("/a.jpg"))
    assert out[4] == T("/a.jpg")


def test_datefix_without_phrase():
    value = parse_date("abt 1900")
    assert value.phrase is None
    out = run(DateFix(), [S("DATE"), T("abt 1900"), E()])
    assert out == [S("DATE"), T(value.to_payload()), E()]


def test_datefix_with_phrase():
    value = parse_date("(unknown)")
    assert value.phrase is not None
    out = run(DateFix(), [S("DATE"), T("(unknown)"), E()])
    assert out == [S("DATE"), T(value.to_payload()), S("PHRASE"), T(value.phrase), E(), E()]


def test_datefix_ignores_other_tags():
    events = [S("NOTE"), T("abt 1900"), E()]
    assert run(DateFix(), events) == events


def test_agefix_bare_number():
    age = parse_age("3")
    out = run(AgeFix(), [S("AGE"), T("3"), E()])
    assert out == [S("AGE"), T(age.to_payload()), E()]


def test_agefix_word_gets_phrase():
    age = parse_age("CHILD")
    out = run(AgeFix(), [S("AGE"), T("CHILD"), E()])
    assert out == [S("AGE"), T(age.to_payload()), S("PHRASE"), T("CHILD"), E(), E()]


def test_agefix_ignores_other_tags():
    events = [S("NOTE"), T("CHILD"), E()]
    assert run(AgeFix(), events) == events