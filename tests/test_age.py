import pytest

from gedupgrade.age import Age, parse_age


def test_bare_number_becomes_years():
    assert parse_age("3").to_payload() == "3y"


@pytest.mark.parametrize("text", ["1y 2m 3d", "> 40y", "2w", "0y", "< 8y"])
def test_canonical_ages_round_trip(text):
    age = parse_age(text)
    assert age.phrase is None
    assert age.to_payload() == text


def test_child_is_under_eight_years():
    age = parse_age("CHILD")
    assert age.modifier == "<"
    assert age.year == 8
    assert age.phrase == "CHILD"
    assert age.to_payload() == parse_age("< 8y").to_payload()


def test_infant_is_case_insensitive_and_trims_space():
    age = parse_age("  infant  ")
    assert age.modifier == "<"
    assert age.year == 1
    assert age.phrase == "  infant  "


def test_stillborn_is_zero_years():
    age = parse_age("Stillborn")
    assert age.year == 0
    assert age.modifier == ""
    assert age.phrase == "Stillborn"


def test_unparseable_age_is_phrase_only():
    age = parse_age("old")
    assert age.phrase == "old"
    assert age.to_payload() == ""


def test_partial_age_keeps_parsed_part():
    age = parse_age("5y abc")
    assert age.year == 5
    assert age.phrase == "5y abc"
    assert age.to_payload() == parse_age("5y").to_payload()


def test_bare_modifier_is_invalid():
    age = parse_age("< ")
    assert age.modifier == "<"
    assert age.phrase == "< "
    assert age.year is None


def test_two_bare_numbers_are_invalid():
    age = parse_age("3 4")
    assert age.year is None
    assert age.phrase == "3 4"


def test_upper_case_units():
    age = parse_age("1Y 2M")
    assert (age.year, age.month) == (1, 2)
    assert age.phrase is None


def test_payload_of_empty_age_with_modifier_is_empty():
    assert Age(modifier=">").to_payload() == ""