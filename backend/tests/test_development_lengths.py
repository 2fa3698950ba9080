import pytest

from beamdraw.modules.steel import (
    DEVELOPMENT_LENGTHS_CM,
    SteelKind,
    anchorage_length_m,
    hook_length_m,
    normalize_diameter_key,
    required_length_m,
)


@pytest.mark.parametrize(
    "diameter, hook, bottom, top",
    [
        ("1/2", 0.28, 0.45, 0.60),
        ("5/8", 0.35, 0.60, 0.75),
        ("3/4", 0.42, 0.70, 0.90),
        ("1", 0.56, 1.15, 1.45),
        ("1-3/8", 0.77, 1.55, 2.00),
    ],
)
def test_table_lengths_in_meters(diameter, hook, bottom, top):
    assert hook_length_m(diameter) == pytest.approx(hook)
    assert anchorage_length_m(diameter, "bottom") == pytest.approx(bottom)
    assert anchorage_length_m(diameter, "top") == pytest.approx(top)


def test_top_bars_need_longer_anchorage():
    for row in DEVELOPMENT_LENGTHS_CM.values():
        assert row.anchor_top_cm > row.anchor_bottom_cm > row.hook_cm


def test_unknown_diameter_falls_back_to_three_quarters():
    assert anchorage_length_m("7/8", "bottom") == pytest.approx(0.70)
    assert hook_length_m("") == pytest.approx(0.42)


def test_required_length_depends_on_kind():
    assert required_length_m("3/4", SteelKind.HOOK, "bottom") == pytest.approx(0.42)
    assert required_length_m("3/4", SteelKind.DEVELOPMENT, "top") == pytest.approx(0.90)
    assert required_length_m("3/4", SteelKind.CONTINUOUS, "top") == 0.0


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('3/4"', "3/4"),
        ("Ø5/8", "5/8"),
        ("1 3/8", "1-3/8"),
        ("1in", "1"),
        ("0.5", "1/2"),
        ("8 mm", "8mm"),
    ],
)
def test_normalize_diameter_key(raw, expected):
    assert normalize_diameter_key(raw) == expected


def test_normalize_diameter_key_default():
    assert normalize_diameter_key(None, default="3/4") == "3/4"
    assert normalize_diameter_key("varilla", default="5/8") == "5/8"
