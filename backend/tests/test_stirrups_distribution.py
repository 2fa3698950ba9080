import pytest

from beamdraw.modules.stirrups import (
    blocks_from_spec,
    compute_stirrup_layout,
    parse_stirrups_spec,
    positions_from_tokens,
    resolve_end_specs,
    span_stirrup_groups,
)
from beamdraw.schemas.development import StirrupsSpec


def _positions(blocks):
    return [x for block in blocks for x in block.positions]


def test_abcr_blocks_from_left_face():
    blocks = blocks_from_spec("A=0.05 b,B=3,0.100 c,C=2,0.150 R=0.250", 0.0, 10.0, +1, 1.0)

    assert [block.tag for block in blocks] == ["b", "c", "r"]
    b, c, r = blocks
    assert b.positions == pytest.approx([0.05, 0.15, 0.25])
    assert c.positions == pytest.approx([0.40, 0.55])
    assert len(r.positions) == 37
    assert r.positions[0] == pytest.approx(0.80)
    assert r.positions[-1] == pytest.approx(9.80)


def test_positions_are_monotonic_and_bounded():
    positions = _positions(blocks_from_spec("A=0.05 b,B=3,0.100 c,C=2,0.150 R=0.250", 0.0, 10.0, +1, 1.0))

    assert all(b > a for a, b in zip(positions, positions[1:]))
    assert positions[-1] <= 10.0 + 1e-6


def test_right_face_runs_toward_center():
    blocks = blocks_from_spec("A=0.05 b,B=2,0.100 R=0.500", 10.0, 5.0, -1, 1.0)
    positions = _positions(blocks)

    assert [block.tag for block in blocks] == ["b", "r"]
    assert positions[:2] == pytest.approx([9.95, 9.85])
    assert positions[-1] == pytest.approx(5.35)
    assert all(b < a for a, b in zip(positions, positions[1:]))


def test_unit_scale_multiplies_spacings():
    blocks = blocks_from_spec("A=0.05 b,B=2,0.100 R=0.500", 0.0, 2.0, +1, 2.0)

    assert blocks[0].positions == pytest.approx([0.1, 0.3])


def test_c_block_skipped_but_rest_still_placed():
    blocks = blocks_from_spec("A=0.05 b,B=2,0.100 c,C=1,0.300 R=0.100", 0.0, 0.3, +1, 1.0)

    assert [block.tag for block in blocks] == ["b", "r"]
    assert blocks[1].positions == pytest.approx([0.25])


def test_b_block_skipped_but_c_and_rest_placed():
    blocks = blocks_from_spec("A=2.00 b,B=1,0.000 c,C=2,0.200 R=0.300", 0.0, 1.0, +1, 1.0)

    assert [block.tag for block in blocks] == ["c", "r"]
    assert blocks[0].positions == pytest.approx([0.2, 0.4])


def test_legacy_spec_blocks():
    blocks = blocks_from_spec("1@.05, 2@.10, rto@.30", 0.0, 1.0, +1, 1.0)

    assert [block.tag for block in blocks] == ["seg1", "seg2", "r"]
    assert _positions(blocks) == pytest.approx([0.05, 0.15, 0.25, 0.55, 0.85])


def test_unreadable_spec_places_nothing():
    assert blocks_from_spec("sin estribos", 0.0, 1.0, +1, 1.0) == []
    assert blocks_from_spec(None, 0.0, 1.0, +1, 1.0) == []


def test_positions_from_tokens():
    tokens = parse_stirrups_spec("1@.05, rto@.20")

    assert positions_from_tokens(tokens, 0.0, 0.5, +1, 1.0) == pytest.approx([0.05, 0.25, 0.45])


def test_symmetric_case_mirrors_left_spec():
    spec = StirrupsSpec(case_type="symmetric", left_spec="A=0.05 R=0.200")

    assert resolve_end_specs(spec) == ("A=0.05 R=0.200", "A=0.05 R=0.200")


def test_asym_both_falls_back_to_center():
    spec = StirrupsSpec(case_type="asym_both", center_spec="A=0.05 R=0.200", right_spec="A=0.10 R=0.300")

    assert resolve_end_specs(spec) == ("A=0.05 R=0.200", "A=0.10 R=0.300")


def test_asym_one_special_end():
    spec = StirrupsSpec(case_type="asym_one", left_spec="A=0.05 R=0.200", center_spec="A=0.10 R=0.400")

    assert resolve_end_specs(spec) == ("A=0.05 R=0.200", "A=0.10 R=0.400")
    right = spec.model_copy(update={"single_end": "right"})
    assert resolve_end_specs(right) == ("A=0.10 R=0.400", "A=0.05 R=0.200")


def test_span_without_specs_gets_defaults_for_height(single_span_dev):
    stirrups = single_span_dev.spans[0].stirrups

    assert stirrups.left_spec == "A=0.05 b,B=9,0.100 c,C=0,0.000 R=0.220"
    assert stirrups.right_spec == stirrups.left_spec


def test_span_groups_fill_to_center(make_dev):
    span = {"L": 3.0, "stirrups": {"case_type": "symmetric", "left_spec": "A=0.05 b,B=2,0.100 R=0.250"}}
    group = span_stirrup_groups(make_dev([span]), 0)

    assert (group.face_start, group.face_end) == pytest.approx((1.0, 7.0))
    assert (group.y_bottom, group.y_top) == pytest.approx((0.08, 0.92))
    assert _positions(group.left_blocks) == pytest.approx([1.1, 1.3, 1.8, 2.3, 2.8, 3.3, 3.8])
    assert _positions(group.right_blocks) == pytest.approx([6.9, 6.7, 6.2, 5.7, 5.2, 4.7, 4.2])
    assert group.count == 14
    assert all(1.0 <= x <= 7.0 for x in group.positions)


def test_wide_center_gap_gets_mid_stirrup(make_dev):
    span = {"L": 3.0, "stirrups": {"case_type": "symmetric", "left_spec": "A=0.05 b,B=2,0.100 R=0.500"}}
    group = span_stirrup_groups(make_dev([span]), 0)

    assert [block.tag for block in group.left_blocks] == ["b", "r", "mid"]
    assert group.left_blocks[-1].positions == pytest.approx([4.0])
    assert max(_positions(group.left_blocks[:-1])) == pytest.approx(3.3)
    assert min(_positions(group.right_blocks)) == pytest.approx(4.7)


def test_zero_length_span_has_no_stirrups(make_dev):
    groups = compute_stirrup_layout(make_dev([{"L": 0.0}, {"L": 3.0}]))

    assert len(groups) == 2
    assert groups[0].count == 0
    assert groups[1].count > 0
