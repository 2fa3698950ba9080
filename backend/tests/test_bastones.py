import pytest

from beamdraw.modules.bastones import (
    baston_line_extent,
    compute_baston_layout,
    layout_span_bastones,
    node_connectors,
    resolve_zone_length_m,
    zone_extent,
)
from beamdraw.modules.steel import SteelKind
from beamdraw.schemas.development import BastonCfg


def test_default_zone_lengths():
    """En un tramo de 3 m, Z1/Z3 miden L/3 = 1.00 m y Z2 deja L/5 a cada lado."""
    cfg = BastonCfg()

    assert resolve_zone_length_m(cfg, "L3_m", 3.0) == pytest.approx(1.0)
    assert resolve_zone_length_m(cfg, "L1_m", 3.0) == pytest.approx(0.6)
    assert resolve_zone_length_m(cfg, "L2_m", 3.0) == pytest.approx(0.6)


def test_zone_lengths_snap_and_clamp():
    assert resolve_zone_length_m(BastonCfg(L3_m=1.23), "L3_m", 3.0) == pytest.approx(1.25)
    assert resolve_zone_length_m(BastonCfg(L3_m=5.0), "L3_m", 3.0) == pytest.approx(3.0)
    assert resolve_zone_length_m(BastonCfg(L3_m=-1.0), "L3_m", 3.0) == pytest.approx(1.0)
    assert resolve_zone_length_m(BastonCfg(), "L3_m", 0.0) == 0.0


def test_zones_are_ordered_along_the_face():
    cfg = BastonCfg(L1_m=1.0, L2_m=1.0, L3_m=1.0)
    face = (1.0, 7.0)
    z1 = zone_extent(face, "z1", cfg, 3.0, 2.0)
    z2 = zone_extent(face, "z2", cfg, 3.0, 2.0)
    z3 = zone_extent(face, "z3", cfg, 3.0, 2.0)

    assert z1 == pytest.approx((1.0, 3.0))
    assert z2 == pytest.approx((3.0, 5.0))
    assert z3 == pytest.approx((5.0, 7.0))
    assert z1[1] <= z2[0] + 1e-9 and z2[1] <= z3[0] + 1e-9


def test_default_center_zone():
    z2 = zone_extent((1.0, 7.0), "z2", BastonCfg(), 3.0, 2.0)

    assert z2 == pytest.approx((2.2, 5.8))


def _bastones_span():
    return {
        "L": 3.0,
        "h": 0.5,
        "bastones": {
            "top": {"z1": {"l1_enabled": True, "l2_enabled": True, "l2_qty": 2, "l2_diameter": "5/8"}},
            "bottom": {"z3": {"l2_enabled": True}},
        },
    }


def test_segments_per_line(make_dev):
    dev = make_dev([_bastones_span()])
    segments, _ = layout_span_bastones(dev, 0)

    assert [(s.side, s.zone, s.line) for s in segments] == [
        ("top", "z1", 1),
        ("top", "z1", 2),
        ("bottom", "z3", 2),
    ]
    outer, inner, bottom = segments
    assert (outer.x_start, outer.x_end) == pytest.approx((1.0, 3.0))
    assert outer.y == pytest.approx(0.84)
    # la línea interior se recorta Lc en su extremo libre
    assert (inner.x_start, inner.x_end) == pytest.approx((1.0, 2.0))
    assert inner.y == pytest.approx(0.76)
    assert inner.qty == 2
    assert inner.diameter == "5/8"
    assert (bottom.x_start, bottom.x_end) == pytest.approx((6.0, 7.0))
    assert bottom.y == pytest.approx(0.24)


def test_segments_stay_within_face(make_dev):
    dev = make_dev([_bastones_span()])
    segments, _ = layout_span_bastones(dev, 0)

    for segment in segments:
        assert 1.0 - 1e-9 <= segment.x_start < segment.x_end <= 7.0 + 1e-9
        assert segment.length > 0


def test_terminations_default_to_hook(make_dev):
    dev = make_dev([_bastones_span()])
    _, terminations = layout_span_bastones(dev, 0)

    assert [(t.node_index, t.zone, t.line) for t in terminations] == [(0, "z1", 1), (0, "z1", 2), (1, "z3", 2)]
    assert all(t.endpoint.kind is SteelKind.HOOK for t in terminations)

    outer, inner, bottom = (t.endpoint for t in terminations)
    assert outer.end_x == pytest.approx(1.0 - 0.90 * 2.0)
    assert outer.hook_leg_end == pytest.approx((-0.8, 0.54))
    assert inner.end_x == pytest.approx(1.0 - 0.75 * 2.0)
    assert bottom.start_x == pytest.approx(7.0)
    assert bottom.end_x == pytest.approx(7.0 + 0.70 * 2.0)


def test_inner_line_disappears_when_zone_shorter_than_cutback(make_dev):
    span = {"L": 3.0, "bastones": {"top": {"z1": {"l1_enabled": True, "l2_enabled": True, "L3_m": 0.5}}}}
    dev = make_dev([span])

    assert baston_line_extent(dev, 0, "top", "z1", 1) == pytest.approx((1.0, 2.0))
    assert baston_line_extent(dev, 0, "top", "z1", 2) is None


def test_disabled_line_has_no_extent(single_span_dev):
    assert baston_line_extent(single_span_dev, 0, "top", "z2", 1) is None
    assert compute_baston_layout(single_span_dev).segments == []


def _continuous_bastones_dev(make_dev, right_l3=None):
    left = {"L": 3.0, "bastones": {"top": {"z3": {"l1_enabled": True, "l2_enabled": True}}}}
    right_z1 = {"l1_enabled": True, "l2_enabled": True}
    if right_l3 is not None:
        right_z1["L3_m"] = right_l3
    right = {"L": 4.0, "bastones": {"top": {"z1": right_z1}}}
    nodes = [{}, {"baston_top_1_kind": "continuous", "baston_top_2_kind": "continuous"}, {}]
    return make_dev([left, right], nodes)


def test_continuous_node_joins_bastones(make_dev):
    dev = _continuous_bastones_dev(make_dev)
    layout = compute_baston_layout(dev)

    assert [(c.node_index, c.side, c.line) for c in layout.connectors] == [(1, "top", 1), (1, "top", 2)]
    line1 = layout.connectors[0]
    assert [x for x, _ in line1.points] == pytest.approx([7.0, 8.0])
    assert [y for _, y in line1.points] == pytest.approx([0.84, 0.84])
    assert layout.terminations == []


def test_inner_connector_needs_room_for_cutback(make_dev):
    dev = _continuous_bastones_dev(make_dev, right_l3=0.5)

    assert [c.line for c in node_connectors(dev)] == [1]
