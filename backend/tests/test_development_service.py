import logging

import pytest

from beamdraw.modules.steel import SteelKind
from beamdraw.schemas.development import Development, Node, compute_beam_name
from beamdraw.services.development_service import (
    apply_basic_preference,
    apply_basic_preference_to_development,
    apply_basic_preference_to_nodes,
    apply_basic_preference_to_spans,
    build_node_slots,
    calculate_node_steel_length,
    default_development,
    normalize_development,
)


def test_nodes_padded_to_span_count():
    dev = normalize_development({"spans": [{"L": 3.0}, {"L": 4.0}], "nodes": [{"a2": 0.7}]})

    assert len(dev.nodes) == 3
    assert all(node.a2 == pytest.approx(0.7) for node in dev.nodes)


def test_extra_nodes_are_dropped():
    dev = normalize_development({"spans": [{"L": 3.0}], "nodes": [{}, {}, {}, {}]})

    assert len(dev.nodes) == 2


def test_missing_document_gives_empty_development():
    dev = normalize_development(None)

    assert dev.spans == []
    assert len(dev.nodes) == 1


def test_validated_development_is_returned_as_is(single_span_dev):
    assert normalize_development(single_span_dev) is single_span_dev


def test_invalid_scalars_take_defaults():
    dev = normalize_development(
        {"unit_scale": "x", "spans": [{"L": "abc", "h": "0,6", "b": -1}], "nodes": [{"a2": None}, {}]}
    )

    span = dev.spans[0]
    assert dev.unit_scale == pytest.approx(2.0)
    assert span.L_m == pytest.approx(3.0)
    assert span.h_m == pytest.approx(0.6)
    assert span.b_m == 0.0
    assert dev.nodes[0].a2 == pytest.approx(0.5)


def test_legacy_keys_are_mapped():
    dev = normalize_development(
        {
            "recubrimiento": 0.05,
            "baston_Lc": 0.4,
            "spans": [
                {
                    "L": 3.0,
                    "steelTop": {"qty": "4", "diameter": '5/8"'},
                    "bastones": {"top": {"z1": {"enabled": True, "qty": 5, "diameter": "1"}}},
                    "stirrups": {"case_type": "simetrica", "left_spec": "1@.05, 8@.10, rto@.25"},
                }
            ],
        }
    )

    span = dev.spans[0]
    assert dev.cover_m == pytest.approx(0.05)
    assert dev.cutback_Lc_m == pytest.approx(0.4)
    assert (span.steel_top.qty, span.steel_top.diameter) == (4, "5/8")
    z1 = span.bastones.top.z1
    assert z1.l1_enabled and z1.l2_enabled
    assert (z1.l1_qty, z1.l2_diameter) == (3, "1")
    assert span.stirrups.case_type == "symmetric"
    assert span.stirrups.left_spec == "A=0.05 b,B=9,0.100 c,C=0,0.000 R=0.250"
    assert span.stirrups.right_spec == span.stirrups.left_spec


def test_beam_name_from_level_and_number():
    assert normalize_development({"level_type": "sotano", "beam_no": 3}).name == "VS-03"
    assert normalize_development({"levelType": "Azotea", "beamNo": "12"}).name == "VA-12"
    assert compute_beam_name("piso", 0) == "VT-01"


def test_beam_name_inferred_from_legacy_name():
    dev = normalize_development({"name": "VA-7"})

    assert dev.level_type == "azotea"
    assert dev.beam_no == 7
    assert dev.name == "VA-07"


def test_padding_is_logged(caplog):
    logger = logging.getLogger("beamdraw.services.development_service")
    logger.propagate = True
    try:
        with caplog.at_level(logging.INFO, logger="beamdraw.services.development_service"):
            normalize_development({"spans": [{"L": 3.0}], "nodes": []})
    finally:
        logger.propagate = False

    assert "ajustados a 2" in caplog.text


def test_default_development():
    dev = default_development()

    assert len(dev.spans) == 1 and len(dev.nodes) == 2
    assert dev.spans[0].L_m == pytest.approx(3.0)
    assert dev.name == "VT-01"
    assert default_development("VS-02").name == "VS-02"


def test_node_slots_labels():
    slots = build_node_slots([Node(), Node(), Node()])

    assert [slot.label for slot in slots] == ["Nodo 1.2", "Nodo 2.1", "Nodo 2.2", "Nodo 3.1"]
    assert [(slot.node_index, slot.end) for slot in slots] == [(0, 2), (1, 1), (1, 2), (2, 1)]


@pytest.mark.parametrize(
    "data, expected",
    [
        ({"support_type": "columna_inferior"}, 1.50),
        ({"support_type": "columna_superior"}, 1.80),
        ({"support_type": "placa", "b1": 0.1, "b2": 0.7}, 0.60),
        ({"support_type": "apoyo_intermedio", "b1": 0.0, "b2": 0.0}, 0.80),
        ({"support_type": "otro"}, 0.80),
    ],
)
def test_node_steel_length_by_support(data, expected):
    assert calculate_node_steel_length(Node.model_validate(data)) == pytest.approx(expected)


def test_basic_preference_by_node_position():
    nodes = [
        Node(b1=0.0, b2=0.5),
        Node(b1=0.0, b2=1.6),
        Node(b1=0.0, b2=1.9),
        Node(b1=0.0, b2=1.0),
    ]
    first, inner, wide, last = apply_basic_preference(nodes)

    assert first.is_start and first.top.kind is SteelKind.HOOK and first.top.to_face
    assert inner.is_intermediate
    assert inner.top.kind is SteelKind.CONTINUOUS
    assert inner.bottom.kind is SteelKind.DEVELOPMENT
    assert inner.bottom.anchorage_length_m == pytest.approx(0.60)
    assert wide.top.kind is SteelKind.DEVELOPMENT and wide.top.anchorage_length_m == pytest.approx(0.75)
    assert last.is_end and last.top.kind is SteelKind.DEVELOPMENT
    assert last.bottom.anchorage_length_m == pytest.approx(0.60)


def test_basic_preference_returns_copies():
    nodes = [Node(), Node()]
    updated = apply_basic_preference_to_nodes(nodes)

    assert nodes[0].steel_end("top", 2).kind is SteelKind.CONTINUOUS
    assert updated[0].steel_end("top", 2).kind is SteelKind.HOOK
    assert updated[0].steel_end("bottom", 1).to_face
    assert updated[0] is not nodes[0]


def test_basic_preference_spans_use_two_five_eighths(single_span_dev):
    spans = apply_basic_preference_to_spans(single_span_dev.spans)

    assert (spans[0].steel_top.qty, spans[0].steel_top.diameter) == (2, "5/8")
    assert (spans[0].steel_bottom.qty, spans[0].steel_bottom.diameter) == (2, "5/8")
    assert single_span_dev.spans[0].steel_top.qty == 3


def test_basic_preference_on_development(single_span_dev):
    updated = apply_basic_preference_to_development(single_span_dev)

    assert isinstance(updated, Development)
    assert updated.nodes[0].steel_end("bottom", 2).kind is SteelKind.HOOK
    assert single_span_dev.nodes[0].steel_end("bottom", 2).kind is SteelKind.CONTINUOUS


def test_basic_preference_keeps_existing_anchorage_override():
    nodes = [
        Node.model_validate({"steel_top_2_anchorage_length": 0.9}),
        Node.model_validate({"b2": 0.5, "steel_bottom_1_anchorage_length": 0.4}),
        Node.model_validate({"b2": 1.0}),
    ]
    first, inner, last = apply_basic_preference_to_nodes(nodes)

    assert first.steel_end("top", 2).kind is SteelKind.HOOK
    assert first.steel_end("top", 2).anchorage_length_m == pytest.approx(0.9)
    assert inner.steel_end("bottom", 1).kind is SteelKind.CONTINUOUS
    assert inner.steel_end("bottom", 1).anchorage_length_m == pytest.approx(0.4)
    assert last.steel_end("top", 1).anchorage_length_m == pytest.approx(0.75)
