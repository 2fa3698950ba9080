import pytest

from beamdraw.modules.steel import SteelKind
from beamdraw.services.detailing_service import BeamDetailingService
from beamdraw.services.export_service import to_real_point, to_real_units
from beamdraw.services.quantity_service import QuantityLimits


def _raw_development(**node_overrides):
    first = {"a2": 0.5}
    first.update(node_overrides)
    return {
        "name": "VT-01",
        "unit_scale": 2.0,
        "recubrimiento": 0.04,
        "spans": [
            {"L": 3.0, "h": 0.5, "b": 0.3, "bastones": {"top": {"z1": {"l1_enabled": True}}}},
            {"L": 4.0, "h": 0.5, "b": 0.3},
        ],
        "nodes": [first, {}, {}],
    }


@pytest.fixture
def service():
    return BeamDetailingService(limits=QuantityLimits())


def test_compute_detailing_success(service):
    response = service.compute_detailing(_raw_development())

    assert response.success
    assert response.message == "Detallado de VT-01 calculado exitosamente"
    assert response.computation_time_ms is not None
    results = response.results
    assert results.units == "drawing"
    assert len(results.spans) == 2
    assert len(results.nodes) == 3
    assert len(results.longitudinal_runs) == 4
    assert len(results.node_terminals) == 8
    assert len(results.longitudinal_connectors) == 2
    assert len(results.baston_segments) == 1
    assert len(results.baston_terminations) == 1
    assert len(results.stirrups) == 2
    assert all(group.count > 0 for group in results.stirrups)
    assert len(results.quantities) == 6
    assert results.warnings == []


def test_geometry_in_results(service):
    results = service.compute_detailing(_raw_development()).results

    assert (results.spans[0].bottom_start, results.spans[0].bottom_end) == pytest.approx((1.0, 7.0))
    assert [node.origin_x for node in results.nodes] == pytest.approx([0.0, 7.0, 16.0])
    assert results.nodes[0].label == "Nodo 1"


def test_explicit_cuts(service):
    results = service.compute_detailing(_raw_development(), cuts=[3.0, 9.0]).results

    assert [record.span_index for record in results.quantities] == [0, 1]


def test_meters_output_divides_by_unit_scale(service):
    drawing = service.compute_detailing(_raw_development()).results
    meters = service.compute_detailing(_raw_development(), units="m").results

    assert meters.units == "m"
    assert meters.spans[0].bottom_start == pytest.approx(drawing.spans[0].bottom_start / 2.0)
    assert meters.spans[0].L_m == pytest.approx(drawing.spans[0].L_m)
    assert meters.nodes[1].origin_x == pytest.approx(3.5)
    assert meters.stirrups[0].left_blocks[0].positions == pytest.approx(
        [x / 2.0 for x in drawing.stirrups[0].left_blocks[0].positions]
    )
    hook = meters.baston_terminations[0].endpoint
    drawn = drawing.baston_terminations[0].endpoint
    assert hook.end_x == pytest.approx(drawn.end_x / 2.0)
    assert hook.hook_leg_end == pytest.approx((drawn.hook_leg_end[0] / 2.0, drawn.hook_leg_end[1] / 2.0))
    assert hook.straight_length_m == pytest.approx(drawn.straight_length_m)
    assert meters.quantities[0].x == pytest.approx(meters.quantities[0].x_m)


def test_to_real_units_matches_meters_output(service):
    drawing = service.compute_detailing(_raw_development()).results
    converted = to_real_units(drawing)

    assert converted.units == "m"
    assert drawing.units == "drawing"
    assert converted.longitudinal_runs[0].y == pytest.approx(drawing.longitudinal_runs[0].y / 2.0)
    assert to_real_units(converted).spans[0].bottom_start == pytest.approx(converted.spans[0].bottom_start)
    assert to_real_point((3.0, 0.5), 2.0) == pytest.approx((1.5, 0.25))


def test_short_development_is_reported(service):
    raw = _raw_development(steel_bottom_2_kind="development", steel_bottom_2_to_face=True)
    response = service.compute_detailing(raw)

    assert response.success
    assert "Nodo 1.2 inferior: tramo recto 0.46 m menor que 0.70 m requerido" in response.results.warnings


def test_development_without_spans_fails(service):
    response = service.compute_detailing({"spans": []})

    assert not response.success
    assert response.results is None
    assert response.message == "El desarrollo no tiene tramos"


def test_invalid_document_fails_without_raising(service):
    response = service.compute_detailing({"spans": [5]})

    assert not response.success
    assert response.message.startswith("Error en el cálculo")


def test_explicit_steel_table_with_aliases_is_drawn(service):
    raw = _raw_development()
    raw["nodes"][0] = {
        "a2": 0.5,
        "steel": {"bottom": {"end2": {"kind": "gancho"}}, "top": {"end2": {"kind": "sin definir"}}},
        "bastones": {},
    }
    response = service.compute_detailing(raw)

    assert response.success
    terminals = {(t.node_index, t.end, t.side): t for t in response.results.node_terminals}
    assert terminals[(0, 2, "bottom")].endpoint.kind is SteelKind.HOOK
    assert terminals[(0, 2, "top")].endpoint.kind is SteelKind.CONTINUOUS
