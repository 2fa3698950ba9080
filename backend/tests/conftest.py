import pytest

from beamdraw.services.development_service import normalize_development


def build_development(spans, nodes=None, **extra):
    """Desarrollo con escala 2 y recubrimiento 0.04 salvo que se indique otra cosa."""
    data = {"unit_scale": 2.0, "x0": 0.0, "y0": 0.0, "recubrimiento": 0.04, "baston_Lc": 0.5, "hook_leg_m": 0.15}
    data.update(extra)
    data["spans"] = spans
    data["nodes"] = nodes if nodes is not None else [{} for _ in range(len(spans) + 1)]
    return normalize_development(data)


@pytest.fixture
def make_dev():
    return build_development


@pytest.fixture
def single_span_dev():
    return build_development([{"L": 3.0, "h": 0.5, "b": 0.3}])


@pytest.fixture
def two_span_dev():
    return build_development([{"L": 3.0, "h": 0.5, "b": 0.3}, {"L": 4.0, "h": 0.5, "b": 0.3}])
