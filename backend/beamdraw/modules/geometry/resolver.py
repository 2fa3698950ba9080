"""Orígenes de nodos y rangos de cada tramo en unidades de dibujo.

Cadena de orígenes::

    origins[0]   = x0 * s
    origins[i+1] = origins[i] + (a2_i + L_i - a1_{i+1}) * s

Cara inferior del tramo ``i``: ``[origins[i] + a2_i*s, + L_i*s]``.
Cara superior: ``[origins[i] + b2_i*s, origins[i+1] + b1_{i+1}*s]``.
Los datos ausentes cuentan como 0 y los índices fuera de rango dan rangos nulos.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from .units import DEFAULT_TOLERANCE

if TYPE_CHECKING:
    from beamdraw.modules.steel.kinds import NodeEnd, Side
    from beamdraw.schemas.development import Development, Node, Span

Range = tuple[float, float]


def _scale(dev: "Development") -> float:
    return dev.unit_scale if dev.unit_scale > 0 else 1.0


def _span(dev: "Development", index: int) -> Optional["Span"]:
    return dev.spans[index] if 0 <= index < len(dev.spans) else None


def _node(dev: "Development", index: int) -> Optional["Node"]:
    return dev.nodes[index] if 0 <= index < len(dev.nodes) else None


def _span_length_m(dev: "Development", index: int) -> float:
    span = _span(dev, index)
    return max(0.0, span.L_m) if span is not None else 0.0


def _face_m(dev: "Development", index: int, attr: str) -> float:
    node = _node(dev, index)
    return max(0.0, getattr(node, attr)) if node is not None else 0.0


def node_origins(dev: "Development") -> list[float]:
    """Un origen por nodo (``len(spans) + 1`` valores)."""
    s = _scale(dev)
    origins = [dev.x0 * s]
    for i in range(len(dev.spans)):
        step = _face_m(dev, i, "a2") + _span_length_m(dev, i) - _face_m(dev, i + 1, "a1")
        origins.append(origins[-1] + step * s)
    return origins


def _origin(origins: Sequence[float], index: int) -> float:
    return origins[index] if 0 <= index < len(origins) else 0.0


def span_bottom_range(dev: "Development", index: int, origins: Optional[Sequence[float]] = None) -> Range:
    if _span(dev, index) is None:
        return (0.0, 0.0)
    origins = origins if origins is not None else node_origins(dev)
    s = _scale(dev)
    start = _origin(origins, index) + _face_m(dev, index, "a2") * s
    return (start, start + _span_length_m(dev, index) * s)


def span_top_range(dev: "Development", index: int, origins: Optional[Sequence[float]] = None) -> Range:
    if _span(dev, index) is None:
        return (0.0, 0.0)
    origins = origins if origins is not None else node_origins(dev)
    s = _scale(dev)
    start = _origin(origins, index) + _face_m(dev, index, "b2") * s
    end = _origin(origins, index + 1) + _face_m(dev, index + 1, "b1") * s
    return (start, end)


def span_face_range(
    dev: "Development", index: int, side: "Side", origins: Optional[Sequence[float]] = None
) -> Range:
    if side == "top":
        return span_top_range(dev, index, origins)
    return span_bottom_range(dev, index, origins)


def node_marker_x(dev: "Development", index: int, origins: Optional[Sequence[float]] = None) -> float:
    if _node(dev, index) is None:
        return 0.0
    origins = origins if origins is not None else node_origins(dev)
    return _origin(origins, index) + _face_m(dev, index, "a2") * _scale(dev)


def node_label_x(dev: "Development", index: int, origins: Optional[Sequence[float]] = None) -> float:
    """Centro del nodo entre sus caras inferiores (posición de la etiqueta)."""
    if _node(dev, index) is None:
        return 0.0
    origins = origins if origins is not None else node_origins(dev)
    s = _scale(dev)
    left = _origin(origins, index) + _face_m(dev, index, "a1") * s
    right = _origin(origins, index) + _face_m(dev, index, "a2") * s
    return (left + right) / 2.0


def node_face_x(
    dev: "Development",
    index: int,
    side: "Side",
    end: "NodeEnd",
    origins: Optional[Sequence[float]] = None,
) -> float:
    """Cara del nodo: extremo 1 = ``a1``/``b1`` (izquierda), 2 = ``a2``/``b2``."""
    if _node(dev, index) is None:
        return 0.0
    origins = origins if origins is not None else node_origins(dev)
    prefix = "b" if side == "top" else "a"
    return _origin(origins, index) + _face_m(dev, index, f"{prefix}{end}") * _scale(dev)


def span_mid_x(dev: "Development", index: int, origins: Optional[Sequence[float]] = None) -> float:
    start, end = span_bottom_range(dev, index, origins)
    return (start + end) / 2.0


def span_index_at_x(dev: "Development", x: float, origins: Optional[Sequence[float]] = None) -> int:
    """Tramo cuyo intervalo entre orígenes contiene ``x``; -1 si ninguno."""
    origins = origins if origins is not None else node_origins(dev)
    for i in range(len(dev.spans)):
        a, b = _origin(origins, i), _origin(origins, i + 1)
        if min(a, b) - DEFAULT_TOLERANCE <= x <= max(a, b) + DEFAULT_TOLERANCE:
            return i
    return -1


def node_index_at_x(
    dev: "Development", x: float, origins: Optional[Sequence[float]] = None, tolerance: float = DEFAULT_TOLERANCE
) -> int:
    """Nodo cuyo ancho (entre ``a1`` y ``a2``) contiene ``x``; -1 si ninguno."""
    origins = origins if origins is not None else node_origins(dev)
    s = _scale(dev)
    for i in range(len(dev.nodes)):
        left = _origin(origins, i) + _face_m(dev, i, "a1") * s
        right = _origin(origins, i) + _face_m(dev, i, "a2") * s
        if min(left, right) - tolerance <= x <= max(left, right) + tolerance:
            return i
    return -1


def span_width_at_x(dev: "Development", x: float, origins: Optional[Sequence[float]] = None) -> float:
    """Ancho ``b`` (m) del tramo en ``x``; 0 fuera del desarrollo."""
    index = span_index_at_x(dev, x, origins)
    span = _span(dev, index)
    return span.b_m if span is not None else 0.0


def bar_level_y(dev: "Development", side: "Side", h_m: float) -> float:
    """Nivel del acero corrido: ``y0 + h - r`` arriba y ``y0 + r`` abajo."""
    s = _scale(dev)
    base = dev.y0 * s
    if side == "top":
        return base + (h_m - dev.cover_m) * s
    return base + dev.cover_m * s


__all__ = [
    "Range",
    "bar_level_y",
    "node_face_x",
    "node_index_at_x",
    "node_label_x",
    "node_marker_x",
    "node_origins",
    "span_bottom_range",
    "span_face_range",
    "span_index_at_x",
    "span_mid_x",
    "span_top_range",
    "span_width_at_x",
]
