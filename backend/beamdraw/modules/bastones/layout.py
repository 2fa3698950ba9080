"""Bastones por zona (Z1/Z2/Z3) de cada tramo y cara.

Con el rango de la cara ``[x0, x1]`` y longitudes ajustadas a 0.05 m:

* Z1 = ``[x0, min(x1, x0 + L3)]`` (junto al nodo izquierdo)
* Z3 = ``[max(x0, x1 - L3), x1]`` (junto al nodo derecho)
* Z2 = ``[x0 + L1, x1 - L2]`` (centro de la luz)

La línea 1 (exterior) ocupa toda la zona; la línea 2 (interior) va un
recubrimiento más hacia el eje y se recorta ``Lc`` en sus extremos libres.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Sequence

from beamdraw.modules.geometry.resolver import (
    Range,
    bar_level_y,
    node_face_x,
    node_origins,
    span_face_range,
)
from beamdraw.modules.geometry.units import DEFAULT_TOLERANCE, Point, chain_points, snap_to
from beamdraw.modules.steel.kinds import BASTON_LINES, SIDES, BastonLine, Side, SteelKind, ZoneName
from beamdraw.modules.steel.resolver import TerminalEndpoint, terminal_endpoint

if TYPE_CHECKING:
    from beamdraw.schemas.development import BastonCfg, Development

ZONE_SNAP_M = 0.05
MAX_LINE_QTY = 3


@dataclass(slots=True)
class BastonSegment:
    span_index: int
    side: Side
    zone: ZoneName
    line: BastonLine
    x_start: float
    x_end: float
    y: float
    qty: int
    diameter: str

    @property
    def length(self) -> float:
        return self.x_end - self.x_start


@dataclass(slots=True)
class BastonTermination:
    span_index: int
    node_index: int
    side: Side
    zone: ZoneName
    line: BastonLine
    endpoint: TerminalEndpoint


@dataclass(slots=True)
class BastonConnector:
    node_index: int
    side: Side
    line: BastonLine
    points: list[Point]


@dataclass(slots=True)
class BastonLayout:
    segments: list[BastonSegment] = field(default_factory=list)
    terminations: list[BastonTermination] = field(default_factory=list)
    connectors: list[BastonConnector] = field(default_factory=list)


def snap_05(value_m: float) -> float:
    return snap_to(value_m, ZONE_SNAP_M)


def resolve_zone_length_m(cfg: "BastonCfg", field_name: str, span_length_m: float) -> float:
    """Longitud de zona en metros: valor propio positivo o L/3 (L3) y L/5 (L1, L2)."""
    length = max(0.0, span_length_m)
    fallback = length / 3.0 if field_name == "L3_m" else length / 5.0
    value = getattr(cfg, field_name, None)
    chosen = value if value is not None and value > 0 else fallback
    return min(length, max(0.0, snap_05(chosen)))


def zone_extent(face_range: Range, zone: ZoneName, cfg: "BastonCfg", span_length_m: float, unit_scale: float) -> Range:
    xa, xb = min(face_range), max(face_range)
    if zone == "z1":
        return (xa, min(xb, xa + resolve_zone_length_m(cfg, "L3_m", span_length_m) * unit_scale))
    if zone == "z3":
        return (max(xa, xb - resolve_zone_length_m(cfg, "L3_m", span_length_m) * unit_scale), xb)
    return (
        xa + resolve_zone_length_m(cfg, "L1_m", span_length_m) * unit_scale,
        xb - resolve_zone_length_m(cfg, "L2_m", span_length_m) * unit_scale,
    )


def line_extent(zone_range: Range, zone: ZoneName, line: BastonLine, cutback: float) -> Range:
    """La línea interior se recorta en el extremo libre de la zona (ambos en Z2)."""
    x0, x1 = zone_range
    if line == 1:
        return (x0, x1)
    if zone == "z1":
        return (x0, x1 - cutback)
    if zone == "z3":
        return (x0 + cutback, x1)
    return (x0 + cutback, x1 - cutback)


def baston_level_y(dev: "Development", side: Side, h_m: float, line: BastonLine) -> float:
    """Cada línea se separa un recubrimiento más del acero corrido hacia el eje."""
    offset = dev.cover_m * dev.unit_scale * line
    base = bar_level_y(dev, side, h_m)
    return base - offset if side == "top" else base + offset


def baston_line_extent(
    dev: "Development",
    span_index: int,
    side: Side,
    zone: ZoneName,
    line: BastonLine,
    origins: Optional[Sequence[float]] = None,
) -> Optional[Range]:
    """Extensión de una línea de bastón habilitada, o ``None`` si no existe."""
    span = dev.span(span_index)
    if span is None:
        return None
    cfg = span.bastones.zone(side, zone)
    if not cfg.line_enabled(line) or cfg.line_qty(line) <= 0:
        return None
    origins = origins if origins is not None else node_origins(dev)
    face = span_face_range(dev, span_index, side, origins)
    extent = zone_extent(face, zone, cfg, span.L_m, dev.unit_scale)
    if extent[1] <= extent[0] + DEFAULT_TOLERANCE:
        return None
    x0, x1 = line_extent(extent, zone, line, dev.cutback_Lc_m * dev.unit_scale)
    if x1 <= x0 + DEFAULT_TOLERANCE:
        return None
    return (x0, x1)


def _termination(
    dev: "Development",
    span_index: int,
    side: Side,
    zone: ZoneName,
    segment: BastonSegment,
    origins: Sequence[float],
) -> Optional[BastonTermination]:
    # Z1 termina en el nodo izquierdo (extremo 2, hacia -X); Z3 en el derecho (extremo 1, hacia +X)
    if zone == "z1":
        node_index, end, direction, start_x, far_end = span_index, 2, -1, segment.x_start, 1
    else:
        node_index, end, direction, start_x, far_end = span_index + 1, 1, +1, segment.x_end, 2
    node = dev.node(node_index)
    if node is None:
        return None
    steel = node.baston_end(side, end, segment.line)
    if steel.kind is SteelKind.CONTINUOUS:
        return None
    face_x = node_face_x(dev, node_index, side, far_end, origins) if steel.to_face else None
    endpoint = terminal_endpoint(
        start_x,
        segment.y,
        direction,
        steel.kind,
        segment.diameter,
        side,
        unit_scale=dev.unit_scale,
        to_face=steel.to_face,
        opposite_face_x=face_x,
        cover_m=dev.cover_m,
        override_m=steel.anchorage_length_m,
        hook_leg_m=dev.hook_leg_m,
    )
    return BastonTermination(span_index, node_index, side, zone, segment.line, endpoint)


def layout_span_bastones(
    dev: "Development", span_index: int, origins: Optional[Sequence[float]] = None
) -> tuple[list[BastonSegment], list[BastonTermination]]:
    span = dev.span(span_index)
    if span is None or span.L_m <= 0:
        return [], []
    origins = origins if origins is not None else node_origins(dev)
    segments: list[BastonSegment] = []
    terminations: list[BastonTermination] = []
    for side in SIDES:
        for zone in ("z1", "z2", "z3"):
            cfg = span.bastones.zone(side, zone)
            for line in BASTON_LINES:
                extent = baston_line_extent(dev, span_index, side, zone, line, origins)
                if extent is None:
                    continue
                segment = BastonSegment(
                    span_index=span_index,
                    side=side,
                    zone=zone,
                    line=line,
                    x_start=extent[0],
                    x_end=extent[1],
                    y=baston_level_y(dev, side, span.h_m, line),
                    qty=max(1, min(MAX_LINE_QTY, cfg.line_qty(line))),
                    diameter=cfg.line_diameter(line),
                )
                segments.append(segment)
                if zone == "z2":
                    continue
                termination = _termination(dev, span_index, side, zone, segment, origins)
                if termination is not None:
                    terminations.append(termination)
    return segments, terminations


def _inner_line_fits(dev: "Development", span_index: int, side: Side, zone: ZoneName) -> bool:
    span = dev.span(span_index)
    if span is None:
        return False
    cfg = span.bastones.zone(side, zone)
    return resolve_zone_length_m(cfg, "L3_m", span.L_m) > dev.cutback_Lc_m + DEFAULT_TOLERANCE


def node_connectors(dev: "Development", origins: Optional[Sequence[float]] = None) -> list[BastonConnector]:
    """Une Z3 del tramo izquierdo con Z1 del derecho en nodos internos continuos."""
    origins = origins if origins is not None else node_origins(dev)
    connectors: list[BastonConnector] = []
    for i in range(1, len(dev.nodes) - 1):
        node = dev.nodes[i]
        left, right = dev.span(i - 1), dev.span(i)
        if left is None or right is None:
            continue
        for line in BASTON_LINES:
            for side in SIDES:
                kinds = (node.baston_end(side, 1, line).kind, node.baston_end(side, 2, line).kind)
                if kinds != (SteelKind.CONTINUOUS, SteelKind.CONTINUOUS):
                    continue
                if not (
                    left.bastones.zone(side, "z3").line_enabled(line)
                    and right.bastones.zone(side, "z1").line_enabled(line)
                ):
                    continue
                if line == 2 and not (
                    _inner_line_fits(dev, i - 1, side, "z3") and _inner_line_fits(dev, i, side, "z1")
                ):
                    continue

                x_left = node_face_x(dev, i, side, 1, origins)
                x_right = node_face_x(dev, i, side, 2, origins)
                y_left = baston_level_y(dev, side, left.h_m, line)
                y_right = baston_level_y(dev, side, right.h_m, line)
                if side == "top":
                    y_mid = max(y_left, y_right)
                    points = chain_points([(x_left, y_left), (x_left, y_mid), (x_right, y_mid), (x_right, y_right)])
                else:
                    points = [(x_left, y_left), (x_right, y_left)]
                connectors.append(BastonConnector(node_index=i, side=side, line=line, points=points))
    return connectors


def compute_baston_layout(dev: "Development", origins: Optional[Sequence[float]] = None) -> BastonLayout:
    origins = origins if origins is not None else node_origins(dev)
    layout = BastonLayout()
    for i in range(len(dev.spans)):
        segments, terminations = layout_span_bastones(dev, i, origins)
        layout.segments.extend(segments)
        layout.terminations.extend(terminations)
    layout.connectors.extend(node_connectors(dev, origins))
    return layout


__all__ = [
    "BastonConnector",
    "BastonLayout",
    "BastonSegment",
    "BastonTermination",
    "ZONE_SNAP_M",
    "baston_level_y",
    "baston_line_extent",
    "compute_baston_layout",
    "layout_span_bastones",
    "line_extent",
    "node_connectors",
    "resolve_zone_length_m",
    "snap_05",
    "zone_extent",
]
