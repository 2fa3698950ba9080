"""Acero corrido: tramos por cara, terminaciones en nodos y conectores."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from beamdraw.modules.geometry.resolver import bar_level_y, node_face_x, node_origins, span_face_range
from beamdraw.modules.geometry.units import Point, chain_points
from beamdraw.modules.steel.kinds import SIDES, NodeEnd, Side, SteelKind
from beamdraw.modules.steel.resolver import TerminalEndpoint, terminal_endpoint
from beamdraw.schemas.development import Development


@dataclass(slots=True)
class LongitudinalRun:
    span_index: int
    side: Side
    x_start: float
    x_end: float
    y: float
    qty: int
    diameter: str


@dataclass(slots=True)
class NodeTerminal:
    node_index: int
    side: Side
    end: NodeEnd
    span_index: int
    diameter: str
    endpoint: TerminalEndpoint

    @property
    def kind(self) -> SteelKind:
        return self.endpoint.kind


@dataclass(slots=True)
class LongitudinalConnector:
    node_index: int
    side: Side
    points: List[Point]


def longitudinal_runs(dev: Development, origins: Optional[Sequence[float]] = None) -> List[LongitudinalRun]:
    origins = origins if origins is not None else node_origins(dev)
    runs: List[LongitudinalRun] = []
    for i, span in enumerate(dev.spans):
        for side in SIDES:
            x_start, x_end = span_face_range(dev, i, side, origins)
            steel = span.steel(side)
            runs.append(
                LongitudinalRun(
                    span_index=i,
                    side=side,
                    x_start=x_start,
                    x_end=x_end,
                    y=bar_level_y(dev, side, span.h_m),
                    qty=steel.qty,
                    diameter=steel.diameter,
                )
            )
    return runs


def _node_ends(dev: Development, node_index: int) -> List[NodeEnd]:
    """El primer nodo solo tiene extremo 2 y el último solo extremo 1."""
    last = len(dev.nodes) - 1
    if last <= 0:
        return []
    if node_index == 0:
        return [2]
    if node_index == last:
        return [1]
    return [1, 2]


def node_terminal(
    dev: Development,
    node_index: int,
    side: Side,
    end: NodeEnd,
    origins: Optional[Sequence[float]] = None,
) -> Optional[NodeTerminal]:
    """Terminación del acero corrido en un extremo de nodo.

    El extremo 1 recibe la barra del tramo izquierdo y avanza hacia +X desde
    la cara izquierda del nodo; el extremo 2 recibe la del tramo derecho y
    avanza hacia -X. La cara opuesta del mismo nodo es el límite de ``to_face``.
    """
    node = dev.node(node_index)
    span_index = node_index - 1 if end == 1 else node_index
    span = dev.span(span_index)
    if node is None or span is None:
        return None
    origins = origins if origins is not None else node_origins(dev)

    steel = node.steel_end(side, end)
    bar = span.steel(side)
    direction = +1 if end == 1 else -1
    far_end: NodeEnd = 2 if end == 1 else 1
    start_x = node_face_x(dev, node_index, side, end, origins)
    face_x = node_face_x(dev, node_index, side, far_end, origins) if steel.to_face else None
    endpoint = terminal_endpoint(
        start_x,
        bar_level_y(dev, side, span.h_m),
        direction,
        steel.kind,
        bar.diameter,
        side,
        unit_scale=dev.unit_scale,
        to_face=steel.to_face,
        opposite_face_x=face_x,
        cover_m=dev.cover_m,
        override_m=steel.anchorage_length_m,
        hook_leg_m=dev.hook_leg_m,
    )
    return NodeTerminal(
        node_index=node_index,
        side=side,
        end=end,
        span_index=span_index,
        diameter=bar.diameter,
        endpoint=endpoint,
    )


def resolve_node_terminals(dev: Development, origins: Optional[Sequence[float]] = None) -> List[NodeTerminal]:
    origins = origins if origins is not None else node_origins(dev)
    terminals: List[NodeTerminal] = []
    for i in range(len(dev.nodes)):
        for side in SIDES:
            for end in _node_ends(dev, i):
                terminal = node_terminal(dev, i, side, end, origins)
                if terminal is not None:
                    terminals.append(terminal)
    return terminals


def longitudinal_connectors(
    dev: Development, origins: Optional[Sequence[float]] = None
) -> List[LongitudinalConnector]:
    """Cruce de nodos internos cuyos dos extremos son continuos.

    Arriba el conector sube al mayor de los dos niveles dentro del nodo;
    abajo ambos tramos comparten nivel y la unión es recta.
    """
    origins = origins if origins is not None else node_origins(dev)
    connectors: List[LongitudinalConnector] = []
    for i in range(1, len(dev.nodes) - 1):
        node = dev.nodes[i]
        left, right = dev.span(i - 1), dev.span(i)
        if left is None or right is None:
            continue
        for side in SIDES:
            if node.steel_end(side, 1).kind is not SteelKind.CONTINUOUS:
                continue
            if node.steel_end(side, 2).kind is not SteelKind.CONTINUOUS:
                continue
            x_left = node_face_x(dev, i, side, 1, origins)
            x_right = node_face_x(dev, i, side, 2, origins)
            y_left = bar_level_y(dev, side, left.h_m)
            y_right = bar_level_y(dev, side, right.h_m)
            if side == "top":
                y_mid = max(y_left, y_right)
                points = chain_points([(x_left, y_left), (x_left, y_mid), (x_right, y_mid), (x_right, y_right)])
            else:
                points = [(x_left, y_left), (x_right, y_left)]
            connectors.append(LongitudinalConnector(node_index=i, side=side, points=points))
    return connectors


__all__ = [
    "LongitudinalConnector",
    "LongitudinalRun",
    "NodeTerminal",
    "longitudinal_connectors",
    "longitudinal_runs",
    "node_terminal",
    "resolve_node_terminals",
]
