"""Carga y transformaciones puras del desarrollo de viga."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Union

from beamdraw.core.config import settings
from beamdraw.modules.steel.kinds import NodeEnd, SteelKind
from beamdraw.schemas.development import Development, Node, NodeEndSteel, Span, SteelMeta

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[%(asctime)s] %(levelname)s %(name)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(settings.LOG_LEVEL)
logger.propagate = False

# Preferencia 01: Básico
BASIC_BAR = SteelMeta(qty=2, diameter="5/8")
HOOK_THRESHOLD_END_NODES_M = 0.80
CONTINUOUS_THRESHOLD_TOP_M = 1.80
CONTINUOUS_THRESHOLD_BOTTOM_M = 1.50
ANCHORAGE_TOP_M = 0.75
ANCHORAGE_BOTTOM_M = 0.60
DEFAULT_NODE_STEEL_LENGTH_M = 0.80


def normalize_development(raw: Union[Development, Mapping[str, Any], None]) -> Development:
    """Valida el documento una sola vez y reporta lo que se tuvo que completar."""
    if isinstance(raw, Development):
        return raw
    data = dict(raw or {})
    dev = Development.model_validate(data)

    raw_nodes = data.get("nodes")
    raw_count = len(raw_nodes) if isinstance(raw_nodes, list) else 0
    if raw_count != len(dev.nodes):
        logger.info(
            "Desarrollo %s: %s nodos recibidos, ajustados a %s para %s tramos",
            dev.name,
            raw_count,
            len(dev.nodes),
            len(dev.spans),
        )
    if data.get("name") and str(data["name"]).strip() != dev.name:
        logger.debug("Nombre '%s' recalculado como %s", data["name"], dev.name)
    return dev


def clone_span(span: Span) -> Span:
    return span.model_copy(deep=True)


def clone_node(node: Node) -> Node:
    return node.model_copy(deep=True)


def default_development(name: Optional[str] = None) -> Development:
    """Un tramo de 3.0 m entre dos nodos con los valores de configuración."""
    data: dict[str, Any] = {"spans": [Span().model_dump()], "nodes": [Node().model_dump(), Node().model_dump()]}
    if name:
        data["name"] = name
    return Development.model_validate(data)


def calculate_node_steel_length(node: Node, default_length_m: float = DEFAULT_NODE_STEEL_LENGTH_M) -> float:
    """Longitud de acero dentro del nodo según el tipo de apoyo."""
    if node.support_type == "columna_inferior":
        return 1.50
    if node.support_type == "columna_superior":
        return 1.80
    if node.support_type in ("placa", "apoyo_intermedio"):
        width = node.column_length_m
        return width if width > 0.01 else 0.80
    return default_length_m


@dataclass(slots=True)
class NodeSlot:
    node_index: int
    end: NodeEnd
    label: str


def build_node_slots(nodes: Sequence[Node]) -> List[NodeSlot]:
    """Etiquetas ``Nodo i.1``/``Nodo i.2``; los extremos tienen una sola."""
    slots: List[NodeSlot] = []
    last = len(nodes) - 1
    for i in range(len(nodes)):
        if i == 0:
            slots.append(NodeSlot(i, 2, f"Nodo {i + 1}.2"))
            continue
        if i == last:
            slots.append(NodeSlot(i, 1, f"Nodo {i + 1}.1"))
            continue
        slots.append(NodeSlot(i, 1, f"Nodo {i + 1}.1"))
        slots.append(NodeSlot(i, 2, f"Nodo {i + 1}.2"))
    return slots


@dataclass(slots=True)
class NodeSteelSetup:
    node_index: int
    is_start: bool
    is_end: bool
    column_length_m: float
    top: NodeEndSteel
    bottom: NodeEndSteel

    @property
    def is_intermediate(self) -> bool:
        return not (self.is_start or self.is_end)


def _development(length_m: float) -> NodeEndSteel:
    return NodeEndSteel(kind=SteelKind.DEVELOPMENT, to_face=False, anchorage_length_m=length_m)


def apply_basic_preference(nodes: Sequence[Node]) -> List[NodeSteelSetup]:
    """Tipo de terminación por nodo según posición y longitud de columna.

    Nodos extremos: gancho ajustado a la cara si la columna mide hasta
    0.80 m, si no anclaje de 0.75 m (arriba) / 0.60 m (abajo). Nodos
    internos: continuo hasta 1.80 m arriba y 1.50 m abajo, si no anclaje.
    """
    setups: List[NodeSteelSetup] = []
    last = len(nodes) - 1
    for i, node in enumerate(nodes):
        is_start, is_end = i == 0, i == last
        column = node.column_length_m
        if is_start or is_end:
            if column <= HOOK_THRESHOLD_END_NODES_M:
                top = NodeEndSteel(kind=SteelKind.HOOK, to_face=True)
                bottom = NodeEndSteel(kind=SteelKind.HOOK, to_face=True)
            else:
                top = _development(ANCHORAGE_TOP_M)
                bottom = _development(ANCHORAGE_BOTTOM_M)
        else:
            top = NodeEndSteel() if column <= CONTINUOUS_THRESHOLD_TOP_M else _development(ANCHORAGE_TOP_M)
            bottom = NodeEndSteel() if column <= CONTINUOUS_THRESHOLD_BOTTOM_M else _development(ANCHORAGE_BOTTOM_M)
        setups.append(NodeSteelSetup(i, is_start, is_end, column, top, bottom))
    return setups


def _preferred_end(current: NodeEndSteel, preferred: NodeEndSteel) -> NodeEndSteel:
    update: dict[str, Any] = {"kind": preferred.kind, "to_face": preferred.to_face}
    if preferred.anchorage_length_m:
        update["anchorage_length_m"] = preferred.anchorage_length_m
    return current.model_copy(update=update)


def apply_basic_preference_to_nodes(nodes: Sequence[Node]) -> List[Node]:
    """Copias de los nodos con la tabla de acero de la preferencia básica.

    Solo cambian tipo y ajuste a cara; una longitud de anclaje ya
    asignada se conserva salvo que la preferencia fije otra.
    """
    updated: List[Node] = []
    for node, setup in zip(nodes, apply_basic_preference(nodes)):
        clone = clone_node(node)
        for side, preferred in (("top", setup.top), ("bottom", setup.bottom)):
            pair = getattr(clone.steel, side)
            pair.end1 = _preferred_end(pair.end1, preferred)
            pair.end2 = _preferred_end(pair.end2, preferred)
        updated.append(clone)
        logger.debug(
            "Nodo %s: columna=%.2f m superior=%s inferior=%s",
            setup.node_index + 1,
            setup.column_length_m,
            setup.top.kind.value,
            setup.bottom.kind.value,
        )
    return updated


def apply_basic_preference_to_spans(spans: Sequence[Span]) -> List[Span]:
    """Copias de los tramos con acero corrido 2Ø5/8" arriba y abajo."""
    updated: List[Span] = []
    for span in spans:
        clone = clone_span(span)
        clone.steel_top = BASIC_BAR.model_copy()
        clone.steel_bottom = BASIC_BAR.model_copy()
        updated.append(clone)
    return updated


def apply_basic_preference_to_development(dev: Development) -> Development:
    return dev.model_copy(
        update={
            "spans": apply_basic_preference_to_spans(dev.spans),
            "nodes": apply_basic_preference_to_nodes(dev.nodes),
        }
    )


__all__ = [
    "NodeSlot",
    "NodeSteelSetup",
    "apply_basic_preference",
    "apply_basic_preference_to_development",
    "apply_basic_preference_to_nodes",
    "apply_basic_preference_to_spans",
    "build_node_slots",
    "calculate_node_steel_length",
    "clone_node",
    "clone_span",
    "default_development",
    "normalize_development",
]
