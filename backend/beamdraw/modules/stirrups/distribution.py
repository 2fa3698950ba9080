"""Posiciones de estribos por tramo a partir de la notación ABCR o antigua."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from beamdraw.modules.geometry.resolver import node_origins, span_bottom_range
from beamdraw.modules.geometry.units import DEFAULT_TOLERANCE

from .notation import StirrupToken, parse_abcr, parse_stirrups_spec, rest_spacing_from_spec

if TYPE_CHECKING:
    from beamdraw.schemas.development import Development, StirrupsSpec

MID_TAG = "mid"


@dataclass(slots=True)
class StirrupBlock:
    tag: str
    positions: List[float] = field(default_factory=list)


@dataclass(slots=True)
class SpanStirrups:
    span_index: int
    face_start: float
    face_end: float
    y_bottom: float
    y_top: float
    diameter: str
    left_spec: Optional[str] = None
    right_spec: Optional[str] = None
    left_blocks: List[StirrupBlock] = field(default_factory=list)
    right_blocks: List[StirrupBlock] = field(default_factory=list)

    @property
    def blocks(self) -> List[StirrupBlock]:
        return [*self.left_blocks, *self.right_blocks]

    @property
    def positions(self) -> List[float]:
        return sorted(x for block in self.blocks for x in block.positions)

    @property
    def count(self) -> int:
        return sum(len(block.positions) for block in self.blocks)


class _Cursor:
    """Avance desde la cara hacia ``end_u`` sin pasar el límite (tolerancia 1e-6)."""

    def __init__(self, face_u: float, end_u: float, direction: int) -> None:
        self.position = face_u
        self.end_u = end_u
        self.direction = 1 if direction >= 0 else -1

    def within(self, value: float) -> bool:
        if self.direction > 0:
            return value <= self.end_u + DEFAULT_TOLERANCE
        return value >= self.end_u - DEFAULT_TOLERANCE

    def run(self, start: float, spacing_u: float, count: int) -> List[float]:
        positions: List[float] = []
        for k in range(count):
            value = start + self.direction * spacing_u * k
            if not self.within(value):
                break
            positions.append(value)
            self.position = value
        return positions

    def fill(self, spacing_u: float) -> List[float]:
        """Bloque de resto: todas las posiciones que caben hasta ``end_u`` inclusive."""
        base = self.position + self.direction * spacing_u
        if not self.within(base):
            return []
        count = math.floor(abs(self.end_u - base) / spacing_u + 1e-12) + 1
        return self.run(base, spacing_u, count)


def _blocks_from_abcr(abcr, cursor: _Cursor, unit_scale: float) -> List[StirrupBlock]:
    blocks: List[StirrupBlock] = []

    b_positions: List[float] = []
    if abcr.A_m > 0 and abcr.b_n > 0:
        first = cursor.position + cursor.direction * abcr.A_m * unit_scale
        if cursor.within(first):
            b_positions = cursor.run(first, 0.0, 1)
            if abcr.b_n > 1 and abcr.B_m > 0:
                spacing = abcr.B_m * unit_scale
                b_positions += cursor.run(first + cursor.direction * spacing, spacing, abcr.b_n - 1)
    if b_positions:
        blocks.append(StirrupBlock("b", b_positions))

    # c y R se intentan aunque el bloque anterior no haya cabido
    if abcr.c_n > 0 and abcr.C_m > 0:
        spacing = abcr.C_m * unit_scale
        base = cursor.position + cursor.direction * spacing
        c_positions = cursor.run(base, spacing, abcr.c_n) if cursor.within(base) else []
        if c_positions:
            blocks.append(StirrupBlock("c", c_positions))

    if abcr.R_m > 0:
        r_positions = cursor.fill(abcr.R_m * unit_scale)
        if r_positions:
            blocks.append(StirrupBlock("r", r_positions))
    return blocks


def _blocks_from_tokens(tokens: Sequence[StirrupToken], cursor: _Cursor, unit_scale: float) -> List[StirrupBlock]:
    blocks: List[StirrupBlock] = []
    for index, token in enumerate(tokens):
        spacing = max(0.0, token.spacing_m) * unit_scale
        if spacing <= 0:
            continue
        base = cursor.position + cursor.direction * spacing
        if not cursor.within(base):
            # no cabe: se prueba el siguiente token
            continue
        if token.kind == "rest":
            positions = cursor.fill(spacing)
            if positions:
                blocks.append(StirrupBlock("r", positions))
            break
        positions = cursor.run(base, spacing, max(1, token.count))
        if positions:
            blocks.append(StirrupBlock(f"seg{index + 1}", positions))
    return blocks


def blocks_from_spec(spec_text, face_u: float, end_u: float, direction: int, unit_scale: float) -> List[StirrupBlock]:
    """Bloques etiquetados desde la cara ``face_u`` hacia ``end_u``.

    Con ABCR los bloques son ``b`` (el primero a ``A`` de la cara, incluido
    en el conteo de ``b``), ``c`` y ``r``. La gramática antigua genera un
    bloque ``seg<k>`` por token y ``r`` para el resto. Texto sin formato
    reconocible produce una lista vacía.
    """
    scale = unit_scale if unit_scale > 0 else 1.0
    cursor = _Cursor(face_u, end_u, direction)
    abcr = parse_abcr(spec_text)
    if abcr is not None:
        return _blocks_from_abcr(abcr, cursor, scale)
    return _blocks_from_tokens(parse_stirrups_spec(spec_text), cursor, scale)


def positions_from_tokens(
    tokens: Sequence[StirrupToken], face_u: float, end_u: float, direction: int, unit_scale: float
) -> List[float]:
    scale = unit_scale if unit_scale > 0 else 1.0
    blocks = _blocks_from_tokens(tokens, _Cursor(face_u, end_u, direction), scale)
    return [x for block in blocks for x in block.positions]


def _first_spec(*values: Optional[str]) -> str:
    for value in values:
        text = str(value or "").strip()
        if text:
            return text
    return ""


def resolve_end_specs(spec: "StirrupsSpec") -> Tuple[str, str]:
    """Patrones (izquierdo, derecho) según el tipo de caso."""
    left, center, right = spec.left_spec, spec.center_spec, spec.right_spec
    if spec.case_type == "asym_both":
        p_left = _first_spec(left, center)
        return p_left, _first_spec(right, center, p_left)
    if spec.case_type == "asym_one":
        special = _first_spec(left)
        rest = _first_spec(center, special)
        if spec.single_end == "right":
            return rest, special
        return special, rest
    p_left = _first_spec(left, center, right)
    return p_left, _first_spec(right, p_left)


def _gap_fill(
    left_blocks: List[StirrupBlock],
    right_blocks: List[StirrupBlock],
    left_spec: str,
    right_spec: str,
    unit_scale: float,
) -> Optional[StirrupBlock]:
    left_positions = [x for block in left_blocks for x in block.positions]
    right_positions = [x for block in right_blocks for x in block.positions]
    if not left_positions or not right_positions:
        return None
    left_last, right_first = max(left_positions), min(right_positions)

    rests = [r for r in (rest_spacing_from_spec(left_spec), rest_spacing_from_spec(right_spec)) if r]
    rest_u = min(rests) * unit_scale if rests else 0.0
    if rest_u <= 0 or right_first <= left_last + DEFAULT_TOLERANCE:
        return None
    if right_first - left_last > rest_u + DEFAULT_TOLERANCE:
        return StirrupBlock(MID_TAG, [(left_last + right_first) / 2.0])
    return None


def span_stirrup_groups(
    dev: "Development", span_index: int, origins: Optional[Sequence[float]] = None
) -> Optional[SpanStirrups]:
    """Distribución de estribos del tramo entre sus caras inferiores.

    Cada extremo llena hasta el centro de la luz; si el hueco central supera
    el menor espaciamiento de resto se agrega un estribo ``mid`` en el medio.
    """
    span = dev.span(span_index)
    if span is None:
        return None
    origins = origins if origins is not None else node_origins(dev)
    start, end = span_bottom_range(dev, span_index, origins)
    face_start, face_end = min(start, end), max(start, end)
    scale = dev.unit_scale
    result = SpanStirrups(
        span_index=span_index,
        face_start=face_start,
        face_end=face_end,
        y_bottom=(dev.y0 + dev.cover_m) * scale,
        y_top=(dev.y0 + span.h_m - dev.cover_m) * scale,
        diameter=span.stirrups.diameter,
    )
    if face_end - face_start <= DEFAULT_TOLERANCE:
        return result

    left_spec, right_spec = resolve_end_specs(span.stirrups)
    result.left_spec = left_spec or None
    result.right_spec = right_spec or None
    mid_u = (face_start + face_end) / 2.0
    if left_spec:
        result.left_blocks = blocks_from_spec(left_spec, face_start, mid_u, +1, scale)
    if right_spec:
        result.right_blocks = blocks_from_spec(right_spec, face_end, mid_u, -1, scale)

    extra = _gap_fill(result.left_blocks, result.right_blocks, left_spec, right_spec, scale)
    if extra is not None:
        result.left_blocks.append(extra)
    return result


def compute_stirrup_layout(dev: "Development", origins: Optional[Sequence[float]] = None) -> List[SpanStirrups]:
    origins = origins if origins is not None else node_origins(dev)
    groups = (span_stirrup_groups(dev, i, origins) for i in range(len(dev.spans)))
    return [group for group in groups if group is not None]


__all__ = [
    "MID_TAG",
    "SpanStirrups",
    "StirrupBlock",
    "blocks_from_spec",
    "compute_stirrup_layout",
    "positions_from_tokens",
    "resolve_end_specs",
    "span_stirrup_groups",
]
