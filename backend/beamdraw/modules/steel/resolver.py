"""Resolución del tipo de terminación de acero en nodos y su punto final."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from beamdraw.modules.geometry.units import DEFAULT_TOLERANCE, Point, as_bool, clamp, safe_float
from beamdraw.modules.steel.development_lengths import anchorage_length_m, required_length_m
from beamdraw.modules.steel.kinds import BastonLine, NodeEnd, Side, SteelKind


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _lookup(raw: Mapping[str, Any], key: str) -> Any:
    if key in raw:
        return raw[key]
    return raw.get(_camel(key))


def _positive(value: Any) -> Optional[float]:
    number = safe_float(value, default=0.0)
    return number if number > 0 else None


def legacy_kind(raw: Mapping[str, Any], side: Side) -> SteelKind:
    """Banderas antiguas por cara: gancho > desarrollo > continuo."""
    if as_bool(_lookup(raw, f"steel_{side}_hook")):
        return SteelKind.HOOK
    if as_bool(_lookup(raw, f"steel_{side}_development")):
        return SteelKind.DEVELOPMENT
    return SteelKind.CONTINUOUS


def resolve_kind(raw: Mapping[str, Any], side: Side, end: NodeEnd) -> SteelKind:
    explicit = SteelKind.parse(_lookup(raw, f"steel_{side}_{end}_kind"))
    if explicit is not None:
        return explicit
    return legacy_kind(raw, side)


def resolve_to_face(raw: Mapping[str, Any], side: Side, end: NodeEnd) -> bool:
    return bool(as_bool(_lookup(raw, f"steel_{side}_{end}_to_face")))


def resolve_anchorage_override(raw: Mapping[str, Any], side: Side, end: NodeEnd) -> Optional[float]:
    return _positive(_lookup(raw, f"steel_{side}_{end}_anchorage_length"))


def resolve_baston_kind(
    raw: Mapping[str, Any],
    side: Side,
    end: NodeEnd,
    line: BastonLine,
    default: SteelKind = SteelKind.HOOK,
) -> SteelKind:
    for key in (f"baston_{side}_{end}_l{line}_kind", f"baston_{side}_{end}_kind"):
        kind = SteelKind.parse(_lookup(raw, key))
        if kind is not None:
            return kind
    return default


def resolve_baston_to_face(raw: Mapping[str, Any], side: Side, end: NodeEnd, line: BastonLine) -> bool:
    for key in (f"baston_{side}_{end}_l{line}_to_face", f"baston_{side}_{end}_to_face"):
        flag = as_bool(_lookup(raw, key))
        if flag is not None:
            return flag
    return False


def resolve_baston_anchorage_override(
    raw: Mapping[str, Any], side: Side, end: NodeEnd, line: BastonLine
) -> Optional[float]:
    for key in (f"baston_{side}_{end}_l{line}_anchorage_length", f"baston_{side}_{end}_anchorage_length"):
        value = _positive(_lookup(raw, key))
        if value is not None:
            return value
    return None


@dataclass(slots=True)
class TerminalEndpoint:
    """Tramo recto (y pata de gancho) con que termina una barra en un nodo."""

    kind: SteelKind
    side: Side
    start_x: float
    end_x: float
    y: float
    straight_length_m: float
    required_length_m: float
    to_face: bool = False
    hook_leg_end: Optional[Point] = None

    @property
    def development_ok(self) -> bool:
        return self.straight_length_m + DEFAULT_TOLERANCE >= self.required_length_m

    @property
    def points(self) -> list[Point]:
        points: list[Point] = [(self.start_x, self.y)]
        if self.kind is SteelKind.CONTINUOUS:
            return points
        points.append((self.end_x, self.y))
        if self.hook_leg_end is not None:
            points.append(self.hook_leg_end)
        return points


def terminal_endpoint(
    start_x: float,
    y: float,
    direction: int,
    kind: SteelKind,
    diameter: str,
    side: Side,
    *,
    unit_scale: float,
    to_face: bool = False,
    opposite_face_x: Optional[float] = None,
    cover_m: float = 0.0,
    override_m: Optional[float] = None,
    hook_leg_m: float = 0.0,
) -> TerminalEndpoint:
    """Calcula el punto final de una barra que arranca en ``start_x``.

    Con ``to_face`` el tramo llega hasta la cara opuesta del nodo menos el
    recubrimiento, sin salirse del intervalo [inicio, cara]. En otro caso
    avanza la longitud de anclaje de la tabla (o la personalizada si es
    positiva). Los ganchos agregan una pata vertical de ``hook_leg_m``:
    hacia arriba en barras inferiores y hacia abajo en superiores.
    """
    direction = 1 if direction >= 0 else -1
    if kind is SteelKind.CONTINUOUS:
        return TerminalEndpoint(
            kind=kind,
            side=side,
            start_x=start_x,
            end_x=start_x,
            y=y,
            straight_length_m=0.0,
            required_length_m=0.0,
        )

    scale = unit_scale if unit_scale > 0 else 1.0
    clipped = bool(to_face and opposite_face_x is not None)
    if clipped:
        target = opposite_face_x - direction * cover_m * scale
        low, high = min(start_x, opposite_face_x), max(start_x, opposite_face_x)
        end_x = clamp(target, low, high)
    else:
        length_m = override_m if override_m is not None and override_m > 0 else anchorage_length_m(diameter, side)
        end_x = start_x + direction * length_m * scale

    leg_end: Optional[Point] = None
    if kind is SteelKind.HOOK:
        leg = hook_leg_m * scale
        leg_end = (end_x, y + leg if side == "bottom" else y - leg)

    return TerminalEndpoint(
        kind=kind,
        side=side,
        start_x=start_x,
        end_x=end_x,
        y=y,
        straight_length_m=abs(end_x - start_x) / scale,
        required_length_m=required_length_m(diameter, kind, side),
        to_face=clipped,
        hook_leg_end=leg_end,
    )


__all__ = [
    "TerminalEndpoint",
    "legacy_kind",
    "resolve_anchorage_override",
    "resolve_baston_anchorage_override",
    "resolve_baston_kind",
    "resolve_baston_to_face",
    "resolve_kind",
    "resolve_to_face",
    "terminal_endpoint",
]
