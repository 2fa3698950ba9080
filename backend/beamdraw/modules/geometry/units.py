from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

Point = Tuple[float, float]
DEFAULT_TOLERANCE = 1e-6


def m_to_units(value_m: float, unit_scale: float) -> float:
    return value_m * unit_scale


def units_to_m(value: float, unit_scale: float) -> float:
    if not unit_scale:
        return value
    return value / unit_scale


def safe_float(value, default: float = 0.0) -> float:
    """Convierte a float finito; cualquier valor inválido retorna ``default``."""
    if isinstance(value, bool):
        return default
    try:
        number = float(str(value).strip().replace(",", ".")) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


_TRUE_STRINGS = {"true", "1", "si", "sí", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}


def as_bool(value) -> Optional[bool]:
    """Interpreta banderas escritas como bool, número o texto; ``None`` si no se reconoce."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return None


def snap_to(value: float, step: float) -> float:
    if step <= 0:
        return value
    return round(value / step) * step


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def within(value: float, low: float, high: float, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    return low - tolerance <= value <= high + tolerance


def offset(point: Point, dx: float = 0.0, dy: float = 0.0) -> Point:
    return (point[0] + dx, point[1] + dy)


def chain_points(points: Sequence[Point]) -> list[Point]:
    chained: list[Point] = []
    for index, point in enumerate(points):
        if index == 0 or point != chained[-1]:
            chained.append(point)
    return chained


def midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


def unique_sorted_numbers(values: Iterable[float], tolerance: float = DEFAULT_TOLERANCE) -> list[float]:
    """Ordena y elimina valores repetidos dentro de la tolerancia."""
    ordered = sorted(v for v in values if isinstance(v, (int, float)) and math.isfinite(v))
    unique: list[float] = []
    for value in ordered:
        if not unique or abs(value - unique[-1]) > tolerance:
            unique.append(value)
    return unique


@dataclass(slots=True)
class CoordinateSpace:
    unit_scale: float
    origin: Point = (0.0, 0.0)

    def to_m(self, value: float) -> float:
        return units_to_m(value, self.unit_scale)

    def from_m(self, value_m: float) -> float:
        return m_to_units(value_m, self.unit_scale)

    def point_from_m(self, x_m: float, y_m: float) -> Point:
        return (
            self.origin[0] + self.from_m(x_m),
            self.origin[1] + self.from_m(y_m),
        )

    def point_to_m(self, point: Point) -> Point:
        return (self.to_m(point[0]), self.to_m(point[1]))


__all__ = [
    "CoordinateSpace",
    "DEFAULT_TOLERANCE",
    "Point",
    "chain_points",
    "clamp",
    "as_bool",
    "m_to_units",
    "midpoint",
    "offset",
    "safe_float",
    "snap_to",
    "unique_sorted_numbers",
    "units_to_m",
    "within",
]
