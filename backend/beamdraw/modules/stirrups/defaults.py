"""Distribuciones ABCR por defecto según la altura de la viga."""

from __future__ import annotations

import math
from typing import Literal

from .notation import StirrupsABCR

DesignMode = Literal["seismic", "gravity"]

DEFAULT_STIRRUP_DIAMETER = "3/8"
DEFAULT_HEIGHT_M = 0.5


def _seismic(b_n: int, B_m: float, R_m: float) -> StirrupsABCR:
    return StirrupsABCR(A_m=0.05, b_n=b_n, B_m=B_m, c_n=0, C_m=0.0, R_m=R_m)


def _gravity(R_m: float) -> StirrupsABCR:
    return StirrupsABCR(A_m=0.05, b_n=1, B_m=0.0, c_n=0, C_m=0.0, R_m=R_m)


# (h_m, b_n sísmico, B_m sísmico, R_m)
_HEIGHT_ROWS: tuple[tuple[float, int, float, float], ...] = (
    (0.400, 9, 0.100, 0.20),
    (0.425, 9, 0.100, 0.20),
    (0.450, 9, 0.100, 0.20),
    (0.475, 9, 0.100, 0.20),
    (0.500, 9, 0.100, 0.22),
    (0.525, 9, 0.100, 0.225),
    (0.550, 9, 0.125, 0.25),
    (0.575, 10, 0.125, 0.25),
    (0.600, 10, 0.125, 0.25),
    (0.625, 10, 0.125, 0.25),
    (0.650, 9, 0.150, 0.30),
    (0.675, 10, 0.150, 0.30),
    (0.700, 10, 0.150, 0.30),
    (0.725, 10, 0.150, 0.30),
    (0.750, 9, 0.175, 0.35),
    (0.775, 10, 0.175, 0.35),
    (0.800, 10, 0.175, 0.35),
    (0.825, 10, 0.175, 0.35),
    (0.850, 10, 0.175, 0.35),
    (0.875, 11, 0.175, 0.35),
    (0.900, 11, 0.175, 0.35),
    (0.925, 11, 0.175, 0.35),
    (0.950, 12, 0.175, 0.35),
    (0.975, 12, 0.175, 0.35),
    (1.000, 12, 0.175, 0.35),
)

STIRRUPS_DEFAULTS_BY_H: tuple[tuple[float, StirrupsABCR, StirrupsABCR], ...] = tuple(
    (h_m, _seismic(b_n, B_m, R_m), _gravity(R_m)) for h_m, b_n, B_m, R_m in _HEIGHT_ROWS
)


def normalize_design_mode(value) -> DesignMode:
    text = str(value or "").strip().lower()
    if text in ("gravity", "gravedad"):
        return "gravity"
    return "seismic"


def pick_default_abcr_for_h(h_m: float, mode: DesignMode = "seismic") -> StirrupsABCR:
    """Elige la fila de altura más cercana; en empate gana la menor."""
    try:
        height = float(h_m)
    except (TypeError, ValueError):
        height = DEFAULT_HEIGHT_M
    if not math.isfinite(height):
        height = DEFAULT_HEIGHT_M

    best = STIRRUPS_DEFAULTS_BY_H[0]
    best_distance = math.inf
    for row in STIRRUPS_DEFAULTS_BY_H:
        distance = abs(row[0] - height)
        if distance < best_distance:
            best_distance = distance
            best = row
    _, seismic, gravity = best
    return gravity if normalize_design_mode(mode) == "gravity" else seismic


__all__ = [
    "DEFAULT_STIRRUP_DIAMETER",
    "DesignMode",
    "STIRRUPS_DEFAULTS_BY_H",
    "normalize_design_mode",
    "pick_default_abcr_for_h",
]
