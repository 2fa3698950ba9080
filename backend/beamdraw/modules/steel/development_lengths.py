"""Longitudes de anclaje por diámetro comercial (fy=4200, f'c=210)."""

from __future__ import annotations

from dataclasses import dataclass

from beamdraw.modules.geometry.units import safe_float
from beamdraw.modules.steel.kinds import Side, SteelKind

FALLBACK_DIAMETER = "3/4"
STANDARD_DIAMETERS = ("3/8", "1/2", "5/8", "3/4", "1", "1-3/8")
METRIC_DIAMETERS = ("6mm", "8mm", "12mm")


@dataclass(frozen=True, slots=True)
class DevelopmentLengthRow:
    hook_cm: float
    anchor_bottom_cm: float
    anchor_top_cm: float

    @property
    def hook_m(self) -> float:
        return self.hook_cm / 100.0

    def anchor_m(self, side: Side) -> float:
        value_cm = self.anchor_top_cm if side == "top" else self.anchor_bottom_cm
        return value_cm / 100.0


DEVELOPMENT_LENGTHS_CM: dict[str, DevelopmentLengthRow] = {
    "1/2": DevelopmentLengthRow(28, 45, 60),
    "5/8": DevelopmentLengthRow(35, 60, 75),
    "3/4": DevelopmentLengthRow(42, 70, 90),
    "1": DevelopmentLengthRow(56, 115, 145),
    "1-3/8": DevelopmentLengthRow(77, 155, 200),
}


def normalize_diameter_key(diameter, default: str = "3/8") -> str:
    """Lleva un diámetro escrito a mano a su clave estándar ("3/4", "1-3/8", ...)."""
    text = str(diameter if diameter is not None else "").strip()
    text = text.replace('"', "").replace("'", "").replace("Ø", "").replace("ø", "").strip()
    if text.lower().endswith("in"):
        text = text[:-2].strip()
    if text in ("1 3/8", "1-3/8", "1 - 3/8"):
        return "1-3/8"
    if text in STANDARD_DIAMETERS:
        return text
    metric = text.lower().replace(" ", "")
    if metric in METRIC_DIAMETERS:
        return metric
    number = safe_float(text, default=float("nan"))
    if number != number:
        return default
    if number <= 0.375:
        return "3/8"
    if number <= 0.5:
        return "1/2"
    if number <= 0.625:
        return "5/8"
    if number <= 0.75:
        return "3/4"
    return "1"


def lookup_row(diameter) -> DevelopmentLengthRow:
    key = normalize_diameter_key(diameter, default=FALLBACK_DIAMETER)
    return DEVELOPMENT_LENGTHS_CM.get(key, DEVELOPMENT_LENGTHS_CM[FALLBACK_DIAMETER])


def anchorage_length_m(diameter, side: Side) -> float:
    """Longitud recta de anclaje usada por ganchos y desarrollos."""
    return lookup_row(diameter).anchor_m(side)


def hook_length_m(diameter) -> float:
    """Desarrollo mínimo con gancho estándar (columna ldg)."""
    return lookup_row(diameter).hook_m


def required_length_m(diameter, kind: SteelKind, side: Side) -> float:
    if kind is SteelKind.HOOK:
        return hook_length_m(diameter)
    if kind is SteelKind.DEVELOPMENT:
        return anchorage_length_m(diameter, side)
    return 0.0


__all__ = [
    "DEVELOPMENT_LENGTHS_CM",
    "DevelopmentLengthRow",
    "FALLBACK_DIAMETER",
    "METRIC_DIAMETERS",
    "STANDARD_DIAMETERS",
    "anchorage_length_m",
    "hook_length_m",
    "lookup_row",
    "normalize_diameter_key",
    "required_length_m",
]
