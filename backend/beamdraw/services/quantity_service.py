"""Cuantías por sección: As instalada vs. requerida y límites ρ mín/máx."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional, Sequence

from beamdraw.core.config import settings
from beamdraw.modules.bastones.layout import baston_line_extent
from beamdraw.modules.geometry.resolver import node_origins, span_top_range
from beamdraw.modules.geometry.units import DEFAULT_TOLERANCE, units_to_m
from beamdraw.modules.steel.kinds import BASTON_LINES, SIDES, Side
from beamdraw.schemas.development import Development, Span

QuantityCutMode = Literal["zones", "section"]

REBAR_AREA_CM2: dict[str, float] = {
    "6mm": 0.28,
    "8mm": 0.50,
    "3/8": 0.713,
    "12mm": 1.13,
    "1/2": 1.267,
    "5/8": 1.979,
    "3/4": 2.85,
    "1": 5.067,
    "1-3/8": 9.583,
}


def bar_area_cm2(diameter: Optional[str]) -> float:
    return REBAR_AREA_CM2.get(str(diameter or ""), 0.0)


@dataclass(frozen=True, slots=True)
class QuantityLimits:
    """Límites de cuantía para f'c y fy en kgf/cm²."""

    fc: float = 210.0
    fy: float = 4200.0

    @classmethod
    def from_settings(cls) -> "QuantityLimits":
        return cls(fc=settings.QUANTITY_FC_KGF_CM2, fy=settings.QUANTITY_FY_KGF_CM2)

    @property
    def beta1(self) -> float:
        if self.fc <= 280:
            return 0.85
        return max(0.65, 0.85 - 0.05 * (self.fc - 280) / 70)

    @property
    def rho_balanced(self) -> float:
        return 0.85 * self.beta1 * (self.fc / self.fy) * (6000 / (6000 + self.fy))

    @property
    def rho_min(self) -> float:
        return 14 / self.fy

    @property
    def rho_max(self) -> float:
        return 0.75 * self.rho_balanced


@dataclass(slots=True)
class SectionQuantities:
    span_index: int
    x: float
    x_m: float
    b_cm: float
    d_cm: float
    As_min: float
    As_max: float
    rho_min: float
    rho_max: float
    As_installed_top: float
    As_installed_bottom: float
    As_required_top: float
    As_required_bottom: float
    rho_installed_top: float
    rho_installed_bottom: float
    rho_required_top: float
    rho_required_bottom: float
    top_ok: bool
    bottom_ok: bool
    margin_top: float
    margin_bottom: float
    margin_rho_top: float
    margin_rho_bottom: float


def installed_area_cm2(
    dev: Development,
    span_index: int,
    side: Side,
    x: float,
    origins: Optional[Sequence[float]] = None,
) -> float:
    """Acero corrido más cada línea de bastón cuya extensión contiene ``x``."""
    span = dev.span(span_index)
    if span is None:
        return 0.0
    steel = span.steel(side)
    total = max(0, steel.qty) * bar_area_cm2(steel.diameter)
    for zone in ("z1", "z2", "z3"):
        cfg = span.bastones.zone(side, zone)
        for line in BASTON_LINES:
            extent = baston_line_extent(dev, span_index, side, zone, line, origins)
            if extent is None:
                continue
            x0, x1 = extent
            if x0 - DEFAULT_TOLERANCE <= x <= x1 + DEFAULT_TOLERANCE:
                total += cfg.line_qty(line) * bar_area_cm2(cfg.line_diameter(line))
    return total


def _ok(rho: float, rho_required: float, limits: QuantityLimits) -> bool:
    return (
        rho >= limits.rho_min - DEFAULT_TOLERANCE
        and rho <= limits.rho_max + DEFAULT_TOLERANCE
        and rho >= rho_required - DEFAULT_TOLERANCE
    )


def compute_section_quantities(
    dev: Development,
    span_index: int,
    x: float,
    cover_m: Optional[float] = None,
    limits: Optional[QuantityLimits] = None,
    origins: Optional[Sequence[float]] = None,
) -> Optional[SectionQuantities]:
    """Cuantías del tramo en el corte ``x`` (unidades de dibujo).

    ``d = h - recubrimiento``; sin ``b·d`` positivo no hay sección y se
    retorna ``None``. La As requerida es la del tramo o, si falta, As mín.
    """
    span: Optional[Span] = dev.span(span_index)
    if span is None:
        return None
    limits = limits or QuantityLimits.from_settings()
    cover = dev.cover_m if cover_m is None else max(0.0, cover_m)
    b_cm = max(0.0, span.b_m * 100)
    d_cm = max(0.0, (span.h_m - cover) * 100)
    bd = b_cm * d_cm
    if bd <= 0:
        return None
    origins = origins if origins is not None else node_origins(dev)

    As_min = limits.rho_min * bd
    As_max = limits.rho_max * bd
    installed = {side: installed_area_cm2(dev, span_index, side, x, origins) for side in SIDES}
    required = {}
    for side in SIDES:
        explicit = span.required_area_cm2(side)
        required[side] = explicit if explicit is not None else As_min
    rho = {side: installed[side] / bd for side in SIDES}
    rho_required = {side: required[side] / bd for side in SIDES}

    return SectionQuantities(
        span_index=span_index,
        x=x,
        x_m=units_to_m(x, dev.unit_scale),
        b_cm=b_cm,
        d_cm=d_cm,
        As_min=As_min,
        As_max=As_max,
        rho_min=limits.rho_min,
        rho_max=limits.rho_max,
        As_installed_top=installed["top"],
        As_installed_bottom=installed["bottom"],
        As_required_top=required["top"],
        As_required_bottom=required["bottom"],
        rho_installed_top=rho["top"],
        rho_installed_bottom=rho["bottom"],
        rho_required_top=rho_required["top"],
        rho_required_bottom=rho_required["bottom"],
        top_ok=_ok(rho["top"], rho_required["top"], limits),
        bottom_ok=_ok(rho["bottom"], rho_required["bottom"], limits),
        margin_top=installed["top"] - required["top"],
        margin_bottom=installed["bottom"] - required["bottom"],
        margin_rho_top=rho["top"] - rho_required["top"],
        margin_rho_bottom=rho["bottom"] - rho_required["bottom"],
    )


def section_span_index_at_x(dev: Development, x: float, origins: Optional[Sequence[float]] = None) -> int:
    """Tramo entre orígenes que contiene ``x``; el primero si ninguno."""
    origins = origins if origins is not None else node_origins(dev)
    for i in range(len(dev.spans)):
        a, b = origins[i], origins[i + 1]
        if min(a, b) - DEFAULT_TOLERANCE <= x <= max(a, b) + DEFAULT_TOLERANCE:
            return i
    return 0


def build_quantity_cuts(
    dev: Development,
    mode: QuantityCutMode = "section",
    active_x: float = 0.0,
    origins: Optional[Sequence[float]] = None,
) -> List[float]:
    """Cortes en unidades de dibujo.

    ``section`` usa solo el corte activo; ``zones`` toma L/6, L/2 y 5L/6 de
    la cara superior de cada tramo.
    """
    if mode == "section" or not dev.spans:
        return [active_x]
    origins = origins if origins is not None else node_origins(dev)
    cuts: List[float] = []
    for i in range(len(dev.spans)):
        start, end = span_top_range(dev, i, origins)
        xa, xb = min(start, end), max(start, end)
        length = xb - xa
        if length <= DEFAULT_TOLERANCE:
            continue
        for value in (xa + length / 6, xa + length / 2, xb - length / 6):
            rounded = round(value * 1e6) / 1e6
            if rounded not in cuts:
                cuts.append(rounded)
    return cuts


def compute_quantity_cuts(
    dev: Development,
    cuts: Sequence[float],
    limits: Optional[QuantityLimits] = None,
    origins: Optional[Sequence[float]] = None,
) -> List[SectionQuantities]:
    origins = origins if origins is not None else node_origins(dev)
    limits = limits or QuantityLimits.from_settings()
    records: List[SectionQuantities] = []
    for x in cuts:
        span_index = section_span_index_at_x(dev, x, origins)
        record = compute_section_quantities(dev, span_index, x, limits=limits, origins=origins)
        if record is not None:
            records.append(record)
    return records


def build_quantity_export_payload(
    dev: Development,
    mode: QuantityCutMode = "section",
    active_x: float = 0.0,
    limits: Optional[QuantityLimits] = None,
) -> dict:
    """Cortes con sus cuantías y ``x_m`` en metros para la capa de exportación."""
    origins = node_origins(dev)
    records = compute_quantity_cuts(dev, build_quantity_cuts(dev, mode, active_x, origins), limits, origins)
    return {
        "enabled": True,
        "mode": mode,
        "shell_only": True,
        "offset_y_m": 3.0,
        "include_as_min_max": True,
        "cuts": [
            {
                "x": record.x,
                "span_index": record.span_index,
                "x_m": record.x_m,
                "As_min": record.As_min,
                "As_max": record.As_max,
                "As_installed_top": record.As_installed_top,
                "As_installed_bottom": record.As_installed_bottom,
                "As_required_top": record.As_required_top,
                "As_required_bottom": record.As_required_bottom,
                "rho_installed_top": record.rho_installed_top,
                "rho_installed_bottom": record.rho_installed_bottom,
                "rho_required_top": record.rho_required_top,
                "rho_required_bottom": record.rho_required_bottom,
                "top_ok": record.top_ok,
                "bottom_ok": record.bottom_ok,
                "margin_top": record.margin_top,
                "margin_bottom": record.margin_bottom,
            }
            for record in records
        ],
    }


__all__ = [
    "QuantityCutMode",
    "QuantityLimits",
    "REBAR_AREA_CM2",
    "SectionQuantities",
    "bar_area_cm2",
    "build_quantity_cuts",
    "build_quantity_export_payload",
    "compute_quantity_cuts",
    "compute_section_quantities",
    "installed_area_cm2",
    "section_span_index_at_x",
]
