"""Esquemas del desarrollo de viga (tramos + nodos).

La normalización ocurre una sola vez al validar: los escalares mal escritos
toman su valor por defecto, las claves antiguas se convierten y las
terminaciones de acero por nodo quedan en una tabla explícita indexada por
(cara, extremo[, línea]).
"""

from __future__ import annotations

import math
import re
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from beamdraw.core.config import settings
from beamdraw.modules.geometry.units import as_bool, safe_float
from beamdraw.modules.steel import resolver
from beamdraw.modules.steel.development_lengths import normalize_diameter_key
from beamdraw.modules.steel.kinds import (
    BASTON_LINES,
    NODE_ENDS,
    SIDES,
    BastonLine,
    NodeEnd,
    Side,
    SteelKind,
    ZoneName,
)
from beamdraw.modules.stirrups.defaults import (
    DEFAULT_STIRRUP_DIAMETER,
    DesignMode,
    normalize_design_mode,
    pick_default_abcr_for_h,
)
from beamdraw.modules.stirrups.notation import format_abcr, migrate_spec

_NAN = float("nan")

CaseType = Literal["symmetric", "asym_both", "asym_one"]
LevelType = Literal["piso", "sotano", "azotea"]
SupportType = Literal["columna_inferior", "columna_superior", "placa", "apoyo_intermedio", "ninguno"]

_CASE_ALIASES: dict[str, CaseType] = {
    "symmetric": "symmetric",
    "simetrica": "symmetric",
    "simétrica": "symmetric",
    "asym_both": "asym_both",
    "asim_ambos": "asym_both",
    "asym_one": "asym_one",
    "asim_uno": "asym_one",
}
_LEVEL_PREFIX: dict[str, str] = {"piso": "VT", "sotano": "VS", "azotea": "VA"}
_NAME_RE = re.compile(r"^\s*(VT|VS|VA)\s*[-=]?\s*(\d+)", re.IGNORECASE)


class TolerantModel(BaseModel):
    """Base con coerción tolerante: un escalar inválido toma el valor por defecto."""

    class Config:
        from_attributes = True
        populate_by_name = True

    @field_validator("*", mode="before")
    @classmethod
    def coerce_scalars(cls, value: Any, info: ValidationInfo) -> Any:
        field = cls.model_fields.get(info.field_name)
        if field is None:
            return value
        annotation = field.annotation
        if annotation is bool:
            flag = as_bool(value)
            return field.get_default(call_default_factory=True) if flag is None else flag
        if annotation in (int, float):
            number = safe_float(value, default=_NAN)
            if math.isnan(number):
                return field.get_default(call_default_factory=True)
            return int(round(number)) if annotation is int else number
        if annotation == Optional[float]:
            number = safe_float(value, default=_NAN)
            return None if math.isnan(number) else number
        if annotation is str:
            return field.get_default(call_default_factory=True) if value is None else str(value)
        return value


class SteelMeta(TolerantModel):
    """Acero corrido de una cara: cantidad y diámetro."""

    qty: int = 3
    diameter: str = Field(default_factory=lambda: settings.DEFAULT_BAR_DIAMETER)

    @field_validator("qty")
    @classmethod
    def non_negative_qty(cls, value: int) -> int:
        return max(0, value)

    @field_validator("diameter")
    @classmethod
    def standard_diameter(cls, value: str) -> str:
        return normalize_diameter_key(value, default=settings.DEFAULT_BAR_DIAMETER)


class BastonCfg(TolerantModel):
    l1_enabled: bool = False
    l1_qty: int = 1
    l1_diameter: str = "3/4"
    l2_enabled: bool = False
    l2_qty: int = 1
    l2_diameter: str = "3/4"
    L1_m: Optional[float] = None
    L2_m: Optional[float] = None
    L3_m: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def allow_legacy_schema(cls, data: Any) -> Any:
        """Los campos antiguos ``enabled/qty/diameter`` se copian a ambas líneas."""
        if not isinstance(data, dict):
            return data
        migrated = dict(data)
        for legacy in ("enabled", "qty", "diameter"):
            if data.get(legacy) is None:
                continue
            for line in BASTON_LINES:
                if migrated.get(f"l{line}_{legacy}") is None:
                    migrated[f"l{line}_{legacy}"] = data[legacy]
        return migrated

    @field_validator("l1_qty", "l2_qty")
    @classmethod
    def clamp_qty(cls, value: int) -> int:
        return max(1, min(3, value))

    @field_validator("l1_diameter", "l2_diameter")
    @classmethod
    def standard_diameter(cls, value: str) -> str:
        return normalize_diameter_key(value, default="3/4")

    @field_validator("L1_m", "L2_m", "L3_m")
    @classmethod
    def positive_or_default(cls, value: Optional[float]) -> Optional[float]:
        if value is None or value <= 0:
            return None
        return value

    def line_enabled(self, line: BastonLine) -> bool:
        return self.l1_enabled if line == 1 else self.l2_enabled

    def line_qty(self, line: BastonLine) -> int:
        return self.l1_qty if line == 1 else self.l2_qty

    def line_diameter(self, line: BastonLine) -> str:
        return self.l1_diameter if line == 1 else self.l2_diameter

    @property
    def any_enabled(self) -> bool:
        return self.l1_enabled or self.l2_enabled


class BastonesSide(TolerantModel):
    z1: BastonCfg = Field(default_factory=BastonCfg)
    z2: BastonCfg = Field(default_factory=BastonCfg)
    z3: BastonCfg = Field(default_factory=BastonCfg)

    @field_validator("z1", "z2", "z3", mode="before")
    @classmethod
    def empty_zone(cls, value: Any) -> Any:
        return {} if value is None else value

    def zone(self, name: ZoneName) -> BastonCfg:
        return getattr(self, name)


class Bastones(TolerantModel):
    top: BastonesSide = Field(default_factory=BastonesSide)
    bottom: BastonesSide = Field(default_factory=BastonesSide)

    @field_validator("top", "bottom", mode="before")
    @classmethod
    def empty_side(cls, value: Any) -> Any:
        return {} if value is None else value

    def face(self, side: Side) -> BastonesSide:
        return self.top if side == "top" else self.bottom

    def zone(self, side: Side, zone: ZoneName) -> BastonCfg:
        return self.face(side).zone(zone)


class StirrupsSpec(TolerantModel):
    """Distribución de estribos del tramo en notación ABCR (o antigua)."""

    case_type: CaseType = "symmetric"
    design_mode: DesignMode = "seismic"
    diameter: str = DEFAULT_STIRRUP_DIAMETER
    left_spec: Optional[str] = None
    center_spec: Optional[str] = None
    right_spec: Optional[str] = None
    single_end: Literal["left", "right"] = "left"

    @field_validator("case_type", mode="before")
    @classmethod
    def map_case_type(cls, value: Any) -> str:
        return _CASE_ALIASES.get(str(value or "").strip().lower(), "symmetric")

    @field_validator("design_mode", mode="before")
    @classmethod
    def map_design_mode(cls, value: Any) -> str:
        return normalize_design_mode(value)

    @field_validator("single_end", mode="before")
    @classmethod
    def map_single_end(cls, value: Any) -> str:
        text = str(value or "").strip().lower()
        return "right" if text in ("right", "derecha", "der") else "left"

    @field_validator("left_spec", "center_spec", "right_spec", mode="before")
    @classmethod
    def migrate_legacy_spec(cls, value: Any) -> Optional[str]:
        return migrate_spec(value)

    @field_validator("diameter")
    @classmethod
    def standard_diameter(cls, value: str) -> str:
        return normalize_diameter_key(value.replace(" ", ""), default=DEFAULT_STIRRUP_DIAMETER)

    @property
    def has_any_spec(self) -> bool:
        return any((self.left_spec, self.center_spec, self.right_spec))

    def with_defaults_for_height(self, h_m: float) -> "StirrupsSpec":
        """Completa las especificaciones faltantes como lo hace el editor."""
        if not self.has_any_spec:
            default_spec = format_abcr(pick_default_abcr_for_h(h_m, self.design_mode))
            if self.case_type == "asym_one":
                return self.model_copy(
                    update={"left_spec": default_spec, "center_spec": default_spec, "right_spec": None}
                )
            return self.model_copy(update={"left_spec": default_spec, "center_spec": None, "right_spec": default_spec})
        if self.case_type == "symmetric":
            if self.left_spec and not self.right_spec:
                return self.model_copy(update={"right_spec": self.left_spec})
            if self.right_spec and not self.left_spec:
                return self.model_copy(update={"left_spec": self.right_spec})
        return self


class StirrupsSection(TolerantModel):
    shape: Literal["rect"] = "rect"
    diameter: str = DEFAULT_STIRRUP_DIAMETER
    qty: int = 1

    @field_validator("shape", mode="before")
    @classmethod
    def only_rect(cls, value: Any) -> str:
        return "rect"

    @field_validator("diameter")
    @classmethod
    def standard_diameter(cls, value: str) -> str:
        return normalize_diameter_key(value.replace(" ", ""), default=DEFAULT_STIRRUP_DIAMETER)

    @field_validator("qty")
    @classmethod
    def non_negative_qty(cls, value: int) -> int:
        return max(0, value)


_REQUIRED_AREA_KEYS = ("As_required_{side}", "As_requerida_{side}", "As_req_{side}", "As_req_{side}_cm2")


class Span(TolerantModel):
    L_m: float = Field(3.0, alias="L")
    h_m: float = Field(0.5, alias="h")
    b_m: float = Field(0.3, alias="b")
    steel_top: SteelMeta = Field(default_factory=SteelMeta)
    steel_bottom: SteelMeta = Field(default_factory=SteelMeta)
    bastones: Bastones = Field(default_factory=Bastones)
    stirrups: StirrupsSpec = Field(default_factory=StirrupsSpec)
    stirrups_section: StirrupsSection = Field(default_factory=StirrupsSection)
    As_required_top: Optional[float] = None
    As_required_bottom: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def allow_legacy_schema(cls, data: Any) -> Any:
        """Acepta claves camelCase y las distintas grafías de As requerida."""
        if not isinstance(data, dict):
            return data
        migrated = dict(data)
        for camel, snake in (
            ("steelTop", "steel_top"),
            ("steelBottom", "steel_bottom"),
            ("stirrupsSection", "stirrups_section"),
        ):
            if migrated.get(snake) is None and migrated.get(camel) is not None:
                migrated[snake] = migrated[camel]
        for key in ("steel_top", "steel_bottom", "bastones", "stirrups", "stirrups_section"):
            if key in migrated and migrated[key] is None:
                migrated.pop(key)

        lowered = {str(key).lower(): value for key, value in data.items()}
        for side in SIDES:
            field_name = f"As_required_{side}"
            if migrated.get(field_name) is not None:
                continue
            for template in _REQUIRED_AREA_KEYS:
                candidate = lowered.get(template.format(side=side).lower())
                number = safe_float(candidate, default=_NAN)
                if not math.isnan(number) and number >= 0:
                    migrated[field_name] = number
                    break
        return migrated

    @field_validator("L_m", "h_m", "b_m")
    @classmethod
    def non_negative(cls, value: float) -> float:
        return max(0.0, value)

    @field_validator("As_required_top", "As_required_bottom")
    @classmethod
    def non_negative_area(cls, value: Optional[float]) -> Optional[float]:
        if value is None or value < 0:
            return None
        return value

    @model_validator(mode="after")
    def complete_stirrups(self) -> "Span":
        self.stirrups = self.stirrups.with_defaults_for_height(self.h_m)
        return self

    def steel(self, side: Side) -> SteelMeta:
        return self.steel_top if side == "top" else self.steel_bottom

    def required_area_cm2(self, side: Side) -> Optional[float]:
        return self.As_required_top if side == "top" else self.As_required_bottom


class NodeEndSteel(TolerantModel):
    """Terminación resuelta de una barra en un extremo de nodo."""

    kind: SteelKind = SteelKind.CONTINUOUS
    to_face: bool = False
    anchorage_length_m: Optional[float] = None

    @field_validator("kind", mode="before")
    @classmethod
    def known_kind(cls, value: Any) -> SteelKind:
        # alias en español o texto desconocido: vale el tipo por defecto del extremo
        return SteelKind.parse(value) or cls.model_fields["kind"].default


class BastonEndSteel(NodeEndSteel):
    kind: SteelKind = SteelKind.HOOK


class NodeEndPair(TolerantModel):
    end1: NodeEndSteel = Field(default_factory=NodeEndSteel)
    end2: NodeEndSteel = Field(default_factory=NodeEndSteel)

    @field_validator("end1", "end2", mode="before")
    @classmethod
    def empty_end(cls, value: Any) -> Any:
        return {} if value is None else value

    def end(self, end: NodeEnd) -> NodeEndSteel:
        return self.end1 if end == 1 else self.end2


class BastonEndPair(NodeEndPair):
    end1: BastonEndSteel = Field(default_factory=BastonEndSteel)
    end2: BastonEndSteel = Field(default_factory=BastonEndSteel)


class NodeFaceSteel(TolerantModel):
    top: NodeEndPair = Field(default_factory=NodeEndPair)
    bottom: NodeEndPair = Field(default_factory=NodeEndPair)

    @field_validator("top", "bottom", mode="before")
    @classmethod
    def empty_side(cls, value: Any) -> Any:
        return {} if value is None else value

    def get(self, side: Side, end: NodeEnd) -> NodeEndSteel:
        return (self.top if side == "top" else self.bottom).end(end)


class BastonEndLines(TolerantModel):
    line1: BastonEndPair = Field(default_factory=BastonEndPair)
    line2: BastonEndPair = Field(default_factory=BastonEndPair)

    @field_validator("line1", "line2", mode="before")
    @classmethod
    def empty_line(cls, value: Any) -> Any:
        return {} if value is None else value


class NodeBastonSteel(TolerantModel):
    top: BastonEndLines = Field(default_factory=BastonEndLines)
    bottom: BastonEndLines = Field(default_factory=BastonEndLines)

    def get(self, side: Side, end: NodeEnd, line: BastonLine) -> NodeEndSteel:
        lines = self.top if side == "top" else self.bottom
        pair = lines.line1 if line == 1 else lines.line2
        return pair.end(end)


class Node(TolerantModel):
    a1: float = 0.0
    a2: float = 0.5
    b1: float = 0.0
    b2: float = 0.5
    project_a: bool = True
    project_b: bool = True
    support_type: Optional[SupportType] = None
    steel: NodeFaceSteel = Field(default_factory=NodeFaceSteel)
    bastones: NodeBastonSteel = Field(default_factory=NodeBastonSteel)

    @model_validator(mode="before")
    @classmethod
    def fold_flat_steel_keys(cls, data: Any) -> Any:
        """Convierte las claves planas (``steel_top_1_kind``...) en la tabla por extremo."""
        if not isinstance(data, dict):
            return data
        if "steel" in data and "bastones" in data:
            return data
        migrated = dict(data)
        migrated.setdefault(
            "steel",
            {
                side: {
                    f"end{end}": {
                        "kind": resolver.resolve_kind(data, side, end),
                        "to_face": resolver.resolve_to_face(data, side, end),
                        "anchorage_length_m": resolver.resolve_anchorage_override(data, side, end),
                    }
                    for end in NODE_ENDS
                }
                for side in SIDES
            },
        )
        migrated.setdefault(
            "bastones",
            {
                side: {
                    f"line{line}": {
                        f"end{end}": {
                            "kind": resolver.resolve_baston_kind(data, side, end, line),
                            "to_face": resolver.resolve_baston_to_face(data, side, end, line),
                            "anchorage_length_m": resolver.resolve_baston_anchorage_override(data, side, end, line),
                        }
                        for end in NODE_ENDS
                    }
                    for line in BASTON_LINES
                }
                for side in SIDES
            },
        )
        return migrated

    @field_validator("a1", "a2", "b1", "b2")
    @classmethod
    def non_negative(cls, value: float) -> float:
        return max(0.0, value)

    @field_validator("support_type", mode="before")
    @classmethod
    def known_support(cls, value: Any) -> Optional[str]:
        text = str(value or "").strip().lower()
        if text in ("columna_inferior", "columna_superior", "placa", "apoyo_intermedio", "ninguno"):
            return text
        return None

    def steel_end(self, side: Side, end: NodeEnd) -> NodeEndSteel:
        return self.steel.get(side, end)

    def baston_end(self, side: Side, end: NodeEnd, line: BastonLine) -> NodeEndSteel:
        return self.bastones.get(side, end, line)

    def face_offset_m(self, side: Side, end: NodeEnd) -> float:
        if side == "top":
            return self.b1 if end == 1 else self.b2
        return self.a1 if end == 1 else self.a2

    @property
    def column_length_m(self) -> float:
        return abs(self.b2 - self.b1)


def compute_beam_name(level_type: str, beam_no: int) -> str:
    prefix = _LEVEL_PREFIX.get(level_type, "VT")
    number = max(1, min(9999, int(beam_no or 1)))
    return f"{prefix}-{number:02d}"


class Development(TolerantModel):
    """Desarrollo completo de una viga: tramos, nodos y parámetros de dibujo."""

    name: str = "VT-01"
    level_type: LevelType = "piso"
    beam_no: int = 1
    unit_scale: float = Field(default_factory=lambda: settings.DEFAULT_UNIT_SCALE)
    x0: float = Field(default_factory=lambda: settings.DEFAULT_X0_M)
    y0: float = Field(default_factory=lambda: settings.DEFAULT_Y0_M)
    cover_m: float = Field(default_factory=lambda: settings.DEFAULT_COVER_M, alias="recubrimiento")
    cutback_Lc_m: float = Field(default_factory=lambda: settings.DEFAULT_BASTON_LC_M, alias="baston_Lc")
    hook_leg_m: float = Field(default_factory=lambda: settings.DEFAULT_HOOK_LEG_M)
    spans: list[Span] = Field(default_factory=list)
    nodes: list[Node] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def allow_legacy_schema(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        migrated = dict(data)
        for key in ("spans", "nodes"):
            value = migrated.get(key)
            migrated[key] = [item for item in value if item is not None] if isinstance(value, list) else []

        name = str(migrated.get("name") or "")
        match = _NAME_RE.match(name)
        level_raw = str(migrated.get("level_type") or migrated.get("levelType") or "").strip().lower()
        level_raw = level_raw.replace("ó", "o")
        if level_raw not in _LEVEL_PREFIX:
            inferred = {"VS": "sotano", "VA": "azotea", "VT": "piso"}
            level_raw = inferred.get(match.group(1).upper(), "piso") if match else "piso"
        migrated["level_type"] = level_raw
        beam_no = migrated.get("beam_no", migrated.get("beamNo"))
        if beam_no is None and match:
            beam_no = match.group(2)
        migrated["beam_no"] = beam_no if beam_no is not None else 1
        return migrated

    @field_validator("beam_no")
    @classmethod
    def clamp_beam_no(cls, value: int) -> int:
        return max(1, min(9999, value))

    @field_validator("unit_scale")
    @classmethod
    def positive_scale(cls, value: float) -> float:
        return value if value > 0 else settings.DEFAULT_UNIT_SCALE

    @field_validator("cover_m", "cutback_Lc_m", "hook_leg_m")
    @classmethod
    def non_negative(cls, value: float) -> float:
        return max(0.0, value)

    @model_validator(mode="after")
    def ensure_node_count(self) -> "Development":
        """Garantiza ``len(nodes) == len(spans) + 1`` copiando el último nodo."""
        desired = len(self.spans) + 1
        nodes = list(self.nodes[:desired])
        template = nodes[-1] if nodes else Node()
        while len(nodes) < desired:
            nodes.append(template.model_copy(deep=True))
        self.nodes = nodes
        self.name = compute_beam_name(self.level_type, self.beam_no)
        return self

    def span(self, index: int) -> Optional[Span]:
        if 0 <= index < len(self.spans):
            return self.spans[index]
        return None

    def node(self, index: int) -> Optional[Node]:
        if 0 <= index < len(self.nodes):
            return self.nodes[index]
        return None


__all__ = [
    "BastonCfg",
    "Bastones",
    "BastonesSide",
    "CaseType",
    "Development",
    "Node",
    "NodeBastonSteel",
    "NodeEndSteel",
    "NodeFaceSteel",
    "Span",
    "SteelMeta",
    "StirrupsSection",
    "StirrupsSpec",
    "TolerantModel",
    "compute_beam_name",
]
