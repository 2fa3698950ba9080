"""Contratos de salida del cálculo de detallado."""

from __future__ import annotations

from typing import Any, ClassVar, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from beamdraw.modules.steel.kinds import SteelKind

PointOut = Tuple[float, float]
Units = Literal["drawing", "m"]


def _scale_value(value: Any, factor: float) -> Any:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value / factor
    if isinstance(value, tuple):
        return tuple(_scale_value(item, factor) for item in value)
    if isinstance(value, list):
        return [_scale_value(item, factor) for item in value]
    return value


class ScaledModel(BaseModel):
    """Modelo con coordenadas de dibujo que se pueden pasar a metros.

    ``coordinate_fields`` lista los campos en unidades de dibujo; los campos
    terminados en ``_m`` ya están en metros y no se tocan.
    """

    coordinate_fields: ClassVar[Tuple[str, ...]] = ()

    class Config:
        from_attributes = True

    def scaled(self, factor: float):
        if not factor or factor == 1:
            return self.model_copy(deep=True)
        update: dict[str, Any] = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if name in self.coordinate_fields:
                update[name] = _scale_value(value, factor)
            elif isinstance(value, ScaledModel):
                update[name] = value.scaled(factor)
            elif isinstance(value, list) and value and isinstance(value[0], ScaledModel):
                update[name] = [item.scaled(factor) for item in value]
        return self.model_copy(update=update)


class SpanGeometry(ScaledModel):
    coordinate_fields: ClassVar[Tuple[str, ...]] = ("bottom_start", "bottom_end", "top_start", "top_end", "mid_x")

    span_index: int
    L_m: float = Field(..., description="Luz libre del tramo (m)")
    h_m: float
    b_m: float
    bottom_start: float = Field(..., description="Cara izquierda en la fibra inferior")
    bottom_end: float = Field(..., description="Cara derecha en la fibra inferior")
    top_start: float
    top_end: float
    mid_x: float


class NodeGeometry(ScaledModel):
    coordinate_fields: ClassVar[Tuple[str, ...]] = ("origin_x", "marker_x", "label_x")

    node_index: int
    label: str
    origin_x: float
    marker_x: float
    label_x: float
    support_type: Optional[str] = None
    steel_length_m: float = Field(..., description="Longitud de acero en el nodo según el apoyo")


class LongitudinalRunOut(ScaledModel):
    coordinate_fields: ClassVar[Tuple[str, ...]] = ("x_start", "x_end", "y")

    span_index: int
    side: Literal["top", "bottom"]
    x_start: float
    x_end: float
    y: float
    qty: int
    diameter: str


class TerminalEndpointOut(ScaledModel):
    coordinate_fields: ClassVar[Tuple[str, ...]] = ("start_x", "end_x", "y", "hook_leg_end", "points")

    kind: SteelKind
    side: Literal["top", "bottom"]
    start_x: float
    end_x: float
    y: float
    straight_length_m: float = Field(..., description="Tramo recto dibujado (m)")
    required_length_m: float = Field(..., description="Longitud mínima de la tabla para el tipo (m)")
    development_ok: bool
    to_face: bool = False
    hook_leg_end: Optional[PointOut] = None
    points: List[PointOut] = Field(default_factory=list, description="Polilínea de la terminación")


class NodeTerminalOut(ScaledModel):
    node_index: int
    side: Literal["top", "bottom"]
    end: Literal[1, 2]
    span_index: int
    diameter: str
    endpoint: TerminalEndpointOut


class ConnectorOut(ScaledModel):
    coordinate_fields: ClassVar[Tuple[str, ...]] = ("points",)

    node_index: int
    side: Literal["top", "bottom"]
    line: Optional[Literal[1, 2]] = Field(None, description="Línea del bastón; vacío para acero corrido")
    points: List[PointOut]


class BastonSegmentOut(ScaledModel):
    coordinate_fields: ClassVar[Tuple[str, ...]] = ("x_start", "x_end", "y", "length")

    span_index: int
    side: Literal["top", "bottom"]
    zone: Literal["z1", "z2", "z3"]
    line: Literal[1, 2]
    x_start: float
    x_end: float
    y: float
    length: float
    qty: int
    diameter: str


class BastonTerminationOut(ScaledModel):
    span_index: int
    node_index: int
    side: Literal["top", "bottom"]
    zone: Literal["z1", "z2", "z3"]
    line: Literal[1, 2]
    endpoint: TerminalEndpointOut


class StirrupBlockOut(ScaledModel):
    coordinate_fields: ClassVar[Tuple[str, ...]] = ("positions",)

    tag: str = Field(..., description="Bloque: b, c, r, mid o seg<k>")
    positions: List[float]


class SpanStirrupsOut(ScaledModel):
    coordinate_fields: ClassVar[Tuple[str, ...]] = ("face_start", "face_end", "y_bottom", "y_top")

    span_index: int
    face_start: float
    face_end: float
    y_bottom: float
    y_top: float
    diameter: str
    left_spec: Optional[str] = None
    right_spec: Optional[str] = None
    left_blocks: List[StirrupBlockOut] = Field(default_factory=list)
    right_blocks: List[StirrupBlockOut] = Field(default_factory=list)
    count: int = 0


class SectionQuantitiesOut(ScaledModel):
    coordinate_fields: ClassVar[Tuple[str, ...]] = ("x",)

    span_index: int
    x: float = Field(..., description="Posición del corte")
    x_m: float = Field(..., description="Posición del corte en metros")
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
    margin_top: float = Field(..., description="As instalada - As requerida (cm²)")
    margin_bottom: float
    margin_rho_top: float
    margin_rho_bottom: float


class DetailingResults(ScaledModel):
    """Resultados completos del detallado de una viga"""

    name: str = Field(..., description="Nombre de la viga (VT-01, VS-02, ...)")
    unit_scale: float = Field(..., description="Unidades de dibujo por metro")
    units: Units = Field("drawing", description="Unidades de las coordenadas")
    spans: List[SpanGeometry] = Field(default_factory=list)
    nodes: List[NodeGeometry] = Field(default_factory=list)
    longitudinal_runs: List[LongitudinalRunOut] = Field(default_factory=list)
    node_terminals: List[NodeTerminalOut] = Field(default_factory=list)
    longitudinal_connectors: List[ConnectorOut] = Field(default_factory=list)
    baston_segments: List[BastonSegmentOut] = Field(default_factory=list)
    baston_terminations: List[BastonTerminationOut] = Field(default_factory=list)
    baston_connectors: List[ConnectorOut] = Field(default_factory=list)
    stirrups: List[SpanStirrupsOut] = Field(default_factory=list)
    quantities: List[SectionQuantitiesOut] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list, description="Advertencias de anclaje y cuantía")


class DetailingResponse(BaseModel):
    """Respuesta del cálculo de detallado"""

    success: bool = Field(..., description="Indica si el cálculo fue exitoso")
    results: Optional[DetailingResults] = Field(None, description="Resultados del cálculo")
    message: Optional[str] = Field(None, description="Mensaje informativo o de error")
    computation_time_ms: Optional[float] = Field(None, description="Tiempo de cálculo en milisegundos")

    class Config:
        from_attributes = True


__all__ = [
    "BastonSegmentOut",
    "BastonTerminationOut",
    "ConnectorOut",
    "DetailingResponse",
    "DetailingResults",
    "LongitudinalRunOut",
    "NodeGeometry",
    "NodeTerminalOut",
    "ScaledModel",
    "SectionQuantitiesOut",
    "SpanGeometry",
    "SpanStirrupsOut",
    "StirrupBlockOut",
    "TerminalEndpointOut",
    "Units",
]
