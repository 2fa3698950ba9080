from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence, Union

from beamdraw.core.config import settings
from beamdraw.modules.bastones import compute_baston_layout
from beamdraw.modules.geometry import (
    node_label_x,
    node_marker_x,
    node_origins,
    span_bottom_range,
    span_mid_x,
    span_top_range,
)
from beamdraw.modules.stirrups import compute_stirrup_layout
from beamdraw.schemas.detailing import (
    BastonSegmentOut,
    BastonTerminationOut,
    ConnectorOut,
    DetailingResponse,
    DetailingResults,
    LongitudinalRunOut,
    NodeGeometry,
    NodeTerminalOut,
    SectionQuantitiesOut,
    SpanGeometry,
    SpanStirrupsOut,
    Units,
)
from beamdraw.schemas.development import Development
from beamdraw.services.development_service import calculate_node_steel_length, normalize_development
from beamdraw.services.export_service import to_real_units
from beamdraw.services.quantity_service import (
    QuantityCutMode,
    QuantityLimits,
    SectionQuantities,
    build_quantity_cuts,
    compute_quantity_cuts,
)
from beamdraw.services.steel_service import (
    NodeTerminal,
    longitudinal_connectors,
    longitudinal_runs,
    resolve_node_terminals,
)

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[%(asctime)s] %(levelname)s %(name)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(settings.LOG_LEVEL)
logger.propagate = False

_SIDE_LABEL = {"top": "superior", "bottom": "inferior"}


class DetailingDebugger:
    """Pequeño ayudante para exponer el avance del cálculo en los logs."""

    def __init__(self, name: str = "detailing") -> None:
        self.step = 0
        self.name = name.upper()

    def log(self, message: str, **context: Any) -> None:
        self.step += 1
        context_str = " ".join(
            f"{key}={value}" for key, value in context.items() if value is not None
        )
        if context_str:
            logger.info("%s[%02d] %s | %s", self.name, self.step, message, context_str)
        else:
            logger.info("%s[%02d] %s", self.name, self.step, message)

    def error(self, message: str) -> None:
        logger.error("%s[ERR] %s", self.name, message)


class BeamDetailingService:
    """Servicio de detallado de vigas: acero corrido, bastones, estribos y cuantías."""

    def __init__(self, limits: Optional[QuantityLimits] = None) -> None:
        self.limits = limits or QuantityLimits.from_settings()

    def compute_detailing(
        self,
        data: Union[Development, Mapping[str, Any], None],
        *,
        cuts: Optional[Sequence[float]] = None,
        cut_mode: QuantityCutMode = "zones",
        units: Units = "drawing",
    ) -> DetailingResponse:
        """
        Calcula el detallado completo de un desarrollo de viga.

        Args:
            data: Desarrollo validado o documento crudo
            cuts: Cortes de cuantía en unidades de dibujo; si faltan se
                generan según ``cut_mode``
            units: ``drawing`` (metros * escala) o ``m``

        Returns:
            DetailingResponse con los resultados del cálculo
        """
        start_time = datetime.now()
        debugger = DetailingDebugger()
        debugger.log("Inicio de cálculo", units=units, cortes=len(cuts) if cuts is not None else None)

        try:
            dev = normalize_development(data)
            debugger.log("Desarrollo normalizado", viga=dev.name, tramos=len(dev.spans), nodos=len(dev.nodes))
            if not dev.spans:
                debugger.error("Desarrollo sin tramos")
                return DetailingResponse(
                    success=False,
                    results=None,
                    computation_time_ms=None,
                    message="El desarrollo no tiene tramos",
                )

            # 1. Geometría
            origins = node_origins(dev)
            spans = self._span_geometry(dev, origins)
            nodes = self._node_geometry(dev, origins)
            debugger.log("Geometría calculada", longitud=f"{origins[-1] - origins[0]:.2f}")

            # 2. Acero corrido y terminaciones en nodos
            runs = longitudinal_runs(dev, origins)
            terminals = resolve_node_terminals(dev, origins)
            connectors = longitudinal_connectors(dev, origins)
            debugger.log("Acero corrido resuelto", terminaciones=len(terminals), conectores=len(connectors))

            # 3. Bastones
            bastones = compute_baston_layout(dev, origins)
            debugger.log(
                "Bastones distribuidos",
                segmentos=len(bastones.segments),
                terminaciones=len(bastones.terminations),
                conectores=len(bastones.connectors),
            )

            # 4. Estribos
            stirrups = compute_stirrup_layout(dev, origins)
            debugger.log("Estribos distribuidos", total=sum(group.count for group in stirrups))

            # 5. Cuantías
            cut_positions = list(cuts) if cuts is not None else build_quantity_cuts(dev, cut_mode, origins=origins)
            quantities = compute_quantity_cuts(dev, cut_positions, self.limits, origins)
            debugger.log("Cuantías evaluadas", cortes=len(quantities))

            warnings = self._collect_warnings(terminals, bastones.terminations, quantities)

            results = DetailingResults(
                name=dev.name,
                unit_scale=dev.unit_scale,
                units="drawing",
                spans=spans,
                nodes=nodes,
                longitudinal_runs=[LongitudinalRunOut.model_validate(run) for run in runs],
                node_terminals=[NodeTerminalOut.model_validate(terminal) for terminal in terminals],
                longitudinal_connectors=[ConnectorOut.model_validate(connector) for connector in connectors],
                baston_segments=[BastonSegmentOut.model_validate(segment) for segment in bastones.segments],
                baston_terminations=[BastonTerminationOut.model_validate(item) for item in bastones.terminations],
                baston_connectors=[ConnectorOut.model_validate(connector) for connector in bastones.connectors],
                stirrups=[SpanStirrupsOut.model_validate(group) for group in stirrups],
                quantities=[SectionQuantitiesOut.model_validate(record) for record in quantities],
                warnings=warnings,
            )
            if units == "m":
                results = to_real_units(results, dev.unit_scale)

            computation_time = (datetime.now() - start_time).total_seconds() * 1000
            logger.info(f"Detallado completado en {computation_time:.2f}ms")
            debugger.log("Cálculo finalizado", tiempo_ms=f"{computation_time:.2f}", advertencias=len(warnings))

            return DetailingResponse(
                success=True,
                results=results,
                computation_time_ms=computation_time,
                message=f"Detallado de {dev.name} calculado exitosamente",
            )

        except Exception as e:
            logger.error(f"Error en cálculo de detallado: {str(e)}", exc_info=True)
            debugger.error(f"Excepción: {str(e)}")
            return DetailingResponse(
                success=False,
                results=None,
                computation_time_ms=None,
                message=f"Error en el cálculo: {str(e)}",
            )

    def _span_geometry(self, dev: Development, origins: Sequence[float]) -> List[SpanGeometry]:
        spans: List[SpanGeometry] = []
        for i, span in enumerate(dev.spans):
            bottom = span_bottom_range(dev, i, origins)
            top = span_top_range(dev, i, origins)
            spans.append(
                SpanGeometry(
                    span_index=i,
                    L_m=span.L_m,
                    h_m=span.h_m,
                    b_m=span.b_m,
                    bottom_start=bottom[0],
                    bottom_end=bottom[1],
                    top_start=top[0],
                    top_end=top[1],
                    mid_x=span_mid_x(dev, i, origins),
                )
            )
        return spans

    def _node_geometry(self, dev: Development, origins: Sequence[float]) -> List[NodeGeometry]:
        return [
            NodeGeometry(
                node_index=i,
                label=f"Nodo {i + 1}",
                origin_x=origins[i],
                marker_x=node_marker_x(dev, i, origins),
                label_x=node_label_x(dev, i, origins),
                support_type=node.support_type,
                steel_length_m=calculate_node_steel_length(node),
            )
            for i, node in enumerate(dev.nodes)
        ]

    def _collect_warnings(
        self,
        terminals: Sequence[NodeTerminal],
        baston_terminations: Sequence[Any],
        quantities: Sequence[SectionQuantities],
    ) -> List[str]:
        warnings: List[str] = []
        for terminal in terminals:
            endpoint = terminal.endpoint
            if not endpoint.development_ok:
                warnings.append(
                    f"Nodo {terminal.node_index + 1}.{terminal.end} {_SIDE_LABEL[terminal.side]}: "
                    f"tramo recto {endpoint.straight_length_m:.2f} m menor que "
                    f"{endpoint.required_length_m:.2f} m requerido"
                )
        for termination in baston_terminations:
            endpoint = termination.endpoint
            if not endpoint.development_ok:
                warnings.append(
                    f"Bastón tramo {termination.span_index + 1} {termination.zone.upper()} "
                    f"{_SIDE_LABEL[termination.side]} línea {termination.line}: "
                    f"tramo recto {endpoint.straight_length_m:.2f} m menor que "
                    f"{endpoint.required_length_m:.2f} m requerido"
                )
        for record in quantities:
            for side, ok in (("top", record.top_ok), ("bottom", record.bottom_ok)):
                if not ok:
                    warnings.append(
                        f"Tramo {record.span_index + 1} x={record.x_m:.2f} m: "
                        f"cuantía {_SIDE_LABEL[side]} no cumple"
                    )
        return warnings


__all__ = ["BeamDetailingService", "DetailingDebugger"]
