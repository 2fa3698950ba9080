from __future__ import annotations

import logging
from typing import Optional

from beamdraw.core.config import settings
from beamdraw.modules.geometry.units import CoordinateSpace, Point
from beamdraw.schemas.detailing import DetailingResults

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[%(asctime)s] %(levelname)s %(name)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(settings.LOG_LEVEL)
logger.propagate = False


def export_space(unit_scale: Optional[float]) -> CoordinateSpace:
    scale = unit_scale if unit_scale and unit_scale > 0 else settings.DEFAULT_UNIT_SCALE
    return CoordinateSpace(unit_scale=scale)


def to_real_point(point: Point, unit_scale: Optional[float]) -> Point:
    return export_space(unit_scale).point_to_m(point)


def to_real_units(results: DetailingResults, unit_scale: Optional[float] = None) -> DetailingResults:
    """Divide todas las coordenadas de dibujo por la misma escala.

    Pantalla y exportación comparten la misma geometría: no hay otra
    conversión entre ambas que esta división uniforme.
    """
    if results.units == "m":
        return results.model_copy(deep=True)
    space = export_space(unit_scale if unit_scale is not None else results.unit_scale)
    converted = results.scaled(space.unit_scale)
    converted.units = "m"
    logger.debug("Resultados %s convertidos a metros (escala=%s)", results.name, space.unit_scale)
    return converted


__all__ = ["export_space", "to_real_point", "to_real_units"]
