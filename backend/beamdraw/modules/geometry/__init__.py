"""Geometría del desarrollo: orígenes de nodos, rangos por tramo y unidades."""

from .resolver import (
    bar_level_y,
    node_face_x,
    node_index_at_x,
    node_label_x,
    node_marker_x,
    node_origins,
    span_bottom_range,
    span_face_range,
    span_index_at_x,
    span_mid_x,
    span_top_range,
    span_width_at_x,
)
from .units import (
    DEFAULT_TOLERANCE,
    CoordinateSpace,
    chain_points,
    m_to_units,
    snap_to,
    unique_sorted_numbers,
    units_to_m,
)

__all__ = [
    "CoordinateSpace",
    "DEFAULT_TOLERANCE",
    "bar_level_y",
    "chain_points",
    "m_to_units",
    "node_face_x",
    "node_index_at_x",
    "node_label_x",
    "node_marker_x",
    "node_origins",
    "snap_to",
    "span_bottom_range",
    "span_face_range",
    "span_index_at_x",
    "span_mid_x",
    "span_top_range",
    "span_width_at_x",
    "unique_sorted_numbers",
    "units_to_m",
]
