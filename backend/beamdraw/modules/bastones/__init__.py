"""Distribución de bastones por zonas y sus conexiones en nodos."""

from .layout import (
    BastonConnector,
    BastonLayout,
    BastonSegment,
    BastonTermination,
    baston_line_extent,
    compute_baston_layout,
    layout_span_bastones,
    node_connectors,
    resolve_zone_length_m,
    snap_05,
    zone_extent,
)

__all__ = [
    "BastonConnector",
    "BastonLayout",
    "BastonSegment",
    "BastonTermination",
    "baston_line_extent",
    "compute_baston_layout",
    "layout_span_bastones",
    "node_connectors",
    "resolve_zone_length_m",
    "snap_05",
    "zone_extent",
]
