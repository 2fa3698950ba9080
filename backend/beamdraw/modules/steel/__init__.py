"""Tipos de acero en nodos, tabla de anclajes y puntos de terminación."""

from .development_lengths import (
    DEVELOPMENT_LENGTHS_CM,
    anchorage_length_m,
    hook_length_m,
    normalize_diameter_key,
    required_length_m,
)
from .kinds import BASTON_LINES, NODE_ENDS, SIDES, ZONES, SteelKind
from .resolver import (
    TerminalEndpoint,
    resolve_anchorage_override,
    resolve_baston_anchorage_override,
    resolve_baston_kind,
    resolve_baston_to_face,
    resolve_kind,
    resolve_to_face,
    terminal_endpoint,
)

__all__ = [
    "BASTON_LINES",
    "DEVELOPMENT_LENGTHS_CM",
    "NODE_ENDS",
    "SIDES",
    "SteelKind",
    "TerminalEndpoint",
    "ZONES",
    "anchorage_length_m",
    "hook_length_m",
    "normalize_diameter_key",
    "required_length_m",
    "resolve_anchorage_override",
    "resolve_baston_anchorage_override",
    "resolve_baston_kind",
    "resolve_baston_to_face",
    "resolve_kind",
    "resolve_to_face",
    "terminal_endpoint",
]
