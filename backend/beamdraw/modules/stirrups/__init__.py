"""Notación ABCR, valores por defecto y distribución de estribos por tramo."""

from .defaults import (
    DEFAULT_STIRRUP_DIAMETER,
    STIRRUPS_DEFAULTS_BY_H,
    normalize_design_mode,
    pick_default_abcr_for_h,
)
from .distribution import (
    SpanStirrups,
    StirrupBlock,
    blocks_from_spec,
    compute_stirrup_layout,
    positions_from_tokens,
    resolve_end_specs,
    span_stirrup_groups,
)
from .notation import (
    StirrupToken,
    StirrupsABCR,
    abcr_from_legacy_tokens,
    format_abcr,
    migrate_spec,
    parse_abcr,
    parse_stirrups_spec,
    rest_spacing_from_spec,
)

__all__ = [
    "DEFAULT_STIRRUP_DIAMETER",
    "STIRRUPS_DEFAULTS_BY_H",
    "SpanStirrups",
    "StirrupBlock",
    "StirrupToken",
    "StirrupsABCR",
    "abcr_from_legacy_tokens",
    "blocks_from_spec",
    "compute_stirrup_layout",
    "format_abcr",
    "migrate_spec",
    "normalize_design_mode",
    "parse_abcr",
    "parse_stirrups_spec",
    "pick_default_abcr_for_h",
    "positions_from_tokens",
    "resolve_end_specs",
    "span_stirrup_groups",
]
