"""Notación de estribos: formato compacto ABCR y la gramática antigua de tokens.

Formato ABCR::

    A=0.05 b,B=8,0.100 c,C=5,0.150 R=0.250

``A`` es la distancia de la cara al primer estribo, ``b`` estribos a ``B``
(el primero incluido), ``c`` estribos a ``C`` y el resto a ``R`` hasta el
centro de la luz. La gramática antigua son tokens separados por comas
(``1@.05, 8@.10, rto@.25``) opcionalmente precedidos de una etiqueta con
``:``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal, Optional

_NUMBER = r"([0-9]+(?:[.,][0-9]+)?|\.[0-9]+)"
_A_RE = re.compile(rf"\bA\s*=\s*{_NUMBER}\s*m?\b", re.IGNORECASE)
_R_RE = re.compile(rf"\bR\s*=\s*{_NUMBER}\s*m?\b", re.IGNORECASE)
_B_RE = re.compile(rf"\bb\s*,\s*B\s*=\s*(\d+)\s*,\s*{_NUMBER}\s*m?\b", re.IGNORECASE)
_C_RE = re.compile(rf"\bc\s*,\s*C\s*=\s*(\d+)\s*,\s*{_NUMBER}\s*m?\b", re.IGNORECASE)
_TOKEN_RE = re.compile(r"(rto|resto|\d+)\s*@\s*(\d+\.\d+|\d+|\.\d+)", re.IGNORECASE)
_LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")


@dataclass(frozen=True, slots=True)
class StirrupsABCR:
    A_m: float = 0.0
    b_n: int = 0
    B_m: float = 0.0
    c_n: int = 0
    C_m: float = 0.0
    R_m: float = 0.0


@dataclass(frozen=True, slots=True)
class StirrupToken:
    kind: Literal["count", "rest"]
    spacing_m: float
    count: int = 0


def _non_negative(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return max(0.0, number)


def _format_decimal(value: float, places: int) -> str:
    text = f"{value:.{places}f}"
    if float(text) == value:
        return text
    # más decimales que el mínimo: usar la representación exacta más corta
    return format(Decimal(repr(value)), "f")


def format_abcr(abcr: StirrupsABCR) -> str:
    A = _non_negative(abcr.A_m)
    b = int(round(_non_negative(abcr.b_n)))
    B = _non_negative(abcr.B_m)
    c = int(round(_non_negative(abcr.c_n)))
    C = _non_negative(abcr.C_m)
    R = _non_negative(abcr.R_m)
    return (
        f"A={_format_decimal(A, 2)} "
        f"b,B={b},{_format_decimal(B, 3)} "
        f"c,C={c},{_format_decimal(C, 3)} "
        f"R={_format_decimal(R, 3)}"
    )


def _number(raw: Optional[str]) -> float:
    if raw is None:
        return 0.0
    return _non_negative(raw.strip().replace(",", "."))


def parse_abcr(text) -> Optional[StirrupsABCR]:
    """Retorna ``None`` si el texto no contiene ninguno de los campos A, b/B, c/C o R."""
    source = str(text if text is not None else "")
    if not source.strip():
        return None

    match_a = _A_RE.search(source)
    match_r = _R_RE.search(source)
    match_b = _B_RE.search(source)
    match_c = _C_RE.search(source)
    if not (match_a or match_r or match_b or match_c):
        return None

    return StirrupsABCR(
        A_m=_number(match_a.group(1)) if match_a else 0.0,
        b_n=int(match_b.group(1)) if match_b else 0,
        B_m=_number(match_b.group(2)) if match_b else 0.0,
        c_n=int(match_c.group(1)) if match_c else 0,
        C_m=_number(match_c.group(2)) if match_c else 0.0,
        R_m=_number(match_r.group(1)) if match_r else 0.0,
    )


def _strip_label(text: str) -> str:
    if ":" in text:
        return text.split(":", 1)[1]
    return text


def parse_stirrups_spec(text) -> list[StirrupToken]:
    """Convierte una especificación (ABCR o antigua) en tokens conteo/resto."""
    source = str(text if text is not None else "")
    if not source.strip():
        return []
    source = _strip_label(source)

    abcr = parse_abcr(source)
    if abcr is not None:
        tokens: list[StirrupToken] = []
        if abcr.A_m > 0:
            tokens.append(StirrupToken("count", abcr.A_m, 1))
        if abcr.b_n > 1 and abcr.B_m > 0:
            tokens.append(StirrupToken("count", abcr.B_m, abcr.b_n - 1))
        if abcr.c_n > 0 and abcr.C_m > 0:
            tokens.append(StirrupToken("count", abcr.C_m, abcr.c_n))
        if abcr.R_m > 0:
            tokens.append(StirrupToken("rest", abcr.R_m))
        return tokens

    tokens = []
    for part in (chunk.strip() for chunk in source.split(",")):
        if not part:
            continue
        if "@" not in part:
            # un número suelto equivale a "rto@<número>"
            leading = _LEADING_NUMBER_RE.match(re.sub(r"\s*m\s*$", "", part, flags=re.IGNORECASE))
            if leading and float(leading.group(1)) > 0:
                tokens.append(StirrupToken("rest", float(leading.group(1))))
            continue
        match = _TOKEN_RE.search(part)
        if not match:
            continue
        raw_count = match.group(1).strip().lower()
        spacing = float(match.group(2))
        if spacing <= 0:
            continue
        if raw_count in ("rto", "resto"):
            tokens.append(StirrupToken("rest", spacing))
            continue
        count = int(raw_count)
        if count <= 0:
            continue
        tokens.append(StirrupToken("count", spacing, count))
    return tokens


def abcr_from_legacy_tokens(tokens: list[StirrupToken]) -> Optional[StirrupsABCR]:
    """Solo convierte secuencias ``1@A[, N@B][, rto@R]``."""
    if not tokens:
        return None
    first = tokens[0]
    if first.kind != "count" or first.count != 1:
        return None

    index = 1
    b_n, B_m = 1, 0.0
    if index < len(tokens) and tokens[index].kind == "count":
        b_n = 1 + max(0, tokens[index].count)
        B_m = max(0.0, tokens[index].spacing_m)
        index += 1

    R_m = 0.0
    for token in tokens[index:]:
        if token.kind == "rest":
            R_m = max(0.0, token.spacing_m)
            break
    return StirrupsABCR(A_m=first.spacing_m, b_n=b_n, B_m=B_m, c_n=0, C_m=0.0, R_m=R_m)


def migrate_spec(text) -> Optional[str]:
    """Reescribe una especificación antigua convertible en texto ABCR canónico."""
    if text is None:
        return None
    source = str(text).strip()
    if not source:
        return None
    if parse_abcr(source) is not None:
        return source
    converted = abcr_from_legacy_tokens(parse_stirrups_spec(source))
    return format_abcr(converted) if converted is not None else source


def rest_spacing_from_spec(text) -> Optional[float]:
    abcr = parse_abcr(text)
    if abcr is not None and abcr.R_m > 0:
        return abcr.R_m
    for token in reversed(parse_stirrups_spec(text)):
        if token.kind == "rest" and token.spacing_m > 0:
            return token.spacing_m
    return None


__all__ = [
    "StirrupToken",
    "StirrupsABCR",
    "abcr_from_legacy_tokens",
    "format_abcr",
    "migrate_spec",
    "parse_abcr",
    "parse_stirrups_spec",
    "rest_spacing_from_spec",
]
