from __future__ import annotations

from enum import Enum
from typing import Literal

Side = Literal["top", "bottom"]
NodeEnd = Literal[1, 2]
BastonLine = Literal[1, 2]
ZoneName = Literal["z1", "z2", "z3"]

SIDES: tuple[Side, ...] = ("top", "bottom")
NODE_ENDS: tuple[NodeEnd, ...] = (1, 2)
BASTON_LINES: tuple[BastonLine, ...] = (1, 2)
ZONES: tuple[ZoneName, ...] = ("z1", "z2", "z3")


class SteelKind(str, Enum):
    """Forma de terminar una barra al llegar a un nodo."""

    CONTINUOUS = "continuous"
    HOOK = "hook"
    DEVELOPMENT = "development"

    @classmethod
    def parse(cls, value) -> "SteelKind | None":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        aliases = {
            "continuo": cls.CONTINUOUS,
            "gancho": cls.HOOK,
            "anclaje": cls.DEVELOPMENT,
            "desarrollo": cls.DEVELOPMENT,
        }
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            return None

    @property
    def terminates(self) -> bool:
        return self is not SteelKind.CONTINUOUS


__all__ = [
    "BASTON_LINES",
    "BastonLine",
    "NODE_ENDS",
    "NodeEnd",
    "SIDES",
    "Side",
    "SteelKind",
    "ZONES",
    "ZoneName",
]
