from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from .accessibility import Accessibility


class Decision(str, Enum):
    CALLABLE = "callable"
    DENIED = "denied"


@dataclass(frozen=True)
class Item:
    """Función declarada en exactamente un ámbito (índice en la arena)."""
    name: str
    scope: int
    accessibility: Accessibility
    line: int = 0
    col: int = 0
    kind: str = field(default="func", init=False)

    @property
    def is_private(self) -> bool:
        return self.accessibility == Accessibility.PRIVATE


@dataclass(frozen=True)
class Reference:
    """Uso de un `Item` desde un ámbito llamador, con la decisión tomada."""
    caller: int
    item: Item
    line: int
    col: int
    decision: Decision
