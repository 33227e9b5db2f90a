from __future__ import annotations
from typing import List, Optional

from .symbols import Item


class VisibilityViolation(Exception):
    """Referencia a una función privada desde un ámbito distinto al que la declara."""

    def __init__(self, item: Item, owner: str, caller: str, line: Optional[int] = None, col: Optional[int] = None):
        self.item = item
        self.owner = owner
        self.caller = caller
        self.line = line
        self.col = col
        where = f" (línea {line}, col {col})" if line is not None else ""
        super().__init__(self.describe() + where)

    def describe(self) -> str:
        return (
            f"La función privada '{self.item.name}' de '{self.owner}' "
            f"no es accesible desde '{self.caller}'"
        )


class BuildRejected(Exception):
    """El programa no supera el análisis estático y no debe ejecutarse."""

    def __init__(self, errors: List[dict]):
        self.errors = errors
        super().__init__(self.report())

    def report(self) -> str:
        return "\n".join(
            f"{e.get('module') or '<input>'}:{e['line']}:{e['col']} {e['code']}: {e['message']}"
            for e in self.errors
        )
