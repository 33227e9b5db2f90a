from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import List, Dict, Any

# Fases en las que se puede originar un diagnóstico.
SYNTAX = "syntax"
DECLARATION = "declaration"
VISIBILITY = "visibility"

# Códigos de error
S001 = "S001"  # Error de sintaxis en un módulo
E001 = "E001"  # Función redeclarada en el mismo ámbito
E100 = "E100"  # Función privada usada fuera de su ámbito


# Diagnóstico de un error durante el análisis (sintáctico, de declaración o de visibilidad).
@dataclass
class Diagnostic:
    phase: str      # Fase en la que ocurrió el error
    code: str       # Código del error, por ejemplo 'E100'
    message: str    # Descripción del error
    line: int       # Línea donde ocurrió el error
    col: int        # Columna donde ocurrió el error
    module: str     # Módulo (nombre con puntos) donde se detectó
    extra: Dict[str, Any]  # Información adicional relacionada al error

    def to_dict(self):
        return asdict(self)


# Colección ordenada de diagnósticos.
class Diagnostics:
    def __init__(self):
        self._items: List[Diagnostic] = []

    def __len__(self) -> int:
        return len(self._items)

    # Añade un nuevo diagnóstico; los datos extra se guardan tal cual.
    def add(self, *, phase: str, code: str, message: str, line: int, col: int, module: str = "", **extra):
        self._items.append(
            Diagnostic(phase=phase, code=code, message=message, line=line, col=col, module=module, extra=extra)
        )

    def extend(self, ds: "Diagnostics"):
        self._items.extend(ds._items)

    def empty(self) -> bool:
        return not self._items

    def codes(self) -> List[str]:
        return [d.code for d in self._items]

    def to_list(self) -> List[dict]:
        return [d.to_dict() for d in self._items]
