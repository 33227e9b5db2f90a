from __future__ import annotations
from enum import Enum

# Prefijo por defecto que marca una función como privada a su módulo
PRIVATE_PREFIX = "_"


class Accessibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


def is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def accessibility_of(name: str, prefix: str = PRIVATE_PREFIX) -> Accessibility:
    """
    Deriva la accesibilidad a partir del nombre declarado.
    Los nombres dunder (`__init__`, `__getattr__`) son públicos.
    """
    if prefix and name.startswith(prefix) and not is_dunder(name):
        return Accessibility.PRIVATE
    return Accessibility.PUBLIC


# Predicados
def is_public(acc: Accessibility) -> bool:
    return acc == Accessibility.PUBLIC


def is_private(acc: Accessibility) -> bool:
    return acc == Accessibility.PRIVATE
