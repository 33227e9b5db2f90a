from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence

from .accessibility import PRIVATE_PREFIX, accessibility_of
from .symbols import Item

# Índice de un ámbito dentro de la arena. La raíz siempre es 0.
ScopeId = int
ROOT: ScopeId = 0


class ScopeTreeFrozenError(RuntimeError):
    """Se intentó modificar el árbol de ámbitos después de congelarlo."""


# Registro de un ámbito (paquete o módulo). El padre es un índice, nunca una referencia viva.
@dataclass
class ScopeRecord:
    name: str
    parent: Optional[ScopeId] = None  # None solo para la raíz del programa
    items: Dict[str, Item] = field(default_factory=dict)  # Funciones declaradas en este ámbito
    children: Dict[str, ScopeId] = field(default_factory=dict)  # Submódulos por nombre


# Arena plana de ámbitos: el árbol se construye una vez y luego queda fijo.
class ScopeArena:
    def __init__(self, root_name: str, *, private_prefix: str = PRIVATE_PREFIX):
        # Comienza con un único ámbito raíz (el programa).
        self._records: List[ScopeRecord] = [ScopeRecord(name=root_name)]
        self._private_prefix = private_prefix
        self._frozen = False

    def __len__(self) -> int:
        return len(self._records)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def root_name(self) -> str:
        return self._records[ROOT].name

    def get(self, scope: ScopeId) -> ScopeRecord:
        if not isinstance(scope, int) or not 0 <= scope < len(self._records):
            raise KeyError(f"Ámbito desconocido: {scope!r}")
        return self._records[scope]

    def freeze(self) -> None:
        self._frozen = True

    def _check_mutable(self) -> None:
        if self._frozen:
            raise ScopeTreeFrozenError("El árbol de ámbitos ya fue congelado")

    # ---------------------------- construcción ----------------------------
    def add_scope(self, name: str, parent: ScopeId = ROOT) -> ScopeId:
        """Crea un ámbito hijo de `parent`; si ya existe devuelve su índice."""
        self._check_mutable()
        parent_rec = self.get(parent)
        if name in parent_rec.children:
            return parent_rec.children[name]
        # El hijo siempre se agrega después del padre: la arena no puede tener ciclos.
        self._records.append(ScopeRecord(name=name, parent=parent))
        scope = len(self._records) - 1
        parent_rec.children[name] = scope
        return scope

    def ensure_path(self, path: Sequence[str]) -> ScopeId:
        """Crea (si hace falta) la cadena de ámbitos `path` bajo la raíz."""
        scope = ROOT
        for part in path:
            scope = self.add_scope(part, scope)
        return scope

    def declare(self, scope: ScopeId, name: str, line: int = 0, col: int = 0) -> Item:
        self._check_mutable()
        rec = self.get(scope)
        if name in rec.items:
            # Cada función pertenece a un único ámbito y se declara una sola vez.
            raise KeyError(f"Function '{name}' already defined in scope '{self.qualified_name(scope)}'")
        item = Item(
            name=name,
            scope=scope,
            accessibility=accessibility_of(name, self._private_prefix),
            line=line,
            col=col,
        )
        rec.items[name] = item
        return item

    # ----------------------------- consultas -----------------------------
    def child(self, scope: ScopeId, name: str) -> Optional[ScopeId]:
        return self.get(scope).children.get(name)

    def item(self, scope: ScopeId, name: str) -> Optional[Item]:
        return self.get(scope).items.get(name)

    def lookup(self, path: Sequence[str]) -> Optional[ScopeId]:
        """Resuelve una ruta absoluta (`["pkg", "mod"]`); el primer nombre debe ser la raíz."""
        if not path or path[0] != self.root_name:
            return None
        scope: Optional[ScopeId] = ROOT
        for part in path[1:]:
            scope = self.child(scope, part)
            if scope is None:
                return None
        return scope

    def ancestors(self, scope: ScopeId) -> Iterator[ScopeId]:
        cur = self.get(scope).parent
        while cur is not None:
            yield cur
            cur = self._records[cur].parent

    def path_of(self, scope: ScopeId) -> List[str]:
        names = [self.get(scope).name]
        names.extend(self._records[a].name for a in self.ancestors(scope))
        return names[::-1]

    def qualified_name(self, scope: ScopeId) -> str:
        return ".".join(self.path_of(scope))

    def items(self) -> Iterator[Item]:
        for rec in self._records:
            yield from rec.items.values()

    def dump(self) -> list:
        out = []
        for idx, rec in enumerate(self._records):
            out.append({
                "scope": self.qualified_name(idx),
                "parent": rec.parent,
                "entries": [
                    {"name": k, "kind": v.kind, "accessibility": v.accessibility.value}
                    for k, v in rec.items.items()
                ],
            })
        return out
