from __future__ import annotations

from .errors import VisibilityViolation
from .scope_arena import ScopeArena, ScopeId
from .symbols import Decision, Item


class VisibilityResolver:
    """
    Decide si una función es invocable desde un ámbito llamador.

    Reglas:
      • Pública: invocable desde cualquier ámbito que llegue a ella por una ruta
        (ancestros, descendientes o hermanos mediante ruta explícita).
      • Privada: invocable solo desde el mismo ámbito que la declara. El padre,
        los hijos y los hermanos quedan rechazados aunque tengan una ruta al ámbito.
    """

    def __init__(self, arena: ScopeArena):
        self.arena = arena

    def decide(self, caller: ScopeId, item: Item) -> Decision:
        self.arena.get(caller)  # KeyError si el ámbito no existe
        if not item.is_private:
            return Decision.CALLABLE
        return Decision.CALLABLE if caller == item.scope else Decision.DENIED

    def require_callable(self, caller: ScopeId, item: Item, *, line: int = 0, col: int = 0) -> Item:
        if self.decide(caller, item) is Decision.DENIED:
            raise VisibilityViolation(
                item,
                owner=self.arena.qualified_name(item.scope),
                caller=self.arena.qualified_name(caller),
                line=line,
                col=col,
            )
        return item
