# visibility/checker.py
from __future__ import annotations
import ast
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Set, Union

from .config import CheckerConfig
from .diagnostics import DECLARATION, E001, E100, S001, SYNTAX, VISIBILITY, Diagnostics
from .errors import VisibilityViolation
from .observability import get_logger
from .resolver import VisibilityResolver
from .scope_arena import ScopeArena, ScopeId
from .symbols import Decision, Item, Reference

if TYPE_CHECKING:
    from parsing.source_loader import ParseResult, Program

log = get_logger()

# Lo que un nombre del módulo puede tener ligado: un ámbito (submódulo) o una función
Binding = Union[ScopeId, Item]

# -----------------------------------------------------------------------------
# Utilidades
# -----------------------------------------------------------------------------

def _pos(node: ast.AST) -> tuple[int, int]:
    return (int(getattr(node, "lineno", 0) or 0), int(getattr(node, "col_offset", 0) or 0))


def _is_overload(fn: Union[ast.FunctionDef, ast.AsyncFunctionDef]) -> bool:
    for dec in fn.decorator_list:
        if isinstance(dec, ast.Name) and dec.id == "overload":
            return True
        if isinstance(dec, ast.Attribute) and dec.attr == "overload":
            return True
    return False


def _local_names(fn: Union[ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda]) -> Set[str]:
    """Nombres locales de una función: parámetros y todo lo que se asigna en su cuerpo."""
    args = fn.args
    names = {a.arg for a in (*args.posonlyargs, *args.args, *args.kwonlyargs)}
    for extra in (args.vararg, args.kwarg):
        if extra is not None:
            names.add(extra.arg)
    declared_outside: Set[str] = set()
    body = fn.body if isinstance(fn.body, list) else [fn.body]
    for stmt in body:
        for node in ast.walk(stmt):
            if isinstance(node, ast.Name) and isinstance(node.ctx, (ast.Store, ast.Del)):
                names.add(node.id)
            elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
                names.add(node.name)
            elif isinstance(node, ast.ExceptHandler) and node.name:
                names.add(node.name)
            elif isinstance(node, (ast.Global, ast.Nonlocal)):
                declared_outside.update(node.names)
    # Las importaciones dentro de la función se ligan al visitarlas
    return names - declared_outside


# -----------------------------------------------------------------------------
# Visitor por módulo (pase 2)
# -----------------------------------------------------------------------------
class _ModuleVisitor(ast.NodeVisitor):
    """
    Recorre un módulo manteniendo los nombres ligados a nivel de módulo y
    resuelve cada referencia a una función conocida:
      • import pkg.mod [as x]           -> liga ámbitos
      • from <ruta> import f [as g]     -> liga ámbitos o funciones (la importación ya es una referencia)
      • from <ruta> import *            -> solo las funciones públicas
      • x.y.f                           -> recorre submódulos y luego funciones
      • f                               -> funciones locales o importadas
    Los nombres que no llevan a un módulo analizado se ignoran.
    """

    def __init__(self, checker: "VisibilityChecker", unit: "ParseResult", scope: ScopeId):
        self.checker = checker
        self.arena = checker.arena
        self.unit = unit
        self.scope = scope
        # Las funciones propias del módulo siempre están ligadas
        self.bindings: Dict[str, Binding] = dict(self.arena.get(scope).items)
        # Un marco por función anidada; None marca un nombre local que oculta al del módulo
        self._frames: List[Dict[str, Optional[Binding]]] = []

    def _lookup(self, name: str) -> Optional[Binding]:
        for frame in reversed(self._frames):
            if name in frame:
                return frame[name]
        return self.bindings.get(name)

    def _bind(self, name: str, target: Optional[Binding]) -> None:
        if self._frames:
            self._frames[-1][name] = target
        elif target is None:
            # El nombre ahora apunta a algo externo: deja de ser rastreable
            self.bindings.pop(name, None)
        else:
            self.bindings[name] = target

    def _base_for(self, node: ast.ImportFrom) -> Optional[List[str]]:
        if not node.level:
            return node.module.split(".") if node.module else None
        # Importación relativa: el paquete actual es el propio módulo si es un __init__
        pkg = list(self.unit.parts) if self.unit.is_package else list(self.unit.parts[:-1])
        up = node.level - 1
        if up >= len(pkg):
            return None
        pkg = pkg[:len(pkg) - up]
        if node.module:
            pkg.extend(node.module.split("."))
        return pkg

    # ------------------------------ importaciones ------------------------------
    def visit_Import(self, node: ast.Import):
        for alias in node.names:
            parts = alias.name.split(".")
            if alias.asname:
                self._bind(alias.asname, self.arena.lookup(parts))
            else:
                # `import a.b.c` liga solo `a`
                self._bind(parts[0], self.arena.lookup(parts[:1]))

    def visit_ImportFrom(self, node: ast.ImportFrom):
        base_parts = self._base_for(node)
        base = self.arena.lookup(base_parts) if base_parts else None
        for alias in node.names:
            if alias.name == "*":
                if base is not None:
                    # `import *` nunca trae nombres privados
                    for item in self.arena.get(base).items.values():
                        if not item.is_private:
                            self._bind(item.name, item)
                continue
            local = alias.asname or alias.name
            if base is None:
                self._bind(local, None)
                continue
            sub = self.arena.child(base, alias.name)
            if sub is not None:
                self._bind(local, sub)
                continue
            item = self.arena.item(base, alias.name)
            if item is not None:
                self.checker._reference(self.unit, self.scope, item, node)
            self._bind(local, item)

    # ------------------------------ funciones ------------------------------
    def _visit_function(self, node: Union[ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda]) -> None:
        # Decoradores, valores por defecto y anotaciones se evalúan en el ámbito que la contiene
        for dec in getattr(node, "decorator_list", []):
            self.visit(dec)
        self.visit(node.args)
        returns = getattr(node, "returns", None)
        if returns is not None:
            self.visit(returns)
        self._frames.append(dict.fromkeys(_local_names(node)))
        try:
            body = node.body if isinstance(node.body, list) else [node.body]
            for stmt in body:
                self.visit(stmt)
        finally:
            self._frames.pop()

    visit_FunctionDef = _visit_function
    visit_AsyncFunctionDef = _visit_function
    visit_Lambda = _visit_function

    # ------------------------------ referencias ------------------------------
    def visit_Name(self, node: ast.Name):
        target = self._lookup(node.id)
        if isinstance(target, Item):
            # Las importadas ya se verificaron en el `import`; aquí solo se registran
            self.checker._reference(self.unit, self.scope, target, node, report=target.scope == self.scope)

    def visit_Attribute(self, node: ast.Attribute):
        chain: List[ast.Attribute] = []
        cur: ast.AST = node
        while isinstance(cur, ast.Attribute):
            chain.append(cur)
            cur = cur.value
        if not isinstance(cur, ast.Name):
            self.generic_visit(node)
            return

        target = self._lookup(cur.id)
        if not isinstance(target, int):
            self.visit_Name(cur)
            return

        # Desde el atributo más interno hacia afuera: a.b -> a.b.f
        for attr in reversed(chain):
            sub = self.arena.child(target, attr.attr)
            if sub is not None:
                target = sub
                continue
            item = self.arena.item(target, attr.attr)
            if item is not None:
                self.checker._reference(self.unit, self.scope, item, attr)
            break


# -----------------------------------------------------------------------------
# Análisis estático de visibilidad
# -----------------------------------------------------------------------------
class VisibilityChecker:
    def __init__(self, config: Optional[CheckerConfig] = None) -> None:
        self.config = config or CheckerConfig()
        self.diag = Diagnostics()
        self.arena: ScopeArena = ScopeArena("__program__", private_prefix=self.config.private_prefix)
        self.resolver = VisibilityResolver(self.arena)
        self.references: List[Reference] = []

    # --------------- helpers de reporte ---------------
    def _error(self, phase: str, code: str, msg: str, node: Optional[ast.AST], module: str, **extra: Any) -> None:
        line, col = _pos(node) if node is not None else (0, 0)
        self.diag.add(phase=phase, code=code, message=msg, line=line, col=col, module=module, **extra)

    def _reference(self, unit: "ParseResult", caller: ScopeId, item: Item, node: ast.AST, *, report: bool = True) -> None:
        line, col = _pos(node)
        try:
            self.resolver.require_callable(caller, item, line=line, col=col)
            decision = Decision.CALLABLE
        except VisibilityViolation as exc:
            decision = Decision.DENIED
            if report:
                self._error(
                    VISIBILITY, E100, exc.describe(), node, unit.module,
                    name=item.name, owner=exc.owner, caller=exc.caller,
                )
        self.references.append(Reference(caller=caller, item=item, line=line, col=col, decision=decision))

    # ----------------------- pase 1: índice de funciones -----------------------
    def _index_module(self, unit: "ParseResult") -> None:
        scope = self.arena.ensure_path(unit.parts[1:])
        if unit.tree is None:
            return
        for stmt in unit.tree.body:
            if not isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
                continue
            if _is_overload(stmt):
                continue
            line, col = _pos(stmt)
            try:
                self.arena.declare(scope, stmt.name, line, col)
            except KeyError:
                self._error(DECLARATION, E001, f"Redeclaración de función '{stmt.name}'", stmt, unit.module, name=stmt.name)

    # ----------------------------- ejecución -----------------------------
    def run(self, program: "Program") -> "VisibilityChecker":
        for err in program.errors:
            self.diag.add(
                phase=SYNTAX, code=S001, message=err.msg,
                line=err.line, col=err.column, module=err.module, text=err.text,
            )

        self.arena = ScopeArena(program.root, private_prefix=self.config.private_prefix)
        self.resolver = VisibilityResolver(self.arena)

        # Pase 1: declarar todos los ámbitos y funciones; después el árbol queda fijo
        for unit in program.units:
            self._index_module(unit)
        self.arena.freeze()
        log.debug("indexed %d scopes, %d functions", len(self.arena), sum(1 for _ in self.arena.items()))

        # Pase 2: verificar cada referencia
        for unit in program.units:
            if unit.tree is None:
                continue
            scope = self.arena.lookup(unit.parts)
            assert scope is not None
            _ModuleVisitor(self, unit, scope).visit(unit.tree)

        if self.diag.empty():
            log.info("%s: %d references checked, no errors", program.root, len(self.references))
        else:
            log.info("%s: %d errors", program.root, len(self.diag))
        return self

    # ----------------------------- resultados -----------------------------
    def symbols(self) -> List[dict]:
        return [
            {
                "name": it.name,
                "scope": self.arena.qualified_name(it.scope),
                "kind": it.kind,
                "accessibility": it.accessibility.value,
                "line": it.line,
            }
            for it in self.arena.items()
        ]

    def reference_list(self) -> List[dict]:
        return [
            {
                "caller": self.arena.qualified_name(r.caller),
                "target": f"{self.arena.qualified_name(r.item.scope)}.{r.item.name}",
                "decision": r.decision.value,
                "line": r.line,
                "col": r.col,
            }
            for r in self.references
        ]


def analyze(program: "Program", config: Optional[CheckerConfig] = None) -> Dict[str, Any]:
    """Punto de entrada del análisis: devuelve ámbitos, símbolos, referencias y errores."""
    checker = VisibilityChecker(config).run(program)
    return {
        "scopes": checker.arena.dump(),
        "symbols": checker.symbols(),
        "references": checker.reference_list(),
        "errors": checker.diag.to_list(),
    }
