from __future__ import annotations
import ast
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from visibility.config import CheckerConfig
from visibility.observability import get_logger

from .error_listener import CollectingErrorListener, SyntaxDiagnostic

log = get_logger()


# Resultado del análisis sintáctico de un módulo
@dataclass
class ParseResult:
    """Árbol, nombre del módulo y errores de sintaxis."""
    tree: Optional[ast.Module]  # None si el módulo no se pudo parsear
    module: str  # Nombre con puntos, por ejemplo 'scope_example.module_a'
    is_package: bool = False  # True para un `__init__.py`
    path: Optional[Path] = None
    errors: List[SyntaxDiagnostic] = field(default_factory=list)

    def ok(self) -> bool:
        return not self.errors

    @property
    def parts(self) -> List[str]:
        return self.module.split(".")


# Conjunto de módulos que forman un programa (un paquete raíz y sus submódulos)
@dataclass
class Program:
    root: str
    units: List[ParseResult] = field(default_factory=list)

    @property
    def errors(self) -> List[SyntaxDiagnostic]:
        return [e for u in self.units for e in u.errors]

    def ok(self) -> bool:
        return not self.errors

    def unit(self, module: str) -> Optional[ParseResult]:
        for u in self.units:
            if u.module == module:
                return u
        return None


def _parse(code: str, module: str, filename: str, raise_on_error: bool):
    err = CollectingErrorListener()
    tree: Optional[ast.Module] = None
    try:
        tree = ast.parse(code, filename=filename)
    except SyntaxError as exc:
        if raise_on_error:
            raise
        err.syntax_error(module, exc)
    except ValueError as exc:
        if raise_on_error:
            raise
        err.invalid_source(module, exc)
    if err.has_errors():
        log.debug("syntax error in %s: %s", module, err.first())
    return tree, err.errors


# Construye el árbol de un módulo a partir de código fuente en texto
def build_from_text(
    code: str,
    *,
    module: str = "main",
    is_package: bool = False,
    raise_on_error: bool = False,
) -> ParseResult:
    tree, errors = _parse(code, module, f"<{module}>", raise_on_error)
    return ParseResult(tree=tree, module=module, is_package=is_package, errors=errors)


# Construye el árbol de un módulo a partir de un archivo
def build_from_file(
    path: Union[str, Path],
    *,
    module: Optional[str] = None,
    encoding: str = "utf-8",
    raise_on_error: bool = False,
) -> ParseResult:
    p = Path(path)
    is_package = p.name == "__init__.py"
    if module is None:
        module = p.parent.name if is_package else p.stem
    try:
        code = p.read_text(encoding=encoding)
    except UnicodeDecodeError as exc:
        if raise_on_error:
            raise
        err = CollectingErrorListener()
        err.decode_error(module, exc)
        log.debug("cannot decode %s: %s", p, err.first())
        return ParseResult(tree=None, module=module, is_package=is_package, path=p, errors=err.errors)
    tree, errors = _parse(code, module, str(p), raise_on_error)
    return ParseResult(tree=tree, module=module, is_package=is_package, path=p, errors=errors)


def build_from_sources(sources: Mapping[str, str], *, raise_on_error: bool = False) -> Program:
    """
    Construye un programa desde un diccionario {módulo: código}.
    Todos los módulos deben colgar de la misma raíz; un módulo con
    submódulos se trata como paquete.
    """
    if not sources:
        raise ValueError("Se necesita al menos un módulo")
    roots = {name.split(".")[0] for name in sources}
    if len(roots) != 1:
        raise ValueError(f"Los módulos deben compartir una única raíz, se encontraron: {sorted(roots)}")
    root = roots.pop()

    program = Program(root=root)
    for name in sorted(sources):
        is_package = name == root or any(other.startswith(name + ".") for other in sources)
        program.units.append(
            build_from_text(sources[name], module=name, is_package=is_package, raise_on_error=raise_on_error)
        )
    return program


def build_from_package(
    root: Union[str, Path],
    *,
    config: Optional[CheckerConfig] = None,
    raise_on_error: bool = False,
) -> Program:
    """Recorre un directorio de paquete y parsea cada `.py` (sin importarlo)."""
    config = config or CheckerConfig()
    root_path = Path(root).resolve()
    if not root_path.is_dir():
        raise NotADirectoryError(str(root_path))
    program = Program(root=root_path.name)

    found: Dict[str, ParseResult] = {}
    for dirpath, dirnames, filenames in os.walk(root_path):
        here = Path(dirpath)
        # Solo se desciende a subpaquetes reales y no excluidos
        dirnames[:] = sorted(
            d for d in dirnames
            if not config.is_skipped(d) and (here / d / "__init__.py").is_file()
        )
        rel = here.relative_to(root_path).parts
        prefix = [root_path.name, *rel]
        for fname in sorted(filenames):
            if not fname.endswith(".py"):
                continue
            if fname == "__init__.py":
                module = ".".join(prefix)
            else:
                module = ".".join([*prefix, fname[:-3]])
            found[module] = build_from_file(here / fname, module=module, raise_on_error=raise_on_error)

    program.units = [found[m] for m in sorted(found)]
    log.debug("loaded %d modules from %s", len(program.units), root_path)
    return program
