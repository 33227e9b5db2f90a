from dataclasses import dataclass
from typing import Optional


# Clase que define la estructura de un error de sintaxis
@dataclass
class SyntaxDiagnostic:
    """Contenedor para los detalles de un error de sintaxis."""
    module: str  # Módulo (nombre con puntos) donde ocurrió el error
    line: int  # Línea donde ocurrió el error
    column: int  # Columna donde ocurrió el error
    text: str  # Texto de la línea que causó el error
    msg: str  # El mensaje de error

    def __str__(self):
        return f"[Sintáctico] {self.module} línea {self.line}, col {self.column}: cerca de '{self.text}' → {self.msg}"


# Acumula los errores de sintaxis en lugar de propagarlos
class CollectingErrorListener:
    def __init__(self):
        self.errors = []  # Lista de SyntaxDiagnostic

    def syntax_error(self, module: str, exc: SyntaxError):
        # `ast.parse` entrega la línea y el offset (base 1) dentro de la excepción
        text = (exc.text or "").strip() or "<EOF>"
        line = exc.lineno or 0
        column = max((exc.offset or 1) - 1, 0)
        self.errors.append(SyntaxDiagnostic(module, line, column, text, exc.msg or str(exc)))

    def decode_error(self, module: str, exc: UnicodeDecodeError):
        # Posición del primer byte inválido, contada sobre los bytes crudos
        raw = exc.object[:exc.start]
        line = raw.count(b"\n") + 1
        column = exc.start - (raw.rfind(b"\n") + 1)
        text = repr(exc.object[exc.start:exc.end])
        self.errors.append(SyntaxDiagnostic(module, line, column, text, f"no se puede decodificar como {exc.encoding}: {exc.reason}"))

    def invalid_source(self, module: str, exc: ValueError):
        # `ast.parse` rechaza bytes nulos con ValueError antes de Python 3.12
        self.errors.append(SyntaxDiagnostic(module, 0, 0, "<EOF>", str(exc)))

    def has_errors(self):
        return len(self.errors) > 0

    def first(self) -> Optional[SyntaxDiagnostic]:
        return self.errors[0] if self.errors else None

    def report(self):
        return "\n".join(str(e) for e in self.errors)
