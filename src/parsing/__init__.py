"""
Carga de código fuente Python y construcción de árboles sintácticos.
"""

from .error_listener import CollectingErrorListener, SyntaxDiagnostic
from .source_loader import (
    ParseResult,
    Program,
    build_from_text,
    build_from_file,
    build_from_sources,
    build_from_package,
)

__all__ = [
    'CollectingErrorListener',
    'SyntaxDiagnostic',
    'ParseResult',
    'Program',
    'build_from_text',
    'build_from_file',
    'build_from_sources',
    'build_from_package',
]
