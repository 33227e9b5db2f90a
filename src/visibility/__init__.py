"""
Análisis estático de visibilidad entre módulos anidados.
Exporta la función principal 'analyze', el resolutor y el modelo de ámbitos.
La compuerta de construcción vive en `visibility.build`.
"""

from .checker import analyze, VisibilityChecker
from .accessibility import Accessibility, accessibility_of, is_public, is_private
from .symbols import Item, Reference, Decision
from .scope_arena import ScopeArena, ScopeRecord, ScopeTreeFrozenError, ROOT
from .resolver import VisibilityResolver
from .errors import VisibilityViolation, BuildRejected
from .diagnostics import Diagnostics
from .config import CheckerConfig

__all__ = [
    # Función principal
    'analyze',
    'VisibilityChecker',

    # Accesibilidad
    'Accessibility',
    'accessibility_of',
    'is_public',
    'is_private',

    # Símbolos
    'Item',
    'Reference',
    'Decision',

    # Arena de ámbitos
    'ScopeArena',
    'ScopeRecord',
    'ScopeTreeFrozenError',
    'ROOT',

    # Resolutor
    'VisibilityResolver',

    # Errores y diagnósticos
    'VisibilityViolation',
    'BuildRejected',
    'Diagnostics',

    'CheckerConfig',
]
