"""
Logging del analizador.

La librería queda en silencio por defecto (NullHandler); solo la CLI
agrega un handler hacia stderr. La salida del programa de ejemplo nunca
pasa por aquí.
"""

from __future__ import annotations

import logging
import sys
from typing import Final, Union

_LOGGER: Final[logging.Logger] = logging.getLogger("visibility")
_LOGGER.addHandler(logging.NullHandler())

_FORMAT = "%(levelname)s %(name)s: %(message)s"


def get_logger() -> logging.Logger:
    return _LOGGER


def configure_logging(level: Union[str, int] = "WARNING") -> logging.Logger:
    """Conecta el logger del paquete a stderr con el nivel indicado."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    # Reemplaza el handler anterior: sys.stderr puede haber cambiado entre llamadas
    for h in [h for h in _LOGGER.handlers if getattr(h, "_visibility_cli", False)]:
        _LOGGER.removeHandler(h)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._visibility_cli = True  # type: ignore[attr-defined]
    _LOGGER.addHandler(handler)
    _LOGGER.setLevel(level)
    return _LOGGER
