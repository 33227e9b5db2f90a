from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional, Union

from parsing.source_loader import Program, build_from_package

from .checker import analyze
from .config import CheckerConfig
from .errors import BuildRejected
from .observability import get_logger

log = get_logger()


def ensure_buildable(program: Program, config: Optional[CheckerConfig] = None) -> Dict[str, Any]:
    """
    Ejecuta el análisis completo y rechaza el programa si hay cualquier error
    (de sintaxis, de declaración o de visibilidad). Un programa rechazado no
    debe ejecutarse.
    """
    result = analyze(program, config)
    if result["errors"]:
        log.warning("%s rejected with %d errors", program.root, len(result["errors"]))
        raise BuildRejected(result["errors"])
    return result


def check_package(root: Union[str, Path], config: Optional[CheckerConfig] = None) -> Dict[str, Any]:
    config = config or CheckerConfig()
    return ensure_buildable(build_from_package(root, config=config), config)
