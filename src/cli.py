# src/cli.py
import sys
from pathlib import Path

from parsing.source_loader import Program, build_from_file, build_from_package
from visibility.checker import analyze
from visibility.config import CheckerConfig
from visibility.diagnostics import SYNTAX
from visibility.observability import configure_logging


def load_program(path: str, config: CheckerConfig) -> Program:
    """
    Construye el programa a analizar a partir de una ruta.

    Si la ruta es un directorio se recorre como paquete (cada `.py` es un
    ámbito hijo del paquete raíz). Si es un archivo, el propio módulo es la raíz.
    """
    p = Path(path)
    if p.is_dir():
        return build_from_package(p, config=config)
    unit = build_from_file(p)
    return Program(root=unit.module, units=[unit])


def execute_cli(argv=None) -> int:
    """
    Ejecuta el análisis de visibilidad desde la terminal.

    Muestra la tabla de ámbitos y símbolos y los errores detectados.
    Códigos de salida: 0 sin errores, 1 uso incorrecto, 2 errores de sintaxis,
    3 errores de visibilidad o declaración.
    """
    argv = sys.argv if argv is None else argv
    if len(argv) < 2:
        print("Uso: python -m cli <archivo.py | directorio_de_paquete>", file=sys.stderr)
        return 1

    config = CheckerConfig.from_env()
    configure_logging(config.log_level)

    file_path = argv[1]
    if not Path(file_path).exists():
        print(f"No existe {file_path}", file=sys.stderr)
        return 1
    print(f"Procesando {file_path}...\n")

    program = load_program(file_path, config)
    analysis_result = analyze(program, config)

    # Mostrar ámbitos y sus funciones
    print("=== Tabla de Ámbitos ===")
    for scope in analysis_result["scopes"]:
        entries = ", ".join(f"{e['name']} ({e['accessibility']})" for e in scope["entries"])
        print(f"{scope['scope']}: {entries or '-'}")

    # Mostrar errores
    print("\n=== Errores detectados ===")
    errors = analysis_result["errors"]
    if not errors:
        print("No se encontraron errores ✅")
        return 0
    for error in errors:
        print(f"{error['module']}:{error['line']}:{error['col']} {error['code']}: {error['message']}")
    return 2 if any(e["phase"] == SYNTAX for e in errors) else 3


if __name__ == "__main__":
    sys.exit(execute_cli())
