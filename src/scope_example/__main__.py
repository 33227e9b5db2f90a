import sys
from pathlib import Path

from visibility.build import check_package
from visibility.config import CheckerConfig
from visibility.errors import BuildRejected

PACKAGE_DIR = Path(__file__).resolve().parent


def run() -> int:
    # El programa solo se ejecuta si su propio paquete supera el análisis de visibilidad
    try:
        check_package(PACKAGE_DIR, CheckerConfig.from_env())
    except BuildRejected as e:
        print(e.report(), file=sys.stderr)
        return 3
    from . import main
    main()
    return 0


if __name__ == "__main__":
    sys.exit(run())
