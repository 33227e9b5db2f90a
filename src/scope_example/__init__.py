"""
Programa de ejemplo: funciones públicas y privadas en módulos anidados.

Los submódulos se importan dentro de `main()`: importar el paquete no
ejecuta código de los módulos hasta que el análisis de visibilidad lo aprueba.
"""


def main():
    from . import module_a, module_b

    module_a.public_function()
    module_a.call_private_function()
    module_b.some_function()
