from . import module_a


def some_function():
    module_a.public_function()  # Las funciones públicas de otro módulo son accesibles
    # module_a._private_function()  # Rechazado por el análisis: no es visible fuera de module_a
