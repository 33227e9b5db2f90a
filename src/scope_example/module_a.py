def public_function():
    print("This is a public function in module A")


def _private_function():
    print("This is a private function in module A")


def call_private_function():
    # Dentro del mismo módulo la función privada es accesible
    _private_function()
