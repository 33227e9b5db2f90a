"""
Tests del análisis estático de visibilidad sobre programas construidos en memoria.
"""

from textwrap import dedent

import pytest

from parsing.source_loader import build_from_sources
from visibility.build import ensure_buildable
from visibility.checker import analyze
from visibility.config import CheckerConfig
from visibility.errors import BuildRejected

MODULE_A = """
def public_function():
    print("This is a public function in module A")

def _private_function():
    print("This is a private function in module A")

def call_private_function():
    _private_function()
"""

MODULE_B = """
from . import module_a

def some_function():
    module_a.public_function()
"""

ROOT = """
from . import module_a, module_b

def main():
    module_a.public_function()
    module_a.call_private_function()
    module_b.some_function()
"""


def check(**overrides):
    """Analiza el programa de ejemplo reemplazando los módulos indicados."""
    sources = {"app": ROOT, "app.module_a": MODULE_A, "app.module_b": MODULE_B}
    for name, code in overrides.items():
        sources["app." + name if name != "app" else name] = code
    program = build_from_sources({k: dedent(v) for k, v in sources.items()})
    return analyze(program)


def codes(result):
    return [e["code"] for e in result["errors"]]


def ref(result, caller, target):
    return [r["decision"] for r in result["references"] if r["caller"] == caller and r["target"] == target]


class TestAllowed:
    def test_example_program_is_clean(self):
        res = check()
        assert res["errors"] == []

    def test_public_call_from_sibling(self):
        res = check()
        assert ref(res, "app.module_b", "app.module_a.public_function") == ["callable"]

    def test_private_call_inside_declaring_module(self):
        res = check()
        assert ref(res, "app.module_a", "app.module_a._private_function") == ["callable"]

    def test_public_call_from_parent(self):
        res = check()
        assert ref(res, "app", "app.module_a.call_private_function") == ["callable"]

    def test_symbols_and_scopes(self):
        res = check()
        assert [s["scope"] for s in res["scopes"]] == ["app", "app.module_a", "app.module_b"]
        private = [s for s in res["symbols"] if s["name"] == "_private_function"]
        assert private == [{
            "name": "_private_function",
            "scope": "app.module_a",
            "kind": "func",
            "accessibility": "private",
            "line": 5,
        }]

    def test_absolute_import_with_alias(self):
        res = check(module_b="""
            import app.module_a as ma

            def some_function():
                ma.public_function()
            """)
        assert res["errors"] == []
        assert ref(res, "app.module_b", "app.module_a.public_function") == ["callable"]

    def test_star_import_binds_only_public(self):
        res = check(module_b="""
            from .module_a import *

            def some_function():
                public_function()
            """)
        assert res["errors"] == []
        assert ref(res, "app.module_b", "app.module_a.public_function") == ["callable"]
        assert ref(res, "app.module_b", "app.module_a._private_function") == []

    def test_external_names_are_ignored(self):
        res = check(module_b="""
            import os
            from collections import OrderedDict

            def some_function():
                os.path.join("a", "b")
                return OrderedDict()
            """)
        assert res["errors"] == []
        assert [r for r in res["references"] if r["caller"] == "app.module_b"] == []


class TestRejected:
    def test_sibling_calls_private_through_module(self):
        res = check(module_b="""
            from . import module_a

            def some_function():
                module_a._private_function()
            """)
        assert codes(res) == ["E100"]
        err = res["errors"][0]
        assert err["phase"] == "visibility"
        assert err["module"] == "app.module_b"
        assert (err["line"], err["col"]) == (5, 4)
        assert err["extra"]["owner"] == "app.module_a"
        assert err["extra"]["caller"] == "app.module_b"
        assert "_private_function" in err["message"]

    def test_importing_private_name_is_reported_once(self):
        res = check(module_b="""
            from .module_a import _private_function

            def some_function():
                _private_function()
            """)
        assert codes(res) == ["E100"]
        assert res["errors"][0]["line"] == 2
        assert ref(res, "app.module_b", "app.module_a._private_function") == ["denied", "denied"]

    def test_parent_calls_private_of_child(self):
        res = check(app="""
            from . import module_a

            def main():
                module_a._private_function()
            """)
        assert codes(res) == ["E100"]
        assert res["errors"][0]["extra"]["caller"] == "app"

    def test_child_imports_private_of_parent(self):
        res = check(
            app="""
            def _helper():
                pass
            """,
            module_b="""
            from . import _helper
            """,
        )
        assert codes(res) == ["E100"]
        assert res["errors"][0]["extra"]["owner"] == "app"

    def test_absolute_attribute_chain(self):
        res = check(module_b="""
            import app.module_a

            def some_function():
                app.module_a._private_function()
            """)
        assert codes(res) == ["E100"]

    def test_private_function_of_second_sibling(self):
        # Una segunda función privada en un módulo hermano, usada desde module_a
        res = check(
            module_c="""
            def _helper():
                pass
            """,
            module_a=MODULE_A + """
from . import module_c

def uses_sibling():
    module_c._helper()
""",
        )
        assert codes(res) == ["E100"]
        assert res["errors"][0]["extra"]["owner"] == "app.module_c"
        assert res["errors"][0]["extra"]["caller"] == "app.module_a"

    def test_private_in_nested_package(self):
        program = build_from_sources({
            "app": "",
            "app.pkg": "from .deep import _secret\n",
            "app.pkg.deep": "def _secret():\n    pass\n\ndef reveal():\n    return _secret()\n",
        })
        res = analyze(program)
        assert codes(res) == ["E100"]
        assert res["errors"][0]["module"] == "app.pkg"
        assert ref(res, "app.pkg.deep", "app.pkg.deep._secret") == ["callable"]


class TestOtherDiagnostics:
    def test_redeclared_function(self):
        res = check(module_b="""
            def some_function():
                pass

            def some_function():
                pass
            """)
        assert codes(res) == ["E001"]
        assert res["errors"][0]["line"] == 5

    def test_overloads_are_not_redeclarations(self):
        res = check(module_b="""
            from typing import overload

            @overload
            def some_function(x: int) -> int: ...
            @overload
            def some_function(x: str) -> str: ...
            def some_function(x):
                return x
            """)
        assert res["errors"] == []

    def test_syntax_error_is_collected(self):
        res = check(module_b="def broken(:\n    pass\n")
        assert codes(res) == ["S001"]
        assert res["errors"][0]["phase"] == "syntax"
        assert res["errors"][0]["module"] == "app.module_b"

    def test_custom_private_prefix(self):
        sources = {"app": "", "app.a": "def _x():\n    pass\n", "app.b": "from .a import _x\n"}
        res = analyze(build_from_sources(sources), CheckerConfig(private_prefix="p_"))
        assert res["errors"] == []


def test_analysis_is_repeatable():
    assert check() == check()


def test_ensure_buildable_rejects_violations():
    program = build_from_sources({
        "app": "",
        "app.module_a": dedent(MODULE_A),
        "app.module_b": "from . import module_a\nmodule_a._private_function()\n",
    })
    with pytest.raises(BuildRejected) as exc:
        ensure_buildable(program)
    assert [e["code"] for e in exc.value.errors] == ["E100"]
    assert "app.module_b:2:0 E100" in exc.value.report()


def test_ensure_buildable_returns_analysis():
    program = build_from_sources({k: dedent(v) for k, v in {
        "app": ROOT, "app.module_a": MODULE_A, "app.module_b": MODULE_B,
    }.items()})
    result = ensure_buildable(program)
    assert result["errors"] == []


class TestLocalNames:
    def test_parameter_shadows_imported_module(self):
        res = check(module_b=(
            "from . import module_a\n\n"
            "def some_function(module_a):\n"
            "    module_a._private_function()\n"
        ))
        assert res["errors"] == []

    def test_local_assignment_shadows_imported_module(self):
        res = check(module_b=(
            "from . import module_a\n\n"
            "def some_function():\n"
            "    module_a = object()\n"
            "    return module_a._private_function\n"
        ))
        assert res["errors"] == []

    def test_lambda_parameter_shadows_imported_module(self):
        res = check(module_b=(
            "from . import module_a\n\n"
            "f = lambda module_a: module_a._private_function()\n"
        ))
        assert res["errors"] == []

    def test_import_inside_function_is_checked(self):
        res = check(module_b=(
            "def some_function():\n"
            "    from . import module_a\n"
            "    module_a._private_function()\n"
        ))
        assert codes(res) == ["E100"]
        assert res["errors"][0]["line"] == 3

    def test_global_declaration_uses_module_binding(self):
        res = check(module_b=(
            "from . import module_a\n\n"
            "def some_function():\n"
            "    global module_a\n"
            "    module_a._private_function()\n"
        ))
        assert codes(res) == ["E100"]

    def test_function_import_does_not_leak_to_module(self):
        res = check(module_b=(
            "def some_function():\n"
            "    from . import module_a\n"
            "    module_a.public_function()\n\n"
            "module_a._private_function()\n"
        ))
        assert res["errors"] == []
        assert ref(res, "app.module_b", "app.module_a.public_function") == ["callable"]
