"""Tests for the default Python expression evaluator."""

from __future__ import annotations

import pytest

from htmp import Evaluator, PythonEvaluator, UndefinedError
from htmp.scope import Scope


@pytest.fixture
def evaluator() -> PythonEvaluator:
    return PythonEvaluator()


class TestEvaluate:
    def test_arithmetic(self, evaluator: PythonEvaluator) -> None:
        assert evaluator.evaluate("1 + 2", Scope()) == 3

    def test_surrounding_whitespace_is_ignored(self, evaluator: PythonEvaluator) -> None:
        assert evaluator.evaluate("  x * 2  ", Scope({"x": 4})) == 8

    def test_reads_whole_scope_chain(self, evaluator: PythonEvaluator) -> None:
        scope = Scope({"a": 1}).child({"b": 2}).child()
        assert evaluator.evaluate("a + b", scope) == 3

    def test_nearest_binding_wins(self, evaluator: PythonEvaluator) -> None:
        scope = Scope({"x": "outer"}).child({"x": "inner"})
        assert evaluator.evaluate("x", scope) == "inner"

    @pytest.mark.parametrize(
        ("source", "expected"),
        [("true", True), ("false", False), ("null", None), ("undefined", None)],
    )
    def test_literal_aliases(self, evaluator: PythonEvaluator, source: str, expected: object) -> None:
        assert evaluator.evaluate(source, Scope()) is expected

    def test_scope_shadows_aliases(self, evaluator: PythonEvaluator) -> None:
        assert evaluator.evaluate("null", Scope({"null": 0})) == 0

    def test_collections_and_calls(self, evaluator: PythonEvaluator) -> None:
        scope = Scope({"items": [3, 1, 2]})
        assert evaluator.evaluate("sorted(items)", scope) == [1, 2, 3]
        assert evaluator.evaluate("{'a': len(items)}", scope) == {"a": 3}

    def test_accepts_plain_mapping(self, evaluator: PythonEvaluator) -> None:
        assert evaluator.evaluate("a", {"a": 5}) == 5

    def test_satisfies_protocol(self, evaluator: PythonEvaluator) -> None:
        assert isinstance(evaluator, Evaluator)


class TestErrors:
    def test_undefined_name(self, evaluator: PythonEvaluator) -> None:
        with pytest.raises(UndefinedError) as exc_info:
            evaluator.evaluate("missing + 1", Scope())
        assert exc_info.value.name == "missing"
        assert exc_info.value.expression == "missing + 1"

    def test_did_you_mean(self, evaluator: PythonEvaluator) -> None:
        with pytest.raises(UndefinedError, match="Did you mean 'title'"):
            evaluator.evaluate("titel", Scope({"title": "x"}))

    def test_syntax_error_propagates(self, evaluator: PythonEvaluator) -> None:
        with pytest.raises(SyntaxError):
            evaluator.evaluate("1 +", Scope())

    def test_runtime_error_propagates(self, evaluator: PythonEvaluator) -> None:
        with pytest.raises(ZeroDivisionError):
            evaluator.evaluate("1 / 0", Scope())

    def test_restricted_builtins(self, evaluator: PythonEvaluator) -> None:
        with pytest.raises(UndefinedError):
            evaluator.evaluate("open('x')", Scope())

    def test_import_is_unavailable(self, evaluator: PythonEvaluator) -> None:
        with pytest.raises(ImportError):
            evaluator.execute("import os", Scope())


class TestExecute:
    def test_new_names_land_in_scope(self, evaluator: PythonEvaluator) -> None:
        scope = Scope({"items": [1, 2, 3]}).child()
        evaluator.execute("total = sum(items)", scope)
        assert scope.local == {"total": 6}

    def test_rebinding_writes_local_frame_only(self, evaluator: PythonEvaluator) -> None:
        root = Scope({"x": 1})
        child = root.child()
        evaluator.execute("x = x + 1", child)
        assert child["x"] == 2
        assert root["x"] == 1

    def test_unchanged_names_are_not_copied(self, evaluator: PythonEvaluator) -> None:
        child = Scope({"x": 1}).child()
        evaluator.execute("y = x", child)
        assert dict(child.local) == {"y": 1}

    def test_indented_script_body(self, evaluator: PythonEvaluator) -> None:
        scope = Scope()
        evaluator.execute("\n    a = 1\n    if a:\n        b = 2\n", scope)
        assert scope["b"] == 2

    def test_functions_defined_in_scripts(self, evaluator: PythonEvaluator) -> None:
        scope = Scope({"name": "ada"})
        evaluator.execute("def shout():\n    return name.upper()", scope)
        assert evaluator.evaluate("shout()", scope) == "ADA"

    def test_code_objects_are_cached(self, evaluator: PythonEvaluator) -> None:
        for value in range(5):
            evaluator.evaluate("x + 1", Scope({"x": value}))
        info = evaluator.cache_info()
        assert info.misses == 1
        assert info.hits == 4
