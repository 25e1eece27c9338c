import copy

import pytest

from linescribe.core.errors import MacroError
from linescribe.core.registry import PropertyRegistry
from linescribe.macros.evaluator import MacroEvaluator, StrictMacroEvaluator


@pytest.fixture
def tables():
    registry = PropertyRegistry.with_globals()
    registry.set_global("stage", "prod")
    registry.merge("DB", {"host": "db.local", "stage": "shadowed"})
    registry.merge("Other", {"prodkey": "found"})
    return registry


@pytest.mark.parametrize("text, expected", [
    ("plain text", "plain text"),
    ("${stage}", "prod"),
    ("${host}:${stage}", "db.local:prod"),
    ("${${stage}key}", "found"),
    ("keep ${unknown} as-is", "keep ${unknown} as-is"),
    ("${", "${"),
])
def test_default_evaluator(tables, text, expected):
    assert MacroEvaluator().evaluate(False, text, tables) == expected


def test_first_table_wins(tables):
    """
    ORDER TEST: GLOBAL.VARIABLES comes first, so it shadows later labels.
    """
    assert MacroEvaluator().evaluate(False, "${stage}", tables) == "prod"


def test_evaluation_is_pure(tables):
    before = copy.deepcopy(dict(tables))
    MacroEvaluator().evaluate(True, "${stage} ${unknown}", tables)

    assert dict(tables) == before


def test_none_and_empty_registry():
    evaluator = MacroEvaluator()

    assert evaluator.evaluate(False, None, {}) is None
    assert evaluator.evaluate(False, "${x}", None) == "${x}"


def test_self_reference_terminates():
    registry = {"G": {"a": "x${a}"}}
    result = MacroEvaluator().evaluate(False, "${a}", registry)

    assert result.startswith("xxxx")
    assert result.endswith("${a}")


def test_strict_evaluator_rejects_unknown(tables):
    strict = StrictMacroEvaluator()

    assert strict.evaluate(False, "${host}", tables) == "db.local"
    with pytest.raises(MacroError):
        strict.evaluate(False, "${P:does-not-exist}", tables)
