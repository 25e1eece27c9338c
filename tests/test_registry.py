from linescribe.core.models import GLOBAL_VARIABLES
from linescribe.core.registry import PropertyRegistry


def test_merge_inserts_then_updates():
    registry = PropertyRegistry.with_globals()
    source = {"a": "1"}

    table = registry.merge("T", source)
    source["a"] = "mutated"
    assert table == {"a": "1"}

    registry.merge("T", {"b": "2"})
    assert registry.table("T") == {"a": "1", "b": "2"}
    assert list(registry) == [GLOBAL_VARIABLES, "T"]


def test_set_global_guard():
    registry = PropertyRegistry()

    assert registry.set_global("k", "first", override=False) is True
    assert registry.set_global("k", "second", override=False) is False
    assert registry[GLOBAL_VARIABLES]["k"] == "first"
    assert registry.set_global("k", "third") is True
    assert registry[GLOBAL_VARIABLES]["k"] == "third"


def test_ensure_never_replaces():
    registry = PropertyRegistry()
    registry["L"] = {"x": "1"}

    assert registry.ensure("L") == {"x": "1"}
    assert registry.table("missing") is None
