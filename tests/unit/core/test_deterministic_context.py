from __future__ import annotations

import pytest

from gsas.core.deterministic_context import DeterministicContext
from gsas.core.errors import ImmutableContextError, KeyNotFoundError


def test_construction_deep_copies_caller_data() -> None:
    original = {"agent": {"tier": "T2", "tags": ["a", "b"]}, "budget": 10}
    ctx = DeterministicContext(original, logical_time=5)

    original["agent"]["tier"] = "T4"
    original["agent"]["tags"].append("c")
    original["budget"] = 999
    original["new_key"] = True

    assert ctx["agent"] == {"tier": "T2", "tags": ["a", "b"]}
    assert ctx.get("budget") == 10
    assert not ctx.has("new_key")


def test_reads_return_independent_copies() -> None:
    ctx = DeterministicContext({"nested": {"items": [1, 2]}}, 0)

    first = ctx["nested"]
    first["items"].append(3)
    second = ctx.get("nested")
    second["extra"] = "x"

    assert ctx["nested"] == {"items": [1, 2]}
    assert ctx.data() == {"nested": {"items": [1, 2]}}


def test_get_returns_default_when_missing() -> None:
    ctx = DeterministicContext({"a": 1}, 0)
    assert ctx.get("missing") is None
    assert ctx.get("missing", 42) == 42


def test_getitem_missing_key_raises_key_not_found() -> None:
    ctx = DeterministicContext({}, 0)
    with pytest.raises(KeyNotFoundError, match="key 'absent' not found"):
        ctx["absent"]
    # Still a KeyError for callers using the Mapping protocol
    with pytest.raises(KeyError):
        ctx["absent"]


def test_writes_always_fail() -> None:
    ctx = DeterministicContext({"a": 1}, 0)

    with pytest.raises(ImmutableContextError):
        ctx["a"] = 2
    with pytest.raises(ImmutableContextError):
        ctx["b"] = 2
    with pytest.raises(ImmutableContextError):
        del ctx["a"]
    with pytest.raises(ImmutableContextError):
        ctx.set_item("a", 2)
    with pytest.raises(ImmutableContextError):
        ctx.delete_item("missing")
    with pytest.raises(ImmutableContextError):
        ctx._data = {}

    assert ctx["a"] == 1


def test_time_is_the_logical_timestamp() -> None:
    assert DeterministicContext({}, 1234).time == 1234
    assert DeterministicContext().time == 0


def test_none_data_is_empty_mapping() -> None:
    ctx = DeterministicContext(None, 0)
    assert len(ctx) == 0
    assert list(ctx) == []
    assert "x" not in ctx


def test_mapping_protocol() -> None:
    ctx = DeterministicContext({"a": 1, "b": [2]}, 3)
    assert set(ctx) == {"a", "b"}
    assert len(ctx) == 2
    assert "a" in ctx
    assert dict(ctx) == {"a": 1, "b": [2]}
    assert "time=3" in repr(ctx)
