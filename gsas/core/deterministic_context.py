"""
Deterministic Context - frozen evaluation snapshot

Every governance primitive is evaluated against a DeterministicContext:
- The caller's data is deep-copied at construction
- Every read returns an independent deep copy, never a live reference
- Writes always fail with ImmutableContextError
- Time is a logical timestamp supplied by the caller, never the wall clock
"""

import copy
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional

from gsas.core.errors import ImmutableContextError, KeyNotFoundError


class DeterministicContext(Mapping):
    """
    Immutable, deterministic evaluation context.

    Usage:
        ctx = DeterministicContext({"agent": {"tier": "T2"}}, logical_time=42)
        tier = ctx["agent"]["tier"]
        ctx.get("budget", 0)
        ctx.time  # 42
    """

    __slots__ = ("_data", "_time")

    def __init__(self, data: Optional[Dict[str, Any]] = None, logical_time: int = 0):
        object.__setattr__(self, "_data", copy.deepcopy(dict(data or {})))
        object.__setattr__(self, "_time", int(logical_time))

    def __setattr__(self, name: str, value: Any) -> None:
        raise ImmutableContextError()

    def __delattr__(self, name: str) -> None:
        raise ImmutableContextError()

    @property
    def time(self) -> int:
        """Logical timestamp supplied at construction"""
        return self._time

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._data:
            return copy.deepcopy(self._data[key])
        return default

    def has(self, key: str) -> bool:
        return key in self._data

    def data(self) -> Dict[str, Any]:
        """Deep copy of the whole snapshot"""
        return copy.deepcopy(self._data)

    def __getitem__(self, key: str) -> Any:
        if key not in self._data:
            raise KeyNotFoundError(key)
        return copy.deepcopy(self._data[key])

    def __setitem__(self, key: str, value: Any) -> None:
        raise ImmutableContextError()

    def __delitem__(self, key: str) -> None:
        raise ImmutableContextError()

    # Explicit spellings of the write-once contract
    def set_item(self, key: str, value: Any) -> None:
        self[key] = value

    def delete_item(self, key: str) -> None:
        del self[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"DeterministicContext(time={self._time}, data={self._data!r})"

    def __copy__(self) -> "DeterministicContext":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "DeterministicContext":
        return self
