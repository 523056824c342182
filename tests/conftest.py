from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import pytest


class StubPrimitive:
    """Named primitive returning a fixed verdict and counting its calls."""

    def __init__(self, name: str, version: str = "1.0.0", valid: bool = True, reason: Optional[str] = None):
        self.name = name
        self.version = version
        self.valid = valid
        self.reason = reason
        self.calls = 0

    def evaluate(self, context: Any) -> Dict[str, Any]:
        self.calls += 1
        metadata: Dict[str, Any] = {"primitive": self.name}
        if self.reason is not None:
            metadata["reason"] = self.reason
        return {"valid": self.valid, "metadata": metadata, "evidence": []}


class UnnamedPrimitive:
    """Primitive without the naming capability."""

    def __init__(self, version: str = "1.0.0", valid: bool = True):
        self.version = version
        self.valid = valid
        self.calls = 0

    def evaluate(self, context: Any) -> Dict[str, Any]:
        self.calls += 1
        return {"valid": self.valid, "metadata": {}, "evidence": []}


class CallablePrimitive:
    """Primitive delegating to an arbitrary function of the context."""

    def __init__(self, name: str, fn: Callable[[Any], Any], version: str = "1.0.0"):
        self.name = name
        self.version = version
        self._fn = fn

    def evaluate(self, context: Any) -> Any:
        return self._fn(context)


@pytest.fixture(autouse=True)
def _reset_singletons(monkeypatch: pytest.MonkeyPatch) -> None:
    from gsas.core import config, determinism_enforcer, governance_engine

    monkeypatch.setattr(config, "_config", None)
    monkeypatch.setattr(determinism_enforcer, "_enforcer_instance", None)
    monkeypatch.setattr(governance_engine, "_governance_engine_instance", None)
    monkeypatch.delenv("GSAS_STRICT_REGISTRATION", raising=False)
    monkeypatch.delenv("GSAS_LOG_LEVEL", raising=False)
    monkeypatch.delenv("GSAS_DETERMINISM_RULES_PATH", raising=False)


@pytest.fixture
def make_primitive() -> Callable[..., StubPrimitive]:
    return StubPrimitive


@pytest.fixture
def make_unnamed() -> Callable[..., UnnamedPrimitive]:
    return UnnamedPrimitive


@pytest.fixture
def make_callable() -> Callable[..., CallablePrimitive]:
    return CallablePrimitive


@pytest.fixture
def call_log() -> List[Any]:
    return []
