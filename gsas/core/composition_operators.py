"""
Composition Operators - combine N primitives into one composite primitive

Operators:
- SequentialAnd: evaluate in order, stop at the first failure
- ParallelAnd: evaluate every primitive, require all to pass
- Threshold(k): evaluate every primitive, require at least k to pass

Composites satisfy the primitive contract themselves (version + evaluate),
so they nest to arbitrary depth and register with the engine like any
atomic primitive. Their version is an order-sensitive digest of the
sub-versions: identical primitives in identical order yield the same version.
"""

import hashlib
from typing import Any, List, Optional, Sequence

from gsas.core.primitive_contracts import (
    EvaluationResult,
    evaluate_safely,
    is_valid_result,
    make_result,
    primitive_name,
    primitive_version,
)


def _versions_digest(primitives: Sequence[Any]) -> str:
    joined = "\x1f".join(primitive_version(p) for p in primitives)
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()[:12]


class CompositePrimitive:
    """Base for composites: holds the sub-primitives and an optional name"""

    kind = "composite"

    def __init__(self, primitives: Sequence[Any], name: Optional[str] = None):
        self.primitives = tuple(primitives)
        self._name = name

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def version(self) -> str:
        return f"{self.kind}-{_versions_digest(self.primitives)}"

    def _evaluate_all(self, context: Any) -> List[bool]:
        """Evaluate every sub-primitive exactly once, in input order"""
        return [
            is_valid_result(evaluate_safely(p, context, primitive_name(p, i)))
            for i, p in enumerate(self.primitives)
        ]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, size={len(self.primitives)})"


class SequentialAnd(CompositePrimitive):
    """All primitives must pass; evaluation stops at the first failure."""

    kind = "sequential-and"

    def evaluate(self, context: Any) -> EvaluationResult:
        for i, primitive in enumerate(self.primitives):
            label = primitive_name(primitive, i)
            result = evaluate_safely(primitive, context, label)
            if not is_valid_result(result):
                return make_result(False, {
                    "reason": f"Primitive {label} failed",
                    "failed_index": i,
                })
        return make_result(True, {"message": "All primitives passed sequentially"})


class ParallelAnd(CompositePrimitive):
    """All primitives must pass; every primitive is evaluated."""

    kind = "parallel-and"

    def evaluate(self, context: Any) -> EvaluationResult:
        results = self._evaluate_all(context)
        if all(results):
            return make_result(True, {"message": "All primitives passed in parallel"})

        failed = [
            primitive_name(p, i)
            for i, (p, ok) in enumerate(zip(self.primitives, results))
            if not ok
        ]
        return make_result(False, {
            "reason": f"Failed primitives: {', '.join(failed)}",
            "failed_primitives": failed,
        })


class Threshold(CompositePrimitive):
    """At least k primitives must pass; every primitive is evaluated."""

    kind = "threshold"

    def __init__(self, primitives: Sequence[Any], k: int, name: Optional[str] = None):
        if k < 0:
            raise ValueError(f"threshold k must be >= 0, got {k}")
        super().__init__(primitives, name=name)
        self.k = k

    @property
    def version(self) -> str:
        return f"{self.kind}-{self.k}-{_versions_digest(self.primitives)}"

    def evaluate(self, context: Any) -> EvaluationResult:
        results = self._evaluate_all(context)
        passed = sum(results)
        total = len(results)

        if passed >= self.k:
            return make_result(True, {
                "message": f"{passed} of {total} primitives passed",
                "passed": passed,
                "total": total,
            })
        return make_result(False, {
            "reason": f"Only {passed} of {total} primitives passed, need at least {self.k}",
            "passed": passed,
            "total": total,
            "required": self.k,
        })


def sequential_and(primitives: Sequence[Any], name: Optional[str] = None) -> SequentialAnd:
    return SequentialAnd(primitives, name=name)


def parallel_and(primitives: Sequence[Any], name: Optional[str] = None) -> ParallelAnd:
    return ParallelAnd(primitives, name=name)


def threshold(primitives: Sequence[Any], k: int, name: Optional[str] = None) -> Threshold:
    return Threshold(primitives, k, name=name)


class PrimitiveComposer:
    """
    Composes primitives with explicit semantics.

    Usage:
        composer = PrimitiveComposer()
        gate = composer.threshold([auth, budget, review], k=2)
        engine.register_primitive("quorum", gate)
    """

    def sequential_and(self, primitives: Sequence[Any], name: Optional[str] = None) -> SequentialAnd:
        return sequential_and(primitives, name=name)

    def parallel_and(self, primitives: Sequence[Any], name: Optional[str] = None) -> ParallelAnd:
        return parallel_and(primitives, name=name)

    def threshold(self, primitives: Sequence[Any], k: int, name: Optional[str] = None) -> Threshold:
        return threshold(primitives, k, name=name)
