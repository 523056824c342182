"""
Primitive Contracts - the capability interface every governance primitive satisfies

A governance primitive exposes:
- version: non-empty, stable for logically equivalent behavior
- evaluate(context) -> EvaluationResult

A primitive may additionally expose `name` (NamedPrimitive). Callers that
need a display name use primitive_name(), which falls back to a positional
placeholder when the naming capability is absent.

EvaluationResult is a plain mapping:
    {"valid": bool, "metadata": {...}, "evidence": [...]}
A result without a boolean True under "valid" is a failure (fail-closed).
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


EvaluationResult = Dict[str, Any]


@runtime_checkable
class GovernancePrimitive(Protocol):
    """Base capability: versioned, side-effect-free boolean check"""

    @property
    def version(self) -> str:
        ...

    def evaluate(self, context: Any) -> EvaluationResult:
        ...


@runtime_checkable
class NamedPrimitive(GovernancePrimitive, Protocol):
    """Optional naming capability"""

    @property
    def name(self) -> str:
        ...


def primitive_name(primitive: Any, index: int) -> str:
    """Name of the primitive, or `primitive_<index>` when it has none"""
    name = getattr(primitive, "name", None)
    if isinstance(name, str) and name:
        return name
    return f"primitive_{index}"


def primitive_version(primitive: Any) -> str:
    """
    Version of the primitive as a string.

    A missing or None version is "", and a non-string version is str()-ed
    so that signals, proofs and composite digests always carry text.
    """
    version = getattr(primitive, "version", None)
    if version is None:
        return ""
    if not isinstance(version, str):
        return str(version)
    return version


def make_result(
    valid: bool,
    metadata: Optional[Dict[str, Any]] = None,
    evidence: Optional[List[Any]] = None,
) -> EvaluationResult:
    """Build a well-formed EvaluationResult"""
    return {
        "valid": valid,
        "metadata": metadata if metadata is not None else {},
        "evidence": evidence if evidence is not None else [],
    }


def is_valid_result(result: Any) -> bool:
    """True only for a mapping carrying the boolean True under "valid"."""
    if not isinstance(result, Mapping):
        return False
    return result.get("valid") is True


def result_reason(result: Any) -> Optional[str]:
    """metadata.reason of a result, if it is a string"""
    if not isinstance(result, Mapping):
        return None
    metadata = result.get("metadata")
    if isinstance(metadata, Mapping):
        reason = metadata.get("reason")
        if isinstance(reason, str):
            return reason
    return None


def evaluate_safely(primitive: Any, context: Any, label: str) -> Any:
    """
    Evaluate a primitive, converting a raised exception into a failed result.

    The returned value is whatever the primitive produced, which may still
    be malformed; callers judge it with is_valid_result().

    Args:
        primitive: Primitive to evaluate
        context: Evaluation context
        label: Identifier used in the log line and failure reason

    Returns:
        The primitive's result, or an invalid result describing the exception
    """
    try:
        return primitive.evaluate(context)
    except Exception as e:
        logger.warning(f"Primitive {label} raised during evaluate: {type(e).__name__}: {e}")
        return make_result(
            False,
            {"reason": f"evaluate raised {type(e).__name__}: {e}"},
        )
