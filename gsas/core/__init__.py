"""
GSAS Core

Key Components:
1. DeterministicContext - frozen evaluation snapshot with logical time
2. Primitive contracts - version + evaluate, optional name
3. Composition operators - SequentialAnd, ParallelAnd, Threshold(k)
4. GovernanceEngine - ordered, fail-closed evaluation
5. ProofGenerator - SHA-256 signal commitments
6. DeterminismEnforcer / ComplianceChecker - registration-time checks

Usage:
    from gsas.core import DeterministicContext, GovernanceEngine, threshold

    engine = GovernanceEngine()
    engine.register_primitive("quorum", threshold([a, b, c], k=2))
    decision = engine.evaluate_with_logical_time(DeterministicContext({}, 1), 1)
"""

from .errors import (
    GovernanceError,
    ImmutableContextError,
    KeyNotFoundError,
    MissingPrimitiveError,
    EmptyPrimitiveIDError,
    DuplicatePrimitiveIDError,
    MissingVersionError,
    NonDeterministicPrimitiveError,
    ProofUnavailableError,
)
from .deterministic_context import DeterministicContext
from .primitive_contracts import (
    EvaluationResult,
    GovernancePrimitive,
    NamedPrimitive,
    make_result,
    primitive_name,
)
from .determinism_enforcer import (
    DeterminismEnforcer,
    DeterminismRules,
    get_determinism_enforcer,
    load_determinism_rules,
    validate_deterministic,
    validate_primitive_contract,
)
from .compliance_checker import ComplianceChecker, ComplianceReport, ComplianceViolation
from .composition_operators import (
    PrimitiveComposer,
    SequentialAnd,
    ParallelAnd,
    Threshold,
    sequential_and,
    parallel_and,
    threshold,
)
from .proof_theory import GovernanceProof, ProofGenerator, commit_signal
from .governance_engine import (
    GovernanceDecision,
    GovernanceEngine,
    GovernanceSignal,
    get_governance_engine,
)

__all__ = [
    # Errors
    "GovernanceError",
    "ImmutableContextError",
    "KeyNotFoundError",
    "MissingPrimitiveError",
    "EmptyPrimitiveIDError",
    "DuplicatePrimitiveIDError",
    "MissingVersionError",
    "NonDeterministicPrimitiveError",
    "ProofUnavailableError",
    # Context and contracts
    "DeterministicContext",
    "EvaluationResult",
    "GovernancePrimitive",
    "NamedPrimitive",
    "make_result",
    "primitive_name",
    # Lint and compliance
    "DeterminismEnforcer",
    "DeterminismRules",
    "get_determinism_enforcer",
    "load_determinism_rules",
    "validate_deterministic",
    "validate_primitive_contract",
    "ComplianceChecker",
    "ComplianceReport",
    "ComplianceViolation",
    # Composition
    "PrimitiveComposer",
    "SequentialAnd",
    "ParallelAnd",
    "Threshold",
    "sequential_and",
    "parallel_and",
    "threshold",
    # Proofs and engine
    "GovernanceProof",
    "ProofGenerator",
    "commit_signal",
    "GovernanceDecision",
    "GovernanceEngine",
    "GovernanceSignal",
    "get_governance_engine",
]
