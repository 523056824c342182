"""
Governance Engine - fail-closed evaluation of registered primitives

The engine holds an ordered registry of named primitives and, for each
evaluation:
1. Evaluates primitives in strict registration order
2. Records one GovernanceSignal per evaluated primitive
3. Halts at the first failure (missing/invalid "valid", or a raising evaluate)
4. Generates a GovernanceProof over exactly the signals produced

Design Philosophy:
- Fail-closed: a failing or malformed signal denies, never permits
- Denial is data (GovernanceDecision), not an exception
- Registration is append-only; evaluation never mutates the registry

Concurrency: registration and clear() take the write side of a read/write
lock; evaluations and primitive_count() share the read side.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from gsas.core.config import get_config
from gsas.core.determinism_enforcer import validate_primitive_contract
from gsas.core.deterministic_context import DeterministicContext
from gsas.core.errors import (
    DuplicatePrimitiveIDError,
    EmptyPrimitiveIDError,
    MissingPrimitiveError,
)
from gsas.core.locks import ReadWriteLock
from gsas.core.primitive_contracts import (
    evaluate_safely,
    is_valid_result,
    primitive_version,
    result_reason,
)
from gsas.core.proof_theory import GovernanceProof, ProofGenerator


logger = logging.getLogger(__name__)


# ===================================================================
# Decision Models
# ===================================================================


class GovernanceSignal(BaseModel):
    """Normalized record of one primitive's evaluation"""

    model_config = ConfigDict(frozen=True)

    primitive_id: str = Field(description="Registry id of the primitive")
    version: str = Field(description="Primitive version at registration")
    valid: bool = Field(description="True only if the primitive returned valid=True")
    metadata: Any = Field(default_factory=dict, description="Primitive metadata")
    evidence: Any = Field(default_factory=list, description="Primitive evidence")

    @classmethod
    def from_result(cls, primitive_id: str, version: str, result: Any) -> "GovernanceSignal":
        if isinstance(result, Mapping):
            metadata = result.get("metadata", {})
            evidence = result.get("evidence", [])
        else:
            metadata, evidence = {}, []
        return cls(
            primitive_id=primitive_id,
            version=version,
            valid=is_valid_result(result),
            metadata=metadata,
            evidence=evidence,
        )


class GovernanceDecision(BaseModel):
    """Result of a governance evaluation"""

    model_config = ConfigDict(frozen=True)

    permitted: bool = Field(description="Whether the action is admitted")
    signals: List[GovernanceSignal] = Field(
        default_factory=list,
        description="Signals in evaluation order (stops at first failure)"
    )
    failure_reasons: List[str] = Field(
        default_factory=list,
        description="At most one reason: the primitive that denied"
    )
    proof: GovernanceProof = Field(description="Hash-committed proof of the decision")


# ===================================================================
# Engine
# ===================================================================


class GovernanceEngine:
    """
    Evaluates governance primitives in sequence, failing closed.

    Usage:
        engine = GovernanceEngine()
        engine.register_primitive("auth", auth_primitive)
        engine.register_primitive("budget", budget_primitive)

        ctx = DeterministicContext({"agent_id": "chat_agent"}, logical_time=7)
        decision = engine.evaluate(ctx)
        if not decision.permitted:
            print(decision.failure_reasons)
    """

    def __init__(
        self,
        proof_generator: Optional[ProofGenerator] = None,
        strict_registration: Optional[bool] = None,
    ):
        """
        Initialize governance engine.

        Args:
            proof_generator: ProofGenerator instance (default: new generator)
            strict_registration: Validate the version contract on registration
                (default: GSAS_STRICT_REGISTRATION)
        """
        if strict_registration is None:
            strict_registration = get_config().strict_registration

        self.proof_generator = proof_generator or ProofGenerator()
        self.strict_registration = strict_registration

        self._primitives: List[Any] = []
        self._primitive_ids: List[str] = []
        self._versions: Dict[str, str] = {}
        self._lock = ReadWriteLock()

        logger.debug(f"GovernanceEngine initialized (strict_registration={strict_registration})")

    # ===================================================================
    # Registry
    # ===================================================================

    def register_primitive(self, primitive_id: str, primitive: Any) -> None:
        """
        Register a primitive under a unique id.

        Registration order is evaluation order; ids are never reordered or
        overwritten.

        Raises:
            MissingPrimitiveError: If primitive is None
            EmptyPrimitiveIDError: If primitive_id is empty
            DuplicatePrimitiveIDError: If primitive_id is already registered
            MissingVersionError: If strict registration is on and version is empty
        """
        if primitive is None:
            raise MissingPrimitiveError()
        if not primitive_id:
            raise EmptyPrimitiveIDError()
        if self.strict_registration:
            validate_primitive_contract(primitive)

        with self._lock.write_locked():
            if primitive_id in self._versions:
                raise DuplicatePrimitiveIDError(primitive_id)

            version = primitive_version(primitive)
            self._primitives.append(primitive)
            self._primitive_ids.append(primitive_id)
            self._versions[primitive_id] = version

        logger.info(f"Registered primitive '{primitive_id}' (version={version})")

    def primitive_count(self) -> int:
        with self._lock.read_locked():
            return len(self._primitives)

    def clear(self) -> None:
        """Remove all registered primitives"""
        with self._lock.write_locked():
            self._primitives = []
            self._primitive_ids = []
            self._versions = {}
        logger.info("Governance registry cleared")

    # ===================================================================
    # Evaluation
    # ===================================================================

    def evaluate(self, context: DeterministicContext) -> GovernanceDecision:
        """
        Evaluate all registered primitives against context.

        The proof is stamped with wall-clock time; use
        evaluate_with_logical_time() for reproducible proofs.
        """
        return self._evaluate(context, logical_time=None)

    def evaluate_with_logical_time(
        self,
        context: DeterministicContext,
        logical_time: int,
    ) -> GovernanceDecision:
        """Evaluate with an explicit proof timestamp (deterministic)"""
        return self._evaluate(context, logical_time=logical_time)

    def _evaluate(
        self,
        context: DeterministicContext,
        logical_time: Optional[int],
    ) -> GovernanceDecision:
        with self._lock.read_locked():
            permitted = True
            signals: List[GovernanceSignal] = []
            failure_reasons: List[str] = []

            for primitive_id, primitive in zip(self._primitive_ids, self._primitives):
                result = evaluate_safely(primitive, context, primitive_id)
                signal = GovernanceSignal.from_result(
                    primitive_id, self._versions[primitive_id], result
                )
                signals.append(signal)
                logger.debug(f"Primitive '{primitive_id}' evaluated: valid={signal.valid}")

                if not signal.valid:
                    permitted = False
                    reason = f"Primitive '{primitive_id}' failed"
                    detail = result_reason(result)
                    if detail is not None:
                        reason = f"{reason}: {detail}"
                    failure_reasons.append(reason)
                    logger.info(f"Governance denied: {reason}")
                    # Fail closed: later primitives are never evaluated
                    break

            evaluation_order = [s.primitive_id for s in signals]
            versions = dict(self._versions)

        if logical_time is None:
            proof = self.proof_generator.generate_proof(
                permitted, evaluation_order, signals, versions
            )
        else:
            proof = self.proof_generator.generate_proof_with_time(
                permitted, evaluation_order, signals, versions, logical_time
            )

        return GovernanceDecision(
            permitted=permitted,
            signals=signals,
            failure_reasons=failure_reasons,
            proof=proof,
        )


# ===================================================================
# Global singleton
# ===================================================================

_governance_engine_instance: Optional[GovernanceEngine] = None


def get_governance_engine() -> GovernanceEngine:
    """
    Get global governance engine singleton.

    Returns:
        Singleton GovernanceEngine instance
    """
    global _governance_engine_instance
    if _governance_engine_instance is None:
        _governance_engine_instance = GovernanceEngine()
    return _governance_engine_instance
