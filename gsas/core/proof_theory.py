"""
Proof Theory - hash-committed record of how a governance decision was reached

A GovernanceProof captures:
- What was evaluated: primitive versions and evaluation order
- What was decided: the boolean decision
- Per-signal SHA-256 commitments over {valid, metadata[, timestamp]}
- When: a logical timestamp (explicit, or wall clock for operational use)

Commitments use canonical JSON (sorted keys, compact separators), so equal
signals always commit to the same digest. Proof generation never fails:
unserializable signal content degrades to a digest of the error text.
"""

import hashlib
import json
import logging
import time
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from gsas.core.errors import ProofUnavailableError


logger = logging.getLogger(__name__)


class GovernanceProof(BaseModel):
    """Structured, immutable proof of a governance decision"""

    model_config = ConfigDict(frozen=True)

    # What was evaluated
    primitive_versions: Dict[str, str] = Field(
        default_factory=dict,
        description="Primitive id -> version for every registered primitive"
    )
    evaluation_order: List[str] = Field(
        default_factory=list,
        description="Ids of the primitives actually evaluated, in order"
    )

    # What was decided
    decision: bool = Field(description="Whether the action was permitted")
    signal_commitments: List[str] = Field(
        default_factory=list,
        description="SHA-256 hex digests aligned with evaluation_order"
    )

    # When
    generated_at: int = Field(description="Logical timestamp")

    def verify(self, primitives: Optional[Mapping] = None) -> bool:
        """
        Independently verify the proof.

        Not supported: verification requires the stored execution context,
        which proofs do not carry.

        Raises:
            ProofUnavailableError: Always
        """
        raise ProofUnavailableError()


def _signal_payload(signal: Any) -> Dict[str, Any]:
    if isinstance(signal, BaseModel):
        fields = {name: getattr(signal, name) for name in type(signal).model_fields}
    elif isinstance(signal, Mapping):
        fields = signal
    else:
        fields = {}

    payload = {
        "valid": fields.get("valid"),
        "metadata": fields.get("metadata"),
    }
    if "timestamp" in fields:
        payload["timestamp"] = fields["timestamp"]
    return payload


def commit_signal(signal: Any) -> str:
    """
    Create a SHA-256 commitment to a signal's valid/metadata/timestamp.

    Args:
        signal: GovernanceSignal or signal mapping

    Returns:
        Lowercase hex digest, or "error:<hex>" if the content is not serializable
    """
    try:
        data = json.dumps(
            _signal_payload(signal),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        logger.warning(f"Signal not serializable, committing to error text: {e}")
        return "error:" + hashlib.sha256(str(e).encode("utf-8")).hexdigest()
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


class ProofGenerator:
    """
    Generates proofs for governance decisions.

    Usage:
        generator = ProofGenerator()
        proof = generator.generate_proof_with_time(
            True, ["auth"], signals, {"auth": "1.0.0"}, logical_time=12345
        )
    """

    def commit_signal(self, signal: Any) -> str:
        return commit_signal(signal)

    def generate_proof(
        self,
        decision: bool,
        evaluation_order: Sequence[str],
        signals: Sequence[Any],
        primitive_versions: Mapping,
    ) -> GovernanceProof:
        """Generate a proof stamped with wall-clock nanoseconds (operational use only)."""
        return self.generate_proof_with_time(
            decision,
            evaluation_order,
            signals,
            primitive_versions,
            time.time_ns(),
        )

    def generate_proof_with_time(
        self,
        decision: bool,
        evaluation_order: Sequence[str],
        signals: Sequence[Any],
        primitive_versions: Mapping,
        logical_time: int,
    ) -> GovernanceProof:
        """
        Generate a proof with an explicit logical time.

        Identical inputs always produce identical proofs.

        Args:
            decision: Final permit/deny
            evaluation_order: Ids of evaluated primitives, in order
            signals: Signals aligned with evaluation_order
            primitive_versions: Primitive id -> version
            logical_time: Timestamp recorded as generated_at

        Returns:
            GovernanceProof
        """
        return GovernanceProof(
            primitive_versions=dict(primitive_versions),
            evaluation_order=list(evaluation_order),
            decision=decision,
            signal_commitments=[commit_signal(s) for s in signals],
            generated_at=logical_time,
        )
