from __future__ import annotations

import hashlib
import json

import pytest

from gsas.core.errors import ProofUnavailableError
from gsas.core.governance_engine import GovernanceSignal
from gsas.core.proof_theory import GovernanceProof, ProofGenerator, commit_signal


SIGNALS = [
    {"primitive_id": "auth", "version": "1.0.0", "valid": True, "metadata": {"b": 2, "a": 1}, "evidence": []},
    {"primitive_id": "budget", "version": "2.0.0", "valid": False, "metadata": {"reason": "over"}, "evidence": ["x"]},
]
VERSIONS = {"auth": "1.0.0", "budget": "2.0.0", "later": "3.0.0"}


def test_generate_proof_with_time_is_deterministic() -> None:
    generator = ProofGenerator()
    first = generator.generate_proof_with_time(False, ["auth", "budget"], SIGNALS, VERSIONS, 12345)
    second = generator.generate_proof_with_time(False, ["auth", "budget"], SIGNALS, VERSIONS, 12345)

    assert first == second
    assert first.model_dump_json() == second.model_dump_json()
    assert first.generated_at == 12345
    assert first.decision is False
    assert first.evaluation_order == ["auth", "budget"]
    assert first.primitive_versions == VERSIONS
    assert len(first.signal_commitments) == 2


def test_commitment_is_sha256_of_canonical_json() -> None:
    expected_payload = json.dumps(
        {"metadata": {"a": 1, "b": 2}, "valid": True},
        sort_keys=True,
        separators=(",", ":"),
    )
    expected = hashlib.sha256(expected_payload.encode("utf-8")).hexdigest()
    assert commit_signal(SIGNALS[0]) == expected
    assert len(expected) == 64
    assert expected == expected.lower()


def test_commitment_ignores_id_version_and_evidence() -> None:
    other = dict(SIGNALS[0], primitive_id="other", version="9", evidence=["different"])
    assert commit_signal(other) == commit_signal(SIGNALS[0])


def test_commitment_binds_valid_and_metadata() -> None:
    assert commit_signal(dict(SIGNALS[0], valid=False)) != commit_signal(SIGNALS[0])
    assert commit_signal(dict(SIGNALS[0], metadata={"a": 1})) != commit_signal(SIGNALS[0])


def test_timestamp_is_committed_when_present() -> None:
    with_ts = dict(SIGNALS[0], timestamp=7)
    assert commit_signal(with_ts) != commit_signal(SIGNALS[0])
    assert commit_signal(with_ts) == commit_signal(dict(SIGNALS[0], timestamp=7))


def test_signal_model_and_mapping_commit_identically() -> None:
    signal = GovernanceSignal(**SIGNALS[0])
    assert commit_signal(signal) == commit_signal(SIGNALS[0])


def test_unserializable_metadata_degrades_to_error_digest() -> None:
    signal = {"valid": True, "metadata": {"handle": object()}}
    commitment = commit_signal(signal)
    assert commitment.startswith("error:")
    assert len(commitment) == len("error:") + 64

    nan_commitment = commit_signal({"valid": True, "metadata": {"score": float("nan")}})
    assert nan_commitment.startswith("error:")


def test_proof_generation_never_fails_on_bad_signal() -> None:
    proof = ProofGenerator().generate_proof_with_time(
        True, ["x"], [{"valid": True, "metadata": {"fn": len}}], {"x": "1"}, 1
    )
    assert proof.signal_commitments[0].startswith("error:")


def test_generate_proof_uses_wall_clock() -> None:
    proof = ProofGenerator().generate_proof(True, [], [], {})
    assert proof.generated_at > 0
    assert proof.signal_commitments == []


def test_verify_is_not_supported() -> None:
    proof = ProofGenerator().generate_proof_with_time(True, [], [], {}, 0)
    with pytest.raises(ProofUnavailableError, match="not yet supported"):
        proof.verify({})
    with pytest.raises(NotImplementedError):
        proof.verify()


def test_proof_is_immutable_and_serializes_with_field_names() -> None:
    proof = ProofGenerator().generate_proof_with_time(True, ["auth"], SIGNALS[:1], {"auth": "1.0.0"}, 5)
    with pytest.raises(Exception):
        proof.decision = False

    data = json.loads(proof.model_dump_json())
    assert set(data) == {
        "primitive_versions",
        "evaluation_order",
        "decision",
        "signal_commitments",
        "generated_at",
    }
    assert GovernanceProof.model_validate(data) == proof
