"""
Governance Substrate Errors

Exception taxonomy for context access, primitive registration,
determinism lint and proof handling.

Registration and lint errors are programmer/configuration errors: they are
raised synchronously and never retried. A primitive returning valid=False
is NOT an error - denial travels inside the GovernanceDecision.
"""

from typing import List, Optional


class GovernanceError(Exception):
    """Base exception for all governance substrate errors"""
    pass


class ImmutableContextError(GovernanceError, TypeError):
    """Raised when a write is attempted on a frozen DeterministicContext"""

    def __init__(self, message: str = "context is immutable"):
        super().__init__(message)


class KeyNotFoundError(GovernanceError, KeyError):
    """Raised when a context key is absent"""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"key '{key}' not found")

    def __str__(self) -> str:
        return self.args[0]


class MissingPrimitiveError(GovernanceError, ValueError):
    """Raised when None is passed where a governance primitive is required"""

    def __init__(self, message: str = "primitive cannot be None"):
        super().__init__(message)


class EmptyPrimitiveIDError(GovernanceError, ValueError):
    """Raised when a primitive is registered under an empty id"""

    def __init__(self, message: str = "primitive ID cannot be empty"):
        super().__init__(message)


class DuplicatePrimitiveIDError(GovernanceError, ValueError):
    """Raised when a primitive id is registered twice"""

    def __init__(self, primitive_id: str):
        self.primitive_id = primitive_id
        super().__init__(f"primitive with ID '{primitive_id}' already registered")


class MissingVersionError(GovernanceError, ValueError):
    """Raised when a primitive exposes an empty version string"""

    def __init__(self, message: str = "primitive must have non-empty version"):
        super().__init__(message)


class NonDeterministicPrimitiveError(GovernanceError):
    """
    Raised when primitive source text fails the determinism lint.

    Attributes:
        violations: Every matched violation, in detection order
    """

    def __init__(self, violations: List[str]):
        self.violations = list(violations)
        super().__init__("; ".join(self.violations))


class ProofUnavailableError(GovernanceError, NotImplementedError):
    """Raised by proof verification, which is not supported"""

    def __init__(self, message: Optional[str] = None):
        if message is None:
            message = (
                "Full verification not yet supported. Proof verification "
                "requires stored execution context."
            )
        super().__init__(message)
