"""
Compliance Checker - registration-time contract conformance

Validates that governance primitives satisfy the primitive contract:
1. version is a non-empty string
2. evaluate() against an empty, zero-time context returns a mapping with a "valid" key
3. (optional) supplied source text passes the determinism lint

Content violations are reported, never raised. Only a missing primitive
is a hard error.
"""

import logging
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, Field

from gsas.core.deterministic_context import DeterministicContext
from gsas.core.determinism_enforcer import DeterminismEnforcer, get_determinism_enforcer
from gsas.core.errors import MissingPrimitiveError, NonDeterministicPrimitiveError


logger = logging.getLogger(__name__)


class ComplianceViolation(BaseModel):
    """Single compliance violation"""
    primitive: str = Field(description="Name of the violating primitive")
    requirement: str = Field(description="Requirement that was violated")
    details: str = Field(description="Human-readable explanation")

    def __str__(self) -> str:
        return f"[{self.primitive}] {self.requirement}: {self.details}"


class ComplianceReport(BaseModel):
    """Result of compliance checking"""
    compliant: bool = Field(description="True if no violations were found")
    violations: List[ComplianceViolation] = Field(default_factory=list)
    checked: List[str] = Field(
        default_factory=list,
        description="Requirements that were checked"
    )


class ComplianceChecker:
    """
    Validates governance primitives against the primitive contract.

    Usage:
        checker = ComplianceChecker()
        report = checker.check_primitive(primitive)
        if not report.compliant:
            for violation in report.violations:
                print(violation)
    """

    def __init__(self, enforcer: Optional[DeterminismEnforcer] = None):
        self.enforcer = enforcer or get_determinism_enforcer()

    def check_primitive(self, primitive: Any, source: Optional[str] = None) -> ComplianceReport:
        """
        Check a single primitive.

        Args:
            primitive: Primitive to check
            source: Optional source text to run through the determinism lint

        Returns:
            ComplianceReport (compliant or not)

        Raises:
            MissingPrimitiveError: If primitive is None
        """
        if primitive is None:
            raise MissingPrimitiveError()

        name = getattr(primitive, "name", None)
        if not isinstance(name, str) or not name:
            name = "unknown"
        checked = ["version", "evaluate_contract"]
        violations = []

        version = getattr(primitive, "version", None)
        if not version:
            violations.append(ComplianceViolation(
                primitive=name,
                requirement="version",
                details="must be non-empty",
            ))
        elif not isinstance(version, str):
            violations.append(ComplianceViolation(
                primitive=name,
                requirement="version",
                details=f"must be a string, got {type(version).__name__}",
            ))

        try:
            result = primitive.evaluate(DeterministicContext({}, 0))
        except Exception as e:
            violations.append(ComplianceViolation(
                primitive=name,
                requirement="evaluate_contract",
                details=f"evaluate() raised {type(e).__name__}: {e}",
            ))
        else:
            if not isinstance(result, Mapping) or "valid" not in result:
                violations.append(ComplianceViolation(
                    primitive=name,
                    requirement="evaluate_contract",
                    details="evaluate() must return a mapping with a 'valid' key",
                ))

        if source is not None:
            checked.append("determinism")
            try:
                self.enforcer.validate_deterministic(source)
            except NonDeterministicPrimitiveError as e:
                violations.append(ComplianceViolation(
                    primitive=name,
                    requirement="determinism",
                    details=str(e),
                ))

        if violations:
            logger.info(f"Primitive {name} has {len(violations)} compliance violation(s)")

        return ComplianceReport(
            compliant=not violations,
            violations=violations,
            checked=checked,
        )

    def check_all(self, primitives: Sequence[Any]) -> ComplianceReport:
        """
        Check several primitives and merge their reports.

        Raises:
            MissingPrimitiveError: If any primitive is None (no partial report)
        """
        compliant = True
        violations: List[ComplianceViolation] = []
        checked: List[str] = []

        for primitive in primitives:
            report = self.check_primitive(primitive)
            if not report.compliant:
                compliant = False
                violations.extend(report.violations)
            checked.extend(report.checked)

        return ComplianceReport(compliant=compliant, violations=violations, checked=checked)
