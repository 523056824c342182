"""
Determinism Enforcer - static text-pattern lint for primitive source

Rejects source text that exhibits known non-deterministic constructs:
1. Empty or whitespace-only source
2. Imports of banned modules (bracketed/quoted, plain, `from X import`)
3. Calls to banned symbols (wall clock, sleep, randomness, env/file/net/process, output)
4. Dynamic import tokens (`__import__`, ...)
5. Package-level mutable containers (global mutable state)

Design Philosophy:
- Pattern matching, not parsing: shared across Go and Python primitive source
- Conservative: benign code containing a banned token is still rejected
- Every violation is collected, so one call surfaces every problem

Banned-token lists live in determinism_rules.yaml and are loaded once per
process into a frozen DeterminismRules.
"""

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Optional, Pattern, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field

from gsas.core.config import get_config
from gsas.core.errors import (
    MissingPrimitiveError,
    MissingVersionError,
    NonDeterministicPrimitiveError,
)


logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).with_name("determinism_rules.yaml")


class DeterminismRules(BaseModel):
    """Immutable banned-token configuration"""

    model_config = ConfigDict(frozen=True)

    banned_imports: Tuple[str, ...] = Field(
        description="Module names whose import is forbidden"
    )
    banned_functions: Tuple[str, ...] = Field(
        description="Dotted call names forbidden in primitive source"
    )
    dynamic_import_tokens: Tuple[str, ...] = Field(
        default=("__import__",),
        description="Substrings indicating a dynamic import"
    )
    global_mutable_patterns: Tuple[str, ...] = Field(
        default=(),
        description="Regexes (multiline) matching package-level mutable containers"
    )


@lru_cache(maxsize=None)
def _load_rules_file(path: Path) -> DeterminismRules:
    if not path.exists():
        raise FileNotFoundError(f"Determinism rules file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    rules = DeterminismRules(
        banned_imports=tuple(data.get("banned_imports", [])),
        banned_functions=tuple(data.get("banned_functions", [])),
        dynamic_import_tokens=tuple(data.get("dynamic_import_tokens", ["__import__"])),
        global_mutable_patterns=tuple(data.get("global_mutable_patterns", [])),
    )
    logger.debug(
        f"Loaded determinism rules from {path}: "
        f"{len(rules.banned_imports)} imports, {len(rules.banned_functions)} functions"
    )
    return rules


def load_determinism_rules(path: Optional[Path] = None) -> DeterminismRules:
    """
    Load banned-token rules (cached per path).

    Args:
        path: YAML rules file (default: GSAS_DETERMINISM_RULES_PATH, then the packaged file)

    Returns:
        Frozen DeterminismRules
    """
    if path is None:
        path = get_config().determinism_rules_path or DEFAULT_RULES_PATH
    return _load_rules_file(Path(path).resolve())


def _import_patterns(module: str) -> List[Pattern[str]]:
    name = re.escape(module)
    return [
        # import "time"  /  import ( "fmt" "time" )
        re.compile(rf'import\s*(?:\([^)]*)?"{name}"'),
        # import time  /  import json, time
        re.compile(rf"\bimport\s+(?:[\w.]+\s*,\s*)*{name}\b"),
        # from time import time
        re.compile(rf"\bfrom\s+{name}(?:\.[\w.]+)?\s+import\b"),
    ]


class DeterminismEnforcer:
    """
    Enforces determinism of governance primitive source text.

    Usage:
        enforcer = DeterminismEnforcer()
        enforcer.validate_deterministic(source)      # raises NonDeterministicPrimitiveError
        enforcer.validate_primitive_contract(prim)   # raises MissingVersionError
    """

    def __init__(self, rules: Optional[DeterminismRules] = None):
        self.rules = rules or load_determinism_rules()

        self._import_checks = [
            (module, _import_patterns(module)) for module in self.rules.banned_imports
        ]
        self._function_checks = [
            (fn, re.compile(rf"(?<!\w){re.escape(fn)}\s*\("))
            for fn in self.rules.banned_functions
        ]
        self._global_checks = [
            re.compile(p, re.MULTILINE) for p in self.rules.global_mutable_patterns
        ]

    def find_violations(self, source: str) -> List[str]:
        """
        Collect every determinism violation in source text.

        Returns:
            Violation messages in detection order (empty if clean)
        """
        if not source or not source.strip():
            return ["empty source code"]

        violations = []

        for module, patterns in self._import_checks:
            if any(p.search(source) for p in patterns):
                violations.append(f"Banned import '{module}' found")

        for fn, pattern in self._function_checks:
            if pattern.search(source):
                violations.append(f"Banned function '{fn}' found")

        for token in self.rules.dynamic_import_tokens:
            if token in source:
                violations.append(
                    f"Direct {token} call detected - use import statements instead"
                )

        for pattern in self._global_checks:
            if pattern.search(source):
                violations.append("Potential global mutable state detected")
                break

        return violations

    def validate_deterministic(self, source: str) -> None:
        """
        Validate that primitive source text is deterministic.

        Raises:
            NonDeterministicPrimitiveError: Joined list of all violations
        """
        violations = self.find_violations(source)
        if violations:
            raise NonDeterministicPrimitiveError(violations)

    def validate_primitive_source(self, source: str) -> None:
        """
        Validate a primitive implementation from its source text.

        Source must be supplied explicitly: runtime reflection cannot
        recover a primitive's original text.

        Raises:
            ValueError: If no source is given
            NonDeterministicPrimitiveError: If the lint rejects it
        """
        if not source:
            raise ValueError(
                "source code required for validation - runtime reflection "
                "cannot retrieve primitive source"
            )
        self.validate_deterministic(source)

    def validate_primitive_contract(self, primitive: Any) -> None:
        """
        Validate that a primitive satisfies the version contract.

        Raises:
            MissingPrimitiveError: If primitive is None
            MissingVersionError: If version is empty
        """
        if primitive is None:
            raise MissingPrimitiveError()
        if not getattr(primitive, "version", None):
            raise MissingVersionError()


# ===================================================================
# Module-level helpers
# ===================================================================

_enforcer_instance: Optional[DeterminismEnforcer] = None


def get_determinism_enforcer() -> DeterminismEnforcer:
    """Get the process-wide enforcer (rules loaded on first call)"""
    global _enforcer_instance
    if _enforcer_instance is None:
        _enforcer_instance = DeterminismEnforcer()
    return _enforcer_instance


def validate_deterministic(source: str) -> None:
    get_determinism_enforcer().validate_deterministic(source)


def validate_primitive_contract(primitive: Any) -> None:
    get_determinism_enforcer().validate_primitive_contract(primitive)
