"""
GSAS CLI

Commands:
- gsas lint FILE...                       Determinism lint for primitive source files
- gsas check MODULE:ATTR [--json]         Compliance report for a primitive (or list)
- gsas evaluate MODULE:ATTR [--context]   Evaluate an engine / primitive mapping once
- gsas rules                              Show the loaded banned-token rules
"""

import importlib
import json
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from gsas import __version__
from gsas.cli.report import (
    render_compliance_report,
    render_decision,
    render_lint_results,
    render_rules,
)
from gsas.core.compliance_checker import ComplianceChecker
from gsas.core.config import get_config
from gsas.core.determinism_enforcer import get_determinism_enforcer
from gsas.core.deterministic_context import DeterministicContext
from gsas.core.errors import GovernanceError
from gsas.core.governance_engine import GovernanceEngine


logger = logging.getLogger(__name__)
console = Console()


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_time=False,
            show_path=False,
        ))


def _load_object(target: str) -> Any:
    """Resolve a MODULE:ATTR reference"""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise click.BadParameter(f"expected MODULE:ATTR, got '{target}'")

    # Allow modules that live in the working directory
    if "" not in sys.path:
        sys.path.insert(0, "")

    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import '{module_name}': {e}")

    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise click.BadParameter(f"'{module_name}' has no attribute '{attr}'")
    return obj


@click.group()
@click.version_option(version=__version__, prog_name="gsas")
@click.option("--log-level", default=None, help="Override GSAS_LOG_LEVEL")
def cli(log_level: Optional[str]):
    """GSAS - Governance Substrate for Autonomous Systems"""
    _setup_logging((log_level or get_config().log_level).upper())


@cli.command(name="lint")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
def lint_cmd(files: List[Path]):
    """Run the determinism lint over primitive source files."""
    enforcer = get_determinism_enforcer()
    results: Dict[str, List[str]] = {}
    for path in files:
        source = path.read_text(encoding="utf-8")
        results[str(path)] = enforcer.find_violations(source)

    render_lint_results(results, console)
    if any(results.values()):
        sys.exit(1)


@cli.command(name="check")
@click.argument("target")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
def check_cmd(target: str, as_json: bool):
    """Check a primitive (or a list of primitives) for contract compliance."""
    obj = _load_object(target)
    checker = ComplianceChecker()

    try:
        if isinstance(obj, (list, tuple)):
            report = checker.check_all(obj)
        else:
            report = checker.check_primitive(obj)
    except GovernanceError as e:
        console.print(f"❌ [red]{escape(str(e))}[/red]")
        sys.exit(2)

    if as_json:
        click.echo(report.model_dump_json(indent=2))
    else:
        render_compliance_report(report, console)

    if not report.compliant:
        sys.exit(1)


@cli.command(name="evaluate")
@click.argument("target")
@click.option(
    "--context", "context_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON object used as the evaluation context"
)
@click.option("--logical-time", default=0, type=int, help="Logical time for context and proof")
@click.option("--json", "as_json", is_flag=True, help="Print the decision as JSON")
def evaluate_cmd(target: str, context_file: Optional[Path], logical_time: int, as_json: bool):
    """
    Evaluate a GovernanceEngine, or a mapping of id -> primitive, once.

    Exit code is 0 when permitted and 1 when denied.
    """
    obj = _load_object(target)

    if isinstance(obj, GovernanceEngine):
        engine = obj
    elif isinstance(obj, Mapping):
        engine = GovernanceEngine()
        try:
            for primitive_id, primitive in obj.items():
                engine.register_primitive(primitive_id, primitive)
        except GovernanceError as e:
            console.print(f"❌ [red]{escape(str(e))}[/red]")
            sys.exit(2)
    else:
        raise click.BadParameter(
            f"'{target}' must be a GovernanceEngine or a mapping of id -> primitive"
        )

    data = {}
    if context_file is not None:
        with open(context_file, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise click.BadParameter("context file must contain a JSON object")

    ctx = DeterministicContext(data, logical_time)
    decision = engine.evaluate_with_logical_time(ctx, logical_time)

    if as_json:
        click.echo(decision.model_dump_json(indent=2))
    else:
        render_decision(decision, console)

    if not decision.permitted:
        sys.exit(1)


@cli.command(name="rules")
def rules_cmd():
    """Show the loaded banned-token rules."""
    render_rules(get_determinism_enforcer().rules, console)


def main():
    cli()


if __name__ == "__main__":
    main()
