"""Rich rendering of compliance reports, lint results and governance decisions"""

from typing import Dict, List

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gsas.core.compliance_checker import ComplianceReport
from gsas.core.determinism_enforcer import DeterminismRules
from gsas.core.governance_engine import GovernanceDecision


def render_compliance_report(report: ComplianceReport, console: Console) -> None:
    """Display a compliance report as a rich table."""
    if report.compliant:
        console.print(f"✅ [green]Compliant[/green] (checked: {', '.join(report.checked)})")
        return

    table = Table(title="Compliance Violations")
    table.add_column("Primitive", style="cyan")
    table.add_column("Requirement", style="yellow")
    table.add_column("Details")
    for violation in report.violations:
        table.add_row(escape(violation.primitive), violation.requirement, escape(violation.details))

    console.print(table)
    console.print(f"❌ [red]{len(report.violations)} violation(s)[/red]")


def render_lint_results(results: Dict[str, List[str]], console: Console) -> None:
    """Display per-file determinism lint results."""
    for path, violations in results.items():
        if not violations:
            console.print(f"✅ {escape(path)}", highlight=False)
            continue
        console.print(f"❌ [red]{escape(path)}[/red]", highlight=False)
        for violation in violations:
            console.print(f"  • {violation}", highlight=False, markup=False)

    failed = sum(1 for v in results.values() if v)
    if failed:
        console.print(f"\n[red]{failed} of {len(results)} file(s) failed the determinism lint[/red]")
    else:
        console.print(f"\n[green]All {len(results)} file(s) passed[/green]")


def render_rules(rules: DeterminismRules, console: Console) -> None:
    """Display the loaded banned-token configuration."""
    table = Table(title="Determinism Rules")
    table.add_column("Category", style="cyan")
    table.add_column("Entries")
    table.add_row("banned_imports", ", ".join(rules.banned_imports))
    table.add_row("banned_functions", ", ".join(rules.banned_functions))
    table.add_row("dynamic_import_tokens", ", ".join(rules.dynamic_import_tokens))
    table.add_row("global_mutable_patterns", "\n".join(rules.global_mutable_patterns))
    console.print(table)


def render_decision(decision: GovernanceDecision, console: Console) -> None:
    """Display a governance decision with its signals and commitments."""
    table = Table(title="Governance Signals")
    table.add_column("#", justify="right")
    table.add_column("Primitive", style="cyan")
    table.add_column("Version")
    table.add_column("Valid")
    table.add_column("Commitment", overflow="fold")
    for i, signal in enumerate(decision.signals):
        table.add_row(
            str(i),
            escape(signal.primitive_id),
            escape(signal.version),
            "[green]yes[/green]" if signal.valid else "[red]no[/red]",
            decision.proof.signal_commitments[i],
        )
    console.print(table)

    if decision.permitted:
        console.print("✅ [green]PERMITTED[/green]")
    else:
        console.print("❌ [red]DENIED[/red]")
        for reason in decision.failure_reasons:
            console.print(f"  • {reason}", markup=False)
