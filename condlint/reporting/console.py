# Rich console output: render findings grouped by file, plus a plain one-line form.

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from condlint.findings.models import SEVERITIES, Finding

SEVERITY_STYLE = {
    "error": "bold red",
    "warning": "bold yellow",
    "style": "bold cyan",
    "info": "bold blue",
}

DEFAULT_SEVERITY_STYLE = "bold white"


def _severity_style(severity: str) -> str:
    return SEVERITY_STYLE.get(severity.lower(), DEFAULT_SEVERITY_STYLE)


def _sorted_by_position(findings: Sequence[Finding]) -> list[Finding]:
    return sorted(findings, key=lambda f: (f.location.line, f.location.column))


def format_plain(finding: Finding) -> str:
    """Format one finding as ``path:line:col: SEVERITY [rule] message``."""
    loc = finding.location
    return f"{loc.path}:{loc.line}:{loc.column}: {finding.severity.upper()} [{finding.rule_id}] {finding.message}"


def print_plain(
    findings: Sequence[Finding],
    verbose: bool = False,
    console: Optional[Console] = None,
) -> None:
    """Print findings one per line (grep-friendly); with verbose, add help lines."""
    console = console or Console(highlight=False)
    if not findings:
        console.print("No findings.", markup=False)
        return
    for f in sorted(findings, key=lambda x: (str(x.location.path), x.location.line, x.location.column)):
        console.print(format_plain(f), markup=False, soft_wrap=True)
        if verbose and f.help:
            console.print(f"    help: {f.help}", markup=False, soft_wrap=True)


def print_findings(
    findings: Sequence[Finding],
    analyzed_files: Sequence[Path] | None = None,
    verbose: bool = False,
    console: Optional[Console] = None,
) -> None:
    """
    Print findings with Rich, grouped by file and colored by severity.

    Snippets are shown when available; help text is shown with verbose.
    If analyzed_files is given, a per-file summary table follows.
    """
    console = console or Console()

    if not findings and not analyzed_files:
        console.print(
            Panel(
                "[green]No issues found.[/green]",
                title="condlint",
                border_style="green",
                box=box.ROUNDED,
            )
        )
        return

    by_file: dict[str, list[Finding]] = {}
    for f in findings:
        by_file.setdefault(str(f.location.path), []).append(f)

    for path in sorted(by_file):
        file_findings = _sorted_by_position(by_file[path])

        console.print()
        console.print(Panel(
            f"[bold cyan]{path}[/bold cyan]",
            box=box.SIMPLE_HEAD,
            border_style="blue",
            padding=(0, 1),
        ))

        table = Table(
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE,
            padding=(0, 1),
            expand=False,
        )
        table.add_column("Line", justify="right", style="dim", width=5)
        table.add_column("Col", justify="right", style="dim", width=4)
        table.add_column("Severity", width=9)
        table.add_column("Rule", width=22)
        table.add_column("Message", style="white")

        for f in file_findings:
            loc = f.location
            table.add_row(
                str(loc.line),
                str(loc.column),
                Text(f.severity.upper(), style=_severity_style(f.severity)),
                Text(f"[{f.rule_id}]", style="dim"),
                f.message,
            )
        console.print(table)

        for f in file_findings:
            if f.location.snippet:
                # Only the first line; conditionals can span several.
                first_line = f.location.snippet.strip().splitlines()[0]
                console.print(Text.assemble(("  |-- ", "dim"), first_line))
            if verbose and f.help:
                console.print(Text.assemble(("      help: ", "dim"), f.help))
        console.print()

    if analyzed_files:
        _print_file_summary_table(findings, analyzed_files, console)

    _print_summary(findings, console)


def _print_file_summary_table(
    findings: Sequence[Finding],
    analyzed_files: Sequence[Path],
    console: Console,
) -> None:
    """Print a table of clean vs flagged files."""
    by_path: dict[str, int] = {}
    for f in findings:
        key = str(f.location.path)
        by_path[key] = by_path.get(key, 0) + 1

    table = Table(
        title="Files Summary",
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    table.add_column("File", style="white")
    table.add_column("Status", width=10)
    table.add_column("Findings", justify="right", width=8)

    flagged = sorted((p for p in analyzed_files if str(p) in by_path), key=str)
    clean = sorted((p for p in analyzed_files if str(p) not in by_path), key=str)
    for p in flagged:
        table.add_row(str(p), Text("FLAGGED", style="bold yellow"), str(by_path[str(p)]))
    for p in clean:
        table.add_row(str(p), Text("OK", style="bold green"), "0")

    console.print()
    console.print(Panel(table, border_style="cyan", box=box.ROUNDED))


def _print_summary(findings: Sequence[Finding], console: Console) -> None:
    by_severity: dict[str, int] = {}
    for f in findings:
        s = f.severity.lower()
        by_severity[s] = by_severity.get(s, 0) + 1

    total = len(findings)
    summary_parts = [f"[bold]{total} finding{'s' if total != 1 else ''}[/bold]"]
    for sev in SEVERITIES:
        if sev in by_severity:
            summary_parts.append(f"[{_severity_style(sev)}]{by_severity[sev]} {sev}[/]")

    console.print()
    console.print(
        Panel(
            " | ".join(summary_parts),
            title="Summary",
            border_style="yellow" if total > 0 else "green",
            box=box.ROUNDED,
        )
    )
