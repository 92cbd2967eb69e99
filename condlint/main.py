from __future__ import annotations

"""
Typer CLI entry point and orchestration of a lint run.

``condlint analyze TARGET``:
- accepts a .c/.h file or a directory (searched with traversal.find_source_files)
- builds a FileContext for each file
- runs every enabled rule and applies severity overrides
- prints findings (Rich tables, or one line per finding with --plain)

Exit status is 0 when nothing is found and 1 when findings were reported.
"""

import logging
from pathlib import Path
from typing import List

import typer

from condlint.config import Config, apply_severity, build_config, get_enabled_rules
from condlint.context import load_contexts
from condlint.findings.models import Finding
from condlint.parser import create_parser
from condlint.reporting.console import print_findings, print_plain
from condlint.rules.base import RULES
from condlint.traversal import find_source_files, is_source_file

logger = logging.getLogger(__name__)

app = typer.Typer(help="condlint - flags conditionals used inside the conditions of other conditionals in C code.")


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _collect_files(target: Path, include_headers: bool) -> List[Path]:
    """
    Resolve a target path into the list of files to analyze.

    - A .c (or, with headers, .h) file is analyzed on its own.
    - A directory is searched recursively.
    """
    if target.is_file():
        if not is_source_file(target, include_headers=True):
            raise typer.BadParameter(f"Target file must have a .c or .h extension, got: {target}")
        return [target]

    if target.is_dir():
        files = find_source_files(target, include_headers=include_headers)
        if not files:
            logger.warning("No source files found under %s", target)
        return files

    raise typer.BadParameter(f"Target path is neither a file nor a directory: {target}")


def run_rules(files: List[Path], config: Config) -> List[Finding]:
    """Run every enabled rule on every readable file and return all findings."""
    rules = list(get_enabled_rules(config))
    parser = create_parser()
    findings: List[Finding] = []

    # Unreadable files are dropped (and logged) by load_contexts
    for ctx in load_contexts(files, parser=parser, extra_macro_names=config.macro_names):
        for rule in rules:
            try:
                rule_findings = rule.run(ctx, config)
            except Exception:
                logger.exception("Rule %s failed on %s", rule.id, ctx.path)
                continue
            findings.extend(apply_severity(f, config) for f in rule_findings)

    return findings


@app.command()
def analyze(
    target: Path = typer.Argument(
        ...,
        exists=True,
        readable=True,
        resolve_path=True,
        help="C file or directory to analyze.",
    ),
    headers: bool = typer.Option(False, "--headers", help="Also analyze .h files found in directories."),
    disable: List[str] = typer.Option([], "--disable", help="Rule id to turn off (repeatable)."),
    severity: List[str] = typer.Option([], "--severity", help="Override a rule's severity, as RULE=LEVEL (repeatable)."),
    macro: List[str] = typer.Option([], "--macro", help="Treat NAME(...) as a macro invocation (repeatable)."),
    plain: bool = typer.Option(False, "--plain", help="One finding per line instead of tables."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show help text for each finding."),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    """Analyze a single C file or every C file under a directory."""
    _configure_logging(debug)

    try:
        config = build_config(disabled=disable, severities=severity, macros=macro, include_headers=headers)
    except (KeyError, ValueError) as exc:
        raise typer.BadParameter(str(exc).strip("'\"")) from exc

    if not get_enabled_rules(config):
        typer.echo("No rules are enabled in the current configuration.")
        raise typer.Exit(code=1)

    files = _collect_files(target, include_headers=config.include_headers)
    findings = run_rules(files, config)

    if plain:
        print_plain(findings, verbose=verbose)
    else:
        print_findings(findings, analyzed_files=files, verbose=verbose)

    if findings:
        raise typer.Exit(code=1)


@app.command("rules")
def list_rules() -> None:
    """List the available rules."""
    for rule_id in sorted(RULES):
        rule_cls = RULES[rule_id]
        typer.echo(f"{rule_id} [{rule_cls.category}] {rule_cls.description}")


def main() -> None:
    """Entry point for the ``condlint`` script and ``python -m condlint.main``."""
    app()


if __name__ == "__main__":
    main()
