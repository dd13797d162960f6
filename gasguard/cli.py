"""
GasGuard CLI — scan contracts from the command line.

  gasguard scan <file>          scan one .rs / .vy file
  gasguard scan-dir <dir>       scan every contract under a directory (alias: scanDirectory)
  gasguard analyze <path>       file or directory, whichever <path> is
  gasguard rules                list registered rules

Every scan command takes --format console|json and --engine grammar|heuristic|all.
Exit status: 0 on a completed scan, 1 on a scan error, 2 on usage errors.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from gasguard.config import settings
from gasguard.core.report import categorize, storage_savings, summarize
from gasguard.core.scanner import ContractScanner
from gasguard.exceptions import GasGuardError
from gasguard.models.rule_models import Severity, Violation
from gasguard.models.scan_models import Report, ScanResult

logger = logging.getLogger("gasguard.cli")

SEVERITY_COLORS = {
    Severity.ERROR: "red bold",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


# ── Rendering ──


def _violation_table(violations: list[Violation]) -> Table:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Line", justify="right", style="cyan", width=6)
    table.add_column("Severity", width=9)
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Subject")
    table.add_column("Description")
    for v in violations:
        color = SEVERITY_COLORS[v.severity]
        table.add_row(
            str(v.line_number),
            f"[{color}]{v.severity.value.upper()}[/{color}]",
            v.rule_id,
            escape(v.subject_name),
            escape(v.description),
        )
    return table


def print_result(result: ScanResult, console: Console) -> None:
    header = f"[bold cyan]{escape(result.source)}[/bold cyan]"
    if result.failed:
        console.print(f"{header} [red]failed: {escape(result.error)}[/red]")
        return
    if not result.violations:
        console.print(f"{header} [green]✓ no issues[/green]")
        return
    console.print(f"{header} ({len(result.violations)} issues)")
    console.print(_violation_table(result.violations))


def print_summary(violations: list[Violation], console: Console) -> None:
    tiers = categorize(violations)
    savings = storage_savings(violations)
    console.print()
    console.print(
        Panel.fit(
            f"[bold]{summarize(violations)}[/bold]\n"
            f"Errors: [red]{len(tiers.errors)}[/red] | "
            f"Warnings: [yellow]{len(tiers.warnings)}[/yellow] | "
            f"Info: [blue]{len(tiers.info)}[/blue]\n"
            f"Unused state variables: {savings.unused_field_count} "
            f"(~{savings.estimated_kb:.1f} KB, ~{savings.estimated_monthly_rent:.4f} XLM/month rent)",
            border_style="cyan",
        )
    )


def print_report(report: Report, console: Console) -> None:
    for result in report.results:
        print_result(result, console)
    print_summary(report.violations, console)
    if report.failed_files:
        console.print(f"[red]{len(report.failed_files)} file(s) could not be scanned[/red]")


# ── Commands ──


def cmd_scan(args: argparse.Namespace, scanner: ContractScanner, console: Console) -> int:
    result = scanner.scan_file(args.path)
    if args.format == "json":
        console.print_json(result.to_json())
    else:
        print_result(result, console)
        print_summary(result.violations, console)
    return 0


def cmd_scan_dir(args: argparse.Namespace, scanner: ContractScanner, console: Console) -> int:
    report = scanner.scan_directory(args.path, workers=args.workers)
    if args.format == "json":
        console.print_json(report.to_json())
    else:
        print_report(report, console)
    return 0


def cmd_analyze(args: argparse.Namespace, scanner: ContractScanner, console: Console) -> int:
    if Path(args.path).is_dir():
        return cmd_scan_dir(args, scanner, console)
    return cmd_scan(args, scanner, console)


def cmd_rules(args: argparse.Namespace, scanner: ContractScanner, console: Console) -> int:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Engine", style="cyan")
    table.add_column("Rule", no_wrap=True)
    table.add_column("Severity")
    table.add_column("Enabled", justify="center")
    table.add_column("Description")
    for info in scanner.rule_info():
        color = SEVERITY_COLORS[info.severity]
        table.add_row(
            info.engine,
            info.id,
            f"[{color}]{info.severity.value}[/{color}]",
            "[green]yes[/green]" if info.enabled else "[dim]no[/dim]",
            escape(info.description),
        )
    console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gasguard",
        description="Static analyzer for Soroban (.rs) and Vyper (.vy) contract storage and gas costs",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    def scan_options(p: argparse.ArgumentParser) -> None:
        p.add_argument("path", help="Contract file or directory")
        p.add_argument(
            "--format", choices=["console", "json"], default="console", help="Output format"
        )
        p.add_argument(
            "--engine",
            choices=["grammar", "heuristic", "all"],
            default=None,
            help=f"Engine for .rs files (default: {settings.rust_engine})",
        )
        p.add_argument("--disable", action="append", default=None, metavar="RULE_ID",
                       help="Disable a rule (repeatable)")

    p_scan = sub.add_parser("scan", help="Scan a single contract file")
    scan_options(p_scan)
    p_scan.set_defaults(handler=cmd_scan)

    p_dir = sub.add_parser("scan-dir", aliases=["scanDirectory"], help="Scan a directory")
    scan_options(p_dir)
    p_dir.add_argument("--workers", type=int, default=None, help="Worker threads")
    p_dir.set_defaults(handler=cmd_scan_dir)

    p_analyze = sub.add_parser("analyze", help="Scan a file or a directory")
    scan_options(p_analyze)
    p_analyze.add_argument("--workers", type=int, default=None, help="Worker threads")
    p_analyze.set_defaults(handler=cmd_analyze)

    p_rules = sub.add_parser("rules", help="List registered rules")
    p_rules.add_argument("--engine", choices=["grammar", "heuristic", "all"], default=None)
    p_rules.add_argument("--disable", action="append", default=None, metavar="RULE_ID")
    p_rules.set_defaults(handler=cmd_rules)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console = Console()

    try:
        scanner = ContractScanner(rust_engine=args.engine, disabled_rules=args.disable)
        return args.handler(args, scanner, console)
    except GasGuardError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        logger.debug("Scan failed", exc_info=True)
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Scan interrupted[/yellow]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
