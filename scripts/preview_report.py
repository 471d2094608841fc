#!/usr/bin/env python3
"""
ReportQL report preview

Compiles a report request JSON file and prints the SQL the backend
would run, the JOIN chain it inferred, and anything it had to drop.
Pass --execute to run the statement against DATABASE_URL.
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from packages.core.compiler import CompiledReport, ReportCompileError, ReportCompiler
from packages.core.schema_registry.registry import RelationGraphError, load_relation_graph
from packages.core.sql_ast.models import ReportRequest
from packages.db.base import get_engine
from packages.db.catalog import CatalogReader
from packages.db.execution import QueryExecutionError, builder_query


console = Console()


# -----------------------------
# Display Helpers
# -----------------------------


def show_joins(compiled: CompiledReport):
    """Display the inferred JOIN chain."""
    plan = compiled.join_plan
    if not plan.joins:
        console.print(f"[green]✓[/green] Single table report: {plan.base_table}")
        return

    chain = " → ".join(plan.included_tables)
    console.print(f"[green]✓[/green] Joins resolved: {chain}")


def show_sql(sql_text: str):
    """Display the compiled SQL."""
    syntax = Syntax(sql_text, "sql", theme="monokai", line_numbers=False)
    console.print(Panel(
        syntax,
        title="[bold yellow]Compiled SQL[/bold yellow]",
        border_style="yellow",
    ))


def show_dropped(compiled: CompiledReport):
    """Display request items the compiler left out."""
    if not compiled.dropped:
        return

    table = Table(
        title="[bold yellow]Dropped from the statement[/bold yellow]",
        box=box.ROUNDED,
        header_style="bold magenta",
    )
    table.add_column("Kind", style="yellow")
    table.add_column("Subject", style="cyan")
    table.add_column("Reason")
    for artifact in compiled.dropped:
        table.add_row(artifact.kind.value, artifact.subject, artifact.reason)
    console.print(table)


def show_results(rows, columns):
    """Display query results in a table."""
    if not rows:
        console.print("[dim]No results found.[/dim]")
        return

    table = Table(
        title=f"[bold cyan]Results ({len(rows)} rows)[/bold cyan]",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta",
    )

    for col in columns:
        table.add_column(str(col), style="cyan")

    for row in rows[:50]:  # Limit display to 50 rows
        table.add_row(*[str(row[c]) if row[c] is not None else "NULL" for c in columns])

    if len(rows) > 50:
        console.print(f"[dim](Showing first 50 of {len(rows)} rows)[/dim]")

    console.print(table)


def show_error(title: str, message: str):
    """Display an error message."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


# -----------------------------
# Main
# -----------------------------


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Compile a report request and print its SQL.")
    parser.add_argument("request", type=Path, help="Path to a report request JSON file")
    parser.add_argument(
        "--graph-source",
        default="static",
        choices=["static", "file", "catalog"],
        help="Where join edges come from (default: static)",
    )
    parser.add_argument("--graph-path", help="Relation graph JSON, for --graph-source file")
    parser.add_argument("--execute", action="store_true", help="Run the statement and show rows")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        payload = json.loads(args.request.read_text(encoding="utf-8"))
        request = ReportRequest.model_validate(payload)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        show_error("Invalid Request", str(e))
        return 1

    engine = get_engine() if args.execute or args.graph_source == "catalog" else None

    try:
        catalog = None
        if args.graph_source == "catalog":
            catalog = CatalogReader(engine)
        graph = load_relation_graph(args.graph_source, path=args.graph_path, catalog=catalog)
        compiled = ReportCompiler(graph=graph).compile(request)
    except (RelationGraphError, ReportCompileError) as e:
        show_error("Compilation Error", str(e))
        return 1

    show_joins(compiled)
    console.print()
    show_sql(compiled.to_sql())
    show_dropped(compiled)

    if args.execute:
        with console.status("[bold cyan]Executing query...[/bold cyan]", spinner="dots"):
            try:
                execution = builder_query(engine, compiled.parts())
            except QueryExecutionError as e:
                show_error("Execution Error", str(e))
                return 1
        console.print()
        show_results(execution.rows, execution.columns)

    return 0


if __name__ == "__main__":
    sys.exit(main())
