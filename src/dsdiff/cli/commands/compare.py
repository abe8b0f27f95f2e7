"""
Compare Command - Classify node changes between two docstore snapshots.

Usage:
    # Summary and changed ids
    dsdiff compare before.json after.json

    # Machine readable change set
    dsdiff compare before.json after.json --format json

    # CI usage - fail if anything changed
    dsdiff compare before.json after.json --fail-on-changes
"""

import json
import sys

import click
from rich.console import Console
from rich.table import Table

from ...analysis.diff_classifier import ChangeSet
from ..utils import echo_info, load_comparison

console = Console()

STATUS_STYLES = {
    "unchanged": "dim",
    "added": "green",
    "deleted": "red",
    "modified": "yellow",
}


@click.command()
@click.argument("before_file", type=click.Path())
@click.argument("after_file", type=click.Path())
@click.option("--format", "output_format", type=click.Choice(["text", "json", "markdown"]),
              default="text", help="Output format")
@click.option("--output", "-o", type=click.Path(), help="Write output to file")
@click.option("--show-unchanged", is_flag=True, help="Also list unchanged node ids")
@click.option("--fail-on-changes", is_flag=True, help="Exit 1 if any node changed")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output")
def compare(
    before_file: str,
    after_file: str,
    output_format: str,
    output: str | None,
    show_unchanged: bool,
    fail_on_changes: bool,
    quiet: bool,
):
    """
    Compare two docstore snapshots.

    Every node id is classified as added, deleted, modified (content hash
    changed) or unchanged.

    \b
    Exit Codes:
        0 - Success
        1 - Changes detected (with --fail-on-changes)
        2 - A file could not be read, or neither file holds docstore nodes
    """
    comparison = load_comparison(before_file, after_file)
    if comparison is None:
        sys.exit(2)

    changes = comparison.changes

    if output_format == "json":
        result = json.dumps(changes.to_dict(), indent=2)
    elif output_format == "markdown":
        result = changes.to_markdown()
    else:
        result = None

    if result is not None:
        if output:
            with open(output, "w") as f:
                f.write(result)
            if not quiet:
                echo_info(f"Report written to {output}")
        else:
            click.echo(result)
    else:
        _print_text(changes, before_file, after_file, show_unchanged, quiet)

    if fail_on_changes and changes.has_changes:
        sys.exit(1)


def _print_text(changes: ChangeSet, before_file: str, after_file: str,
                show_unchanged: bool, quiet: bool) -> None:
    """Print the change set as rich tables."""
    if not quiet:
        console.print()
        console.print("[bold]📊 Docstore Diff[/bold]")
        console.print(f"[dim]   {before_file} → {after_file}[/dim]")
        console.print()

    summary = Table(title=None if quiet else "Summary")
    summary.add_column("Status")
    summary.add_column("Nodes", justify="right")
    for status, count in changes.counts.items():
        style = STATUS_STYLES[status]
        summary.add_row(f"[{style}]{status.title()}[/{style}]", str(count))
    console.print(summary)

    if quiet:
        return

    sections = [
        ("added", "Added Nodes", [n.id for n in changes.added]),
        ("modified", "Modified Nodes", [m.id for m in changes.modified]),
        ("deleted", "Deleted Nodes", [n.id for n in changes.deleted]),
    ]
    if show_unchanged:
        sections.insert(0, ("unchanged", "Unchanged Nodes", [n.id for n in changes.unchanged]))

    for status, title, ids in sections:
        if not ids:
            continue
        style = STATUS_STYLES[status]
        console.print()
        console.print(f"[bold {style}]{title}[/bold {style}]")
        for node_id in ids:
            console.print(f"  {node_id}", markup=False, highlight=False)

    if not changes.has_changes:
        console.print()
        console.print("[dim]No changes detected.[/dim]")
