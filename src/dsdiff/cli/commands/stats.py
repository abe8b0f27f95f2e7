"""
Stats Command - Summarize one docstore snapshot.
"""

import json
import sys

import click
from rich.console import Console
from rich.table import Table

from ...core.extractor import NodeExtractor
from ...core.graph import GraphIndex, GraphModelBuilder
from ..utils import echo_error, load_snapshot

console = Console()


@click.command()
@click.argument("snapshot_file", type=click.Path())
@click.option("--json", "as_json", is_flag=True, help="Output statistics as JSON")
def stats(snapshot_file: str, as_json: bool):
    """
    Show node counts, links, orphans and components of a snapshot.
    """
    document = load_snapshot(snapshot_file)
    if document is None:
        sys.exit(2)

    nodes = NodeExtractor().extract(document)
    if not nodes:
        echo_error(f"{snapshot_file}: no docstore nodes found.")
        sys.exit(2)

    graph = GraphModelBuilder().build(nodes)
    summary = GraphIndex(graph).get_stats()

    if as_json:
        click.echo(json.dumps(summary, indent=2))
        return

    table = Table(title=f"📊 {snapshot_file}")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Nodes", str(summary["total_nodes"]))
    for node_type, count in summary["nodes_by_type"].items():
        table.add_row(f"  {node_type}", str(count))
    table.add_row("Links", str(summary["total_links"]))
    table.add_row("Orphans", str(summary["orphans"]))
    table.add_row("Components", str(summary["components"]))
    console.print(table)
