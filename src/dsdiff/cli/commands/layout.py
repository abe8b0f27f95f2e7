"""
Layout Command - Run the force layout for one view and emit plain data.

The output is what an interactive renderer consumes: node positions and
statuses, links, the auto-fit viewport transform and per-node tooltip
fields.
"""

import json
import sys
from pathlib import Path
from typing import Tuple

import click

from ...config import load_config
from ...core.graph import GraphIndex, filter_graph
from ...core.presentation import describe_node, legend
from ...core.types import NodeType
from ...layout.simulation import LayoutEngine
from ...layout.viewport import ViewportController
from ..utils import echo_info, echo_success, echo_warning, load_comparison

NO_GRAPH_MESSAGE = "No graph data to display. Please analyze docstores with node relationships."


@click.command()
@click.argument("before_file", type=click.Path())
@click.argument("after_file", type=click.Path())
@click.option("--view", type=click.Choice(["before", "after"]), default="after",
              help="Which snapshot's graph to lay out")
@click.option("--type", "node_types", multiple=True,
              type=click.Choice([t.value for t in NodeType]),
              help="Node types to keep (repeatable, default: all)")
@click.option("--ticks", type=click.IntRange(min=1), default=300,
              help="Number of simulation frames to run")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="YAML config file (default: .dsdiff/config.yaml)")
@click.option("--output", "-o", type=click.Path(), help="Write JSON to file instead of stdout")
def layout(
    before_file: str,
    after_file: str,
    view: str,
    node_types: Tuple[str, ...],
    ticks: int,
    config_path: str | None,
    output: str | None,
):
    """
    Lay out the before or after graph and print it as JSON.
    """
    comparison = load_comparison(before_file, after_file)
    if comparison is None:
        sys.exit(2)

    settings = load_config(Path(config_path) if config_path else None)
    allowed = node_types or tuple(t.value for t in NodeType)
    graph = filter_graph(comparison.graph_for(view), allowed)

    if not graph.nodes:
        echo_warning(NO_GRAPH_MESSAGE)

    engine = LayoutEngine(graph, settings.layout)
    viewport = ViewportController(engine, settings.viewport)
    for _ in range(ticks):
        engine.step()
        viewport.on_frame()

    snapshot = engine.snapshot()
    index = GraphIndex(snapshot)
    payload = {
        "view": view,
        "state": engine.state.value,
        "ticks": engine.tick_count,
        "transform": viewport.transform.to_dict(),
        "graph": snapshot.to_dict(),
        "details": {node.id: describe_node(node, index) for node in snapshot.nodes},
        "legend": legend(),
    }
    text = json.dumps(payload, indent=2)

    if output:
        Path(output).write_text(text)
        echo_success(f"Generated: {output}")
        echo_info(f"{len(snapshot.nodes)} nodes, {len(snapshot.links)} links, state {engine.state.value}")
    else:
        click.echo(text)
