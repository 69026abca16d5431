"""
Stats Command - Summarise an analysis result.

Counts elements per category, relationships per kind, chain roots and
references that do not resolve to any element.
"""

import json
from collections import Counter
from typing import Any, Dict

import click
from rich.console import Console
from rich.table import Table

from ...analysis.chains import ChainExtractor
from ...core.analysis import AnalysisResult
from ...core.graph import FlowGraph
from ..utils import echo_warning, load_analysis

console = Console()


def collect_stats(analysis: AnalysisResult) -> Dict[str, Any]:
    extractor = ChainExtractor(analysis)
    graph = FlowGraph.from_analysis(analysis)
    elements = Counter(category.value for category, _ in analysis.iter_elements())
    relationships = Counter(rel.call_type for rel in analysis.relationships)
    unresolved = analysis.index.unresolved_references()
    graph_stats = graph.get_stats()

    return {
        "elements": dict(sorted(elements.items())),
        "relationships": dict(sorted(relationships.items())),
        "roots": len(extractor.discover_roots()),
        "command_chains": len(extractor.command_chains()),
        "unresolved_references": len(unresolved),
        "orphans": graph_stats["orphans"],
        "has_cycles": graph_stats["has_cycles"],
    }


def _counter_table(title: str, label: str, counts: Dict[str, int]) -> Table:
    table = Table(title=title)
    table.add_column(label, style="cyan")
    table.add_column("Count", justify="right")
    for key, value in counts.items():
        table.add_row(key, str(value))
    return table


@click.command()
@click.argument("analysis_file", type=click.Path())
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(analysis_file: str, as_json: bool):
    """
    Show element, relationship and chain statistics.
    """
    analysis = load_analysis(analysis_file)
    if analysis is None:
        raise SystemExit(1)

    data = collect_stats(analysis)

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    console.print(_counter_table("Elements", "Category", data["elements"]))
    console.print(_counter_table("Relationships", "Call type", data["relationships"]))

    summary = Table(title="Chains", show_header=False)
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", justify="right")
    summary.add_row("Chain roots", str(data["roots"]))
    summary.add_row("Command chains", str(data["command_chains"]))
    summary.add_row("Orphan elements", str(data["orphans"]))
    summary.add_row("Cycles", "yes" if data["has_cycles"] else "no")
    console.print(summary)

    if data["unresolved_references"]:
        echo_warning(f"{data['unresolved_references']} reference(s) do not resolve to any element")
