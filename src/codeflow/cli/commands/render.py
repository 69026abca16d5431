"""
Render Command - Emit one Mermaid diagram.

Prints the diagram to stdout, or writes it to a file with ``-o``.
"""

from typing import Callable, Dict, Optional

import click

from ...config import DIAGRAM_KINDS, load_config
from ...core.analysis import AnalysisResult
from ...render.chain_diagrams import render_multi_chain_flowchart
from ...render.class_diagram import render_class_diagram
from ...render.flowchart import (
    render_architecture_flowchart,
    render_command_flowchart,
    render_event_flowchart,
)
from ..utils import load_analysis, write_output


def _renderers(max_class_methods: int) -> Dict[str, Callable[[AnalysisResult], str]]:
    return {
        "architecture": render_architecture_flowchart,
        "command": render_command_flowchart,
        "event": render_event_flowchart,
        "class": lambda analysis: render_class_diagram(analysis, max_class_methods),
        "multi-chain": render_multi_chain_flowchart,
    }


@click.command()
@click.argument("analysis_file", type=click.Path())
@click.option("-d", "--diagram", type=click.Choice(DIAGRAM_KINDS), default="architecture",
              show_default=True, help="Diagram kind to render")
@click.option("-o", "--output", default=None, help="Write to this file instead of stdout")
def render(analysis_file: str, diagram: str, output: Optional[str]):
    """
    Render a Mermaid diagram from an analysis result.
    """
    analysis = load_analysis(analysis_file)
    if analysis is None:
        raise SystemExit(1)

    config = load_config()
    write_output(_renderers(config.max_class_methods)[diagram](analysis), output)
