"""
codeflow - Code-flow chains and Mermaid diagrams for layered architectures.

Given an analysis result (controllers, commands, aggregates, domain and
integration events, handlers, converters and the relationships between
them), codeflow derives independent execution chains and renders them as
Mermaid flowcharts and class diagrams.

Key Components:
- core: Analysis model, lookup index and flow graph
- analysis: Chain extraction
- render: Mermaid renderers and identity allocation
- graph: Standalone HTML page assembly

Usage:
    from codeflow import load_analysis_result, render_architecture_flowchart

    analysis = load_analysis_result("analysis.json").unwrap()
    print(render_architecture_flowchart(analysis))
"""

__version__ = "0.1.0"

from .analysis.chains import ChainExtractor, extract_chains
from .core.analysis import AnalysisResult, load_analysis_result
from .core.types import CallKind, Category, Chain, NodeKey, Relationship
from .render.chain_diagrams import (
    render_chain_flowcharts,
    render_command_chain_flowcharts,
    render_multi_chain_flowchart,
)
from .render.class_diagram import render_class_diagram
from .render.flowchart import (
    render_architecture_flowchart,
    render_command_flowchart,
    render_event_flowchart,
)

__all__ = [
    "__version__",
    "AnalysisResult",
    "load_analysis_result",
    "CallKind",
    "Category",
    "Chain",
    "NodeKey",
    "Relationship",
    "ChainExtractor",
    "extract_chains",
    "render_architecture_flowchart",
    "render_command_flowchart",
    "render_event_flowchart",
    "render_class_diagram",
    "render_chain_flowcharts",
    "render_command_chain_flowcharts",
    "render_multi_chain_flowchart",
]
