"""
Chain flowcharts.

Renders the output of ``ChainExtractor`` either as one document per chain
or as a single document with one ``subgraph`` per chain. Node ids come
from ``ChainIdentityAllocator``; the grouped document shares one allocator
so subgraphs never collide.
"""

import logging
from typing import Dict, List, NamedTuple, Optional

from ..analysis.chains import ChainExtractor
from ..core.analysis import AnalysisIndex, AnalysisResult
from ..core.types import Chain, NodeKey
from .escaping import escape_text
from .identity import ChainIdentityAllocator
from .styles import FlowchartWriter

logger = logging.getLogger(__name__)

CHAIN_ARROW = "-->"
APPLY_STYLES_HEADING = "Apply styles to specific nodes"


class ChainDiagram(NamedTuple):
    name: str
    diagram: str


def _emit_chain_nodes(
    writer: FlowchartWriter,
    chain: Chain,
    ids: Dict[NodeKey, str],
    index: AnalysisIndex,
    indent: str,
) -> None:
    for node in chain.nodes:
        category = index.category_of(node.type_name)
        writer.node(
            ids[node],
            category,
            node.simple_name,
            aggregate_root=index.is_aggregate_root(node.type_name),
            indent=indent,
        )


def _emit_chain_edges(writer: FlowchartWriter, chain: Chain, ids: Dict[NodeKey, str]) -> None:
    for edge in chain.edges:
        source_id = ids.get(edge.source)
        target_id = ids.get(edge.target)
        if source_id is None or target_id is None:
            logger.debug("Dropping chain edge %s -> %s in %s", edge.source, edge.target, chain.name)
            continue
        writer.edge(source_id, CHAIN_ARROW, target_id, edge.label)


def render_chain_flowchart(chain: Chain, index: AnalysisIndex,
                           allocator: Optional[ChainIdentityAllocator] = None) -> str:
    """One self-contained ``flowchart TD`` document for ``chain``."""
    allocator = allocator or ChainIdentityAllocator()
    ids = allocator.assign(chain.nodes)

    writer = FlowchartWriter("flowchart TD")
    writer.comment(escape_text(chain.name))
    writer.blank()

    _emit_chain_nodes(writer, chain, ids, index, indent="    ")
    writer.blank()

    writer.comment("Chain Relationships")
    _emit_chain_edges(writer, chain, ids)
    writer.blank()

    writer.style_block(heading="Chain Styles", assignment_heading=APPLY_STYLES_HEADING)
    return writer.render()


def render_chain_flowcharts(analysis: AnalysisResult) -> List[ChainDiagram]:
    """One document per extracted chain, each numbered from ``N1``."""
    index = analysis.index
    return [
        ChainDiagram(chain.name, render_chain_flowchart(chain, index))
        for chain in ChainExtractor(analysis).extract()
    ]


def render_command_chain_flowcharts(analysis: AnalysisResult) -> List[ChainDiagram]:
    """One document per distinct (sender, command) pair."""
    index = analysis.index
    return [
        ChainDiagram(chain.name, render_chain_flowchart(chain, index))
        for chain in ChainExtractor(analysis).command_chains()
    ]


def render_multi_chain_flowchart(analysis: AnalysisResult, chains: Optional[List[Chain]] = None) -> str:
    """All chains in one document, one labelled ``subgraph`` per chain."""
    index = analysis.index
    if chains is None:
        chains = ChainExtractor(analysis).extract()

    allocator = ChainIdentityAllocator()
    chain_ids = [allocator.assign(chain.nodes) for chain in chains]

    writer = FlowchartWriter("flowchart TD")
    for i, (chain, ids) in enumerate(zip(chains, chain_ids), start=1):
        writer.raw(f'    subgraph SG{i} ["{escape_text(chain.name)}"]')
        _emit_chain_nodes(writer, chain, ids, index, indent="        ")
        writer.raw("    end")
        writer.blank()

    writer.comment("Chain Internal Relationships")
    for chain, ids in zip(chains, chain_ids):
        _emit_chain_edges(writer, chain, ids)
    writer.blank()

    writer.style_block(heading="Multi-Chain Styles", assignment_heading=APPLY_STYLES_HEADING)
    return writer.render()
