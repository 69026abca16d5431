"""
Flow graph backed by rustworkx.

Projects an ``AnalysisResult`` onto a directed multigraph keyed by qualified
type name. Edges come from the stored relationships plus the derived
handler -> command edges. The graph backs reachability queries and the
summary statistics shown by ``codeflow stats``; chain extraction itself
walks the ``AnalysisIndex`` directly because it needs method-level keys.

It manages:
- The bimap between qualified names and rustworkx integer indices.
- Category bookkeeping for per-category counts.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Set

import rustworkx as rx

from .analysis import AnalysisResult
from .types import CallKind, Category

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlowNode:
    qualified_name: str
    name: str
    category: Category


@dataclass(frozen=True)
class FlowEdge:
    source: str
    target: str
    call_type: str
    source_method: str = ""
    target_method: str = ""


class FlowGraph:
    """
    Directed multigraph of architectural elements.

    Features:
    - O(1) node lookup via name-to-index bimap
    - rustworkx traversals for descendants/ancestors and cycle detection
    """

    def __init__(self):
        self._graph = rx.PyDiGraph(multigraph=True)
        self._id_to_idx: Dict[str, int] = {}
        self._idx_to_id: Dict[int, str] = {}
        self._nodes_by_category: Dict[Category, Set[str]] = defaultdict(set)
        self._skipped_edges = 0

    @classmethod
    def from_analysis(cls, analysis: AnalysisResult) -> "FlowGraph":
        graph = cls()
        for category, element in analysis.iter_elements():
            if graph.has_node(element.full_name):
                continue
            graph.add_node(FlowNode(element.full_name, element.name, category))

        for rel in analysis.relationships:
            graph.add_edge(FlowEdge(
                rel.source_type, rel.target_type, rel.call_type,
                rel.source_method, rel.target_method,
            ))

        handlers = [*analysis.domain_event_handlers, *analysis.integration_event_handlers]
        for handler in handlers:
            for command in handler.commands:
                graph.add_edge(FlowEdge(
                    handler.full_name, command, CallKind.HANDLER_TO_COMMAND, "Handle", "",
                ))
        return graph

    def add_node(self, node: FlowNode) -> None:
        """Add or replace a node."""
        if node.qualified_name in self._id_to_idx:
            idx = self._id_to_idx[node.qualified_name]
            old: FlowNode = self._graph[idx]
            self._nodes_by_category[old.category].discard(node.qualified_name)
            self._graph[idx] = node
        else:
            idx = self._graph.add_node(node)
            self._id_to_idx[node.qualified_name] = idx
            self._idx_to_id[idx] = node.qualified_name
        self._nodes_by_category[node.category].add(node.qualified_name)

    def add_edge(self, edge: FlowEdge) -> bool:
        """Add a directed edge; returns False when an endpoint is unknown."""
        u_idx = self._id_to_idx.get(edge.source)
        v_idx = self._id_to_idx.get(edge.target)
        if u_idx is None or v_idx is None:
            self._skipped_edges += 1
            logger.debug("Skipping %s edge %s -> %s: unknown endpoint",
                         edge.call_type, edge.source, edge.target)
            return False
        self._graph.add_edge(u_idx, v_idx, edge)
        return True

    def get_node(self, qualified_name: str) -> Optional[FlowNode]:
        idx = self._id_to_idx.get(qualified_name)
        if idx is None:
            return None
        return self._graph[idx]

    def has_node(self, qualified_name: str) -> bool:
        return qualified_name in self._id_to_idx

    def get_nodes_by_category(self, category: Category) -> List[FlowNode]:
        return sorted(
            (self.get_node(name) for name in self._nodes_by_category.get(category, set())),
            key=lambda n: n.qualified_name,
        )

    def get_descendants(self, qualified_name: str) -> Set[str]:
        """All names strictly reachable downstream."""
        if qualified_name not in self._id_to_idx:
            return set()
        indices = rx.descendants(self._graph, self._id_to_idx[qualified_name])
        return {self._idx_to_id[idx] for idx in indices}

    def get_ancestors(self, qualified_name: str) -> Set[str]:
        """All names strictly reaching ``qualified_name``."""
        if qualified_name not in self._id_to_idx:
            return set()
        indices = rx.ancestors(self._graph, self._id_to_idx[qualified_name])
        return {self._idx_to_id[idx] for idx in indices}

    def has_cycles(self) -> bool:
        return not rx.is_directed_acyclic_graph(self._graph)

    def iter_nodes(self) -> Iterator[FlowNode]:
        return iter(self._graph.nodes())

    def iter_edges(self) -> Iterator[FlowEdge]:
        return iter(self._graph.edges())

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()

    @property
    def skipped_edge_count(self) -> int:
        return self._skipped_edges

    def get_stats(self) -> Dict[str, Any]:
        node_counts = {
            category.value: len(names)
            for category, names in self._nodes_by_category.items()
            if names
        }
        edge_counts: Dict[str, int] = defaultdict(int)
        for edge in self.iter_edges():
            edge_counts[str(edge.call_type)] += 1

        orphans = sum(
            1 for idx in self._graph.node_indices()
            if self._graph.in_degree(idx) == 0 and self._graph.out_degree(idx) == 0
        )

        return {
            "total_nodes": self.node_count,
            "total_edges": self.edge_count,
            "nodes_by_category": dict(sorted(node_counts.items())),
            "edges_by_kind": dict(sorted(edge_counts.items())),
            "skipped_edges": self._skipped_edges,
            "orphans": orphans,
            "has_cycles": self.has_cycles(),
            "backend": "rustworkx",
        }
