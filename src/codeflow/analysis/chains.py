"""
Chain Extraction.

Enumerates independent execution chains, each anchored at a node that
nothing else in the snapshot triggers:

    Controller.Post --sends--> CreateOrderCommand --execute--> Order::Create
        --publishes--> OrderCreatedDomainEvent --handles--> ...

Every chain is traversed with its own visited set, so the same element may
appear (under a fresh diagram id) in several chains. Re-entering a node
that was already visited in the current chain never re-expands it, which
is what keeps cyclic inputs finite; only the connecting edge is added.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from ..core.analysis import AnalysisResult
from ..core.types import CallKind, Chain, ChainEdge, NodeKey

logger = logging.getLogger(__name__)

HANDLER_ENTRY_METHOD = "Handle"

# Substrings of call types whose target counts as triggered from upstream
_UPSTREAM_MARKERS = ("EventToHandler", "ToIntegrationEvent", "ToDomainEvent")


@dataclass
class TraversalContext:
    """Mutable state owned by exactly one chain build."""
    nodes: List[NodeKey] = field(default_factory=list)
    edges: List[ChainEdge] = field(default_factory=list)
    visited: Set[NodeKey] = field(default_factory=set)

    def visit(self, key: NodeKey) -> bool:
        """Record ``key`` as part of the chain; False if it was already there."""
        if key in self.visited:
            return False
        self.visited.add(key)
        self.nodes.append(key)
        return True

    def connect(self, source: NodeKey, target: NodeKey, label: str) -> None:
        edge = ChainEdge(source, target, label)
        if edge not in self.edges:
            self.edges.append(edge)


class ChainExtractor:
    """
    Builds chains from an ``AnalysisResult``.

    The extractor holds no per-chain state; every ``build_chain`` call gets
    a fresh ``TraversalContext``.
    """

    def __init__(self, analysis: AnalysisResult):
        self.analysis = analysis
        self.index = analysis.index

    # --- Root discovery ---

    def upstream_keys(self) -> Set[NodeKey]:
        """Keys that are the target of an architectural trigger."""
        upstream: Set[NodeKey] = set()
        for rel in self.analysis.relationships:
            if rel.call_type == CallKind.COMMAND_TO_AGGREGATE_METHOD:
                upstream.add(NodeKey(rel.target_type, rel.target_method))
            elif any(marker in rel.call_type for marker in _UPSTREAM_MARKERS):
                upstream.add(NodeKey(rel.target_type))
        return upstream

    def discover_roots(self) -> List[NodeKey]:
        """
        Chain roots in precedence order.

        1. Controller methods that send a command.
        2. Domain event handlers nothing triggers.
        3. Integration event handlers nothing triggers.
        """
        upstream = self.upstream_keys()
        roots: List[NodeKey] = []
        seen: Set[NodeKey] = set()

        def add(key: NodeKey) -> None:
            if key not in upstream and key not in seen:
                seen.add(key)
                roots.append(key)

        for controller in self.analysis.controllers:
            for rel in self.index.outgoing(controller.full_name, CallKind.METHOD_TO_COMMAND):
                add(NodeKey(controller.full_name, rel.source_method))

        handlers = [*self.analysis.domain_event_handlers, *self.analysis.integration_event_handlers]
        for handler in handlers:
            if NodeKey(handler.full_name) in upstream:
                continue
            add(NodeKey(handler.full_name, HANDLER_ENTRY_METHOD))

        logger.debug("Discovered %d chain roots", len(roots))
        return roots

    # --- Chain building ---

    def build_chain(self, root: NodeKey) -> Chain:
        """Traverse from ``root`` and return its self-contained chain."""
        ctx = TraversalContext()
        self._from_root(root, ctx)
        chain = Chain(name=root.simple_name, root=root, nodes=ctx.nodes, edges=ctx.edges)
        logger.debug("Chain %s: %d nodes, %d edges", chain.name, len(chain.nodes), len(chain.edges))
        return chain

    def extract(self) -> List[Chain]:
        """One chain per discovered root, in root order."""
        return [self.build_chain(root) for root in self.discover_roots()]

    def command_chains(self) -> List[Chain]:
        """
        One chain per distinct (sender, command) pair.

        Senders are the sources of ``MethodToCommand`` relationships (grouped
        by sender type in first-seen order), followed by the commands listed
        on integration event handlers.
        """
        pairs: List[Tuple[NodeKey, str, str]] = []
        seen: Set[Tuple[str, str]] = set()

        by_sender: Dict[str, list] = {}
        for rel in self.analysis.relationships:
            if rel.call_type == CallKind.METHOD_TO_COMMAND:
                by_sender.setdefault(rel.source_type, []).append(rel)

        for sender, relations in by_sender.items():
            sender_name = NodeKey(sender).simple_name
            for rel in relations:
                if (sender, rel.target_type) in seen:
                    continue
                seen.add((sender, rel.target_type))
                name = f"{sender_name} -> {NodeKey(rel.target_type).simple_name}"
                pairs.append((NodeKey(sender, rel.source_method), rel.target_type, name))

        for handler in self.analysis.integration_event_handlers:
            for command in handler.commands:
                if (handler.full_name, command) in seen:
                    continue
                seen.add((handler.full_name, command))
                name = f"{handler.name} -> {NodeKey(command).simple_name}"
                pairs.append((NodeKey(handler.full_name, HANDLER_ENTRY_METHOD), command, name))

        chains = []
        for root, command, name in pairs:
            ctx = TraversalContext()
            ctx.visit(root)
            self._from_command(command, root, ctx)
            chains.append(Chain(name=name, root=root, nodes=ctx.nodes, edges=ctx.edges))
        return chains

    # --- Traversal steps ---

    def _known(self, type_name: str, referenced_by: NodeKey) -> bool:
        if self.index.is_known(type_name):
            return True
        logger.debug("Skipping unresolved reference %s from %s", type_name, referenced_by)
        return False

    def _from_root(self, root: NodeKey, ctx: TraversalContext) -> None:
        if not ctx.visit(root):
            return

        for rel in self.index.outgoing(root.type_name, CallKind.METHOD_TO_COMMAND):
            if root.method and rel.source_method != root.method:
                continue
            if NodeKey(rel.target_type) not in ctx.visited:
                self._from_command(rel.target_type, root, ctx)

        for command in self.index.handler_commands(root.type_name) or []:
            if NodeKey(command) not in ctx.visited:
                self._from_command(command, root, ctx)

    def _from_command(self, command: str, source: NodeKey, ctx: TraversalContext) -> None:
        key = NodeKey(command)
        if not self._known(command, source) or not ctx.visit(key):
            return
        ctx.connect(source, key, "sends")

        for rel in self.index.outgoing(command, CallKind.COMMAND_TO_AGGREGATE_METHOD):
            target = NodeKey(rel.target_type, rel.target_method)
            if target in ctx.visited:
                ctx.connect(key, target, "execute")
            else:
                self._from_aggregate_method(target, key, ctx)

    def _from_aggregate_method(self, method_key: NodeKey, source: NodeKey, ctx: TraversalContext) -> None:
        if not self._known(method_key.type_name, source) or not ctx.visit(method_key):
            return
        ctx.connect(source, method_key, "execute")

        for rel in self.index.outgoing(method_key.type_name, CallKind.METHOD_TO_DOMAIN_EVENT):
            if rel.source_method != method_key.method:
                continue
            event = NodeKey(rel.target_type)
            if event in ctx.visited:
                ctx.connect(method_key, event, "publishes")
            else:
                self._from_domain_event(rel.target_type, method_key, ctx)

    def _from_domain_event(self, event_type: str, source: NodeKey, ctx: TraversalContext) -> None:
        event = NodeKey(event_type)
        if not self._known(event_type, source) or not ctx.visit(event):
            return
        ctx.connect(source, event, "publishes")

        for handler in self.index.domain_handlers_for(event_type):
            self._into_handler(handler.full_name, handler.commands, event, ctx)

        for converter in self.index.converters_for(event_type):
            converter_key = NodeKey(converter.full_name)
            if not ctx.visit(converter_key):
                continue
            ctx.connect(event, converter_key, "converts")
            integration_event = NodeKey(converter.integration_event_type)
            if integration_event in ctx.visited:
                ctx.connect(converter_key, integration_event, "to")
            else:
                self._from_integration_event(converter.integration_event_type, converter_key, ctx)

    def _from_integration_event(self, event_type: str, source: NodeKey, ctx: TraversalContext) -> None:
        event = NodeKey(event_type)
        if not self._known(event_type, source) or not ctx.visit(event):
            return
        ctx.connect(source, event, "to")

        for handler in self.index.integration_handlers_for(event_type):
            self._into_handler(handler.full_name, handler.commands, event, ctx)

    def _into_handler(self, handler_name: str, commands: List[str], event: NodeKey, ctx: TraversalContext) -> None:
        handler = NodeKey(handler_name)
        if not ctx.visit(handler):
            return
        ctx.connect(event, handler, "handles")

        for command in commands:
            if NodeKey(command) in ctx.visited:
                # Back-edge only; the command was already expanded in this chain
                ctx.connect(handler, NodeKey(command), "sends")
            else:
                self._from_command(command, handler, ctx)


def extract_chains(analysis: AnalysisResult) -> List[Chain]:
    """Convenience wrapper around ``ChainExtractor.extract``."""
    return ChainExtractor(analysis).extract()
