"""
Whole-snapshot flowcharts: architecture, command-only and event-only.

Each renderer owns a fresh ``GlobalIdentityResolver``; relationships whose
endpoints were not emitted as nodes are dropped.
"""

import logging
from typing import Iterable, List, Set, Tuple

from ..core.analysis import AnalysisResult
from ..core.types import CallKind, Category, ElementInfo, Relationship
from .identity import GlobalIdentityResolver
from .styles import (
    COMMAND_LABELS,
    EVENT_ARROWS,
    EVENT_LABELS,
    FlowchartWriter,
    arrow_for,
    label_for,
    relationship_label,
)

logger = logging.getLogger(__name__)

ARCHITECTURE_SECTIONS: Tuple[Tuple[str, Tuple[Tuple[Category, str], ...]], ...] = (
    ("Controllers", ((Category.CONTROLLER, "controllers"),)),
    ("Commands", ((Category.COMMAND, "commands"),)),
    ("Entities", ((Category.ENTITY, "entities"),)),
    ("Domain Events", ((Category.DOMAIN_EVENT, "domain_events"),)),
    ("Integration Events", ((Category.INTEGRATION_EVENT, "integration_events"),)),
    ("Event Handlers", (
        (Category.DOMAIN_EVENT_HANDLER, "domain_event_handlers"),
        (Category.INTEGRATION_EVENT_HANDLER, "integration_event_handlers"),
    )),
    ("Integration Event Converters", (
        (Category.INTEGRATION_EVENT_CONVERTER, "integration_event_converters"),
    )),
)


def _emit_node(
    writer: FlowchartWriter,
    resolver: GlobalIdentityResolver,
    category: Category,
    element: ElementInfo,
) -> None:
    node_id = resolver.resolve(category, element.full_name)
    writer.node(node_id, category, element.name, getattr(element, "is_aggregate_root", False))


def _handler_command_edges(analysis: AnalysisResult) -> Iterable[Tuple[str, str]]:
    for handler in [*analysis.domain_event_handlers, *analysis.integration_event_handlers]:
        for command in handler.commands:
            yield handler.full_name, command


def render_architecture_flowchart(analysis: AnalysisResult) -> str:
    """Every element, every resolvable relationship and the derived handler commands."""
    writer = FlowchartWriter("flowchart TD")
    resolver = GlobalIdentityResolver()

    for heading, collections in ARCHITECTURE_SECTIONS:
        writer.comment(heading)
        for category, attr in collections:
            for element in getattr(analysis, attr):
                _emit_node(writer, resolver, category, element)
        writer.blank()

    writer.comment("Relationships")
    for rel in analysis.relationships:
        source_id = resolver.find(rel.source_type)
        target_id = resolver.find(rel.target_type)
        if source_id is None or target_id is None:
            logger.debug("Dropping %s edge %s -> %s", rel.call_type, rel.source_type, rel.target_type)
            continue
        writer.edge(source_id, arrow_for(rel.call_type), target_id, relationship_label(rel))

    for handler_name, command in _handler_command_edges(analysis):
        handler_id = resolver.find(handler_name)
        command_id = resolver.find(command)
        if handler_id is None or command_id is None:
            continue
        writer.edge(
            handler_id,
            arrow_for(CallKind.HANDLER_TO_COMMAND),
            command_id,
            label_for(CallKind.HANDLER_TO_COMMAND),
        )
    writer.blank()

    writer.style_block()
    return writer.render()


def _touched(relationships: List[Relationship]) -> Set[str]:
    names: Set[str] = set()
    for rel in relationships:
        names.add(rel.source_type)
        names.add(rel.target_type)
    return names


def render_command_flowchart(analysis: AnalysisResult) -> str:
    """Controllers, commands and entities connected by command relationships."""
    writer = FlowchartWriter("flowchart LR")
    resolver = GlobalIdentityResolver()

    relationships = [r for r in analysis.relationships if "Command" in r.call_type]
    touched = _touched(relationships)

    for category, attr in (
        (Category.CONTROLLER, "controllers"),
        (Category.COMMAND, "commands"),
        (Category.ENTITY, "entities"),
    ):
        for element in getattr(analysis, attr):
            if element.full_name in touched:
                _emit_node(writer, resolver, category, element)
    writer.blank()

    for rel in relationships:
        source_id = resolver.find(rel.source_type)
        target_id = resolver.find(rel.target_type)
        if source_id is None or target_id is None:
            continue
        label = COMMAND_LABELS.get(rel.call_type, "call")
        writer.raw(f"    {source_id} --> |{label}| {target_id}")
    writer.blank()

    writer.style_block(classes=("controller", "command", "entity"))
    return writer.render()


def render_event_flowchart(analysis: AnalysisResult) -> str:
    """
    Events, handlers and converters connected by event relationships.

    Only elements touched by an event/handler relationship are drawn;
    converters are drawn when their source domain event is.
    """
    writer = FlowchartWriter("flowchart TD")
    resolver = GlobalIdentityResolver()

    relationships = [
        r for r in analysis.relationships
        if "Event" in r.call_type or "Handler" in r.call_type
    ]
    touched = _touched(relationships)

    sections = (
        ("Domain Events", ((Category.DOMAIN_EVENT, "domain_events"),)),
        ("Integration Events", ((Category.INTEGRATION_EVENT, "integration_events"),)),
        ("Event Handlers", (
            (Category.DOMAIN_EVENT_HANDLER, "domain_event_handlers"),
            (Category.INTEGRATION_EVENT_HANDLER, "integration_event_handlers"),
        )),
    )
    for heading, collections in sections:
        writer.comment(heading)
        for category, attr in collections:
            for element in getattr(analysis, attr):
                if element.full_name in touched:
                    _emit_node(writer, resolver, category, element)
        writer.blank()

    writer.comment("Integration Event Converters")
    for converter in analysis.integration_event_converters:
        if converter.domain_event_type in touched:
            _emit_node(writer, resolver, Category.INTEGRATION_EVENT_CONVERTER, converter)
    writer.blank()

    for rel in relationships:
        source_id = resolver.find(rel.source_type)
        target_id = resolver.find(rel.target_type)
        if source_id is None or target_id is None:
            continue
        writer.edge(
            source_id,
            EVENT_ARROWS.get(rel.call_type, "-->"),
            target_id,
            EVENT_LABELS.get(rel.call_type, "processes"),
        )
    writer.blank()

    writer.style_block(classes=("domainEvent", "integrationEvent", "handler", "converter"))
    return writer.render()
